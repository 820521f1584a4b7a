from .fingers import FingerIndex, FingerStates
from .history import GestureHistory
from .landmarks import DetectedHand, HandLandmark, Point
from .state import GestureState, HistoryEntry, PinchState, Vector

__all__ = [
    "DetectedHand",
    "FingerIndex",
    "FingerStates",
    "GestureHistory",
    "GestureState",
    "HandLandmark",
    "HistoryEntry",
    "PinchState",
    "Point",
    "Vector",
]
