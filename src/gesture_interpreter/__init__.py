"""Hand gesture interpretation (pinch, gestures, openness, motion) from MediaPipe hand landmarks."""

from .config import Config, InterpreterConfig
from .gestures import CLASSIFICATION_RULES, GestureRule, GestureType, classify
from .interpreter import GestureInterpreter, select_hand
from .models import (
    DetectedHand,
    FingerIndex,
    FingerStates,
    GestureHistory,
    GestureState,
    HandLandmark,
    PinchState,
    Point,
    Vector,
)

__all__ = [
    # Core classes
    "GestureInterpreter",
    "select_hand",
    # Models
    "DetectedHand",
    "FingerIndex",
    "FingerStates",
    "GestureHistory",
    "GestureState",
    "HandLandmark",
    "PinchState",
    "Point",
    "Vector",
    # Gesture classification
    "GestureType",
    "GestureRule",
    "CLASSIFICATION_RULES",
    "classify",
    # Configuration
    "Config",
    "InterpreterConfig",
]
