from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple

from ..gestures import GestureType
from .fingers import FingerStates
from .landmarks import Point


class Vector(NamedTuple):
    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


ZERO = Vector(0.0, 0.0)


@dataclass(frozen=True)
class PinchState:
    """Pinch detection details for one frame."""

    distance: float  # Distance between thumb and index tips (normalized)
    threshold: float  # Effective threshold, adaptive or calibrated
    confidence: float
    is_pinching: bool
    is_custom_threshold: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "distance": self.distance,
            "threshold": self.threshold,
            "confidence": self.confidence,
            "isPinching": self.is_pinching,
            "isCustomThreshold": self.is_custom_threshold,
        }


@dataclass(frozen=True)
class GestureState:
    """The interpreted state of the tracked hand for one frame."""

    gesture: GestureType = GestureType.NONE
    gesture_confidence: float = 0.0
    pinch_state: PinchState | None = None
    openness: float = 0.0
    position: Vector = ZERO  # [-1, 1] with y pointing up
    hand_velocity: Vector = ZERO  # units per second
    finger_states: FingerStates = field(default_factory=FingerStates)
    handedness: str | None = None
    timestamp: float | None = None
    landmarks: tuple[Point, ...] | None = None  # The 21 points of the selected hand, not exported

    @classmethod
    def no_hand(cls, position: Vector = ZERO, timestamp: float | None = None) -> GestureState:
        """State for a frame without any (valid) hand. The last known position is kept."""
        return cls(position=position, timestamp=timestamp)

    @property
    def pinch(self) -> bool:
        return self.pinch_state is not None and self.pinch_state.is_pinching

    @property
    def has_hand(self) -> bool:
        return self.gesture != GestureType.NONE

    def to_dict(self) -> dict[str, Any]:
        """Export the state using the keys expected by the rendering side."""
        return {
            "gestureType": self.gesture.value,
            "gestureConfidence": self.gesture_confidence,
            "pinch": self.pinch,
            "pinchDetails": self.pinch_state.to_dict() if self.pinch_state else None,
            "openness": self.openness,
            "position": self.position.to_dict(),
            "handVelocity": self.hand_velocity.to_dict(),
            "fingerStates": self.finger_states.to_dict(),
            "handedness": self.handedness,
            "timestamp": self.timestamp,
        }


class HistoryEntry(NamedTuple):
    position: Vector
    openness: float
    pinch: bool
    timestamp: float
