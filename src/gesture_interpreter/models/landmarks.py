from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum
from typing import TYPE_CHECKING, Any, NamedTuple, TypeAlias

import numpy as np

if TYPE_CHECKING:
    from ..mediapipe import NormalizedLandmark


class HandLandmark(IntEnum):
    """MediaPipe hand landmark indices."""

    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_FINGER_MCP = 5
    INDEX_FINGER_PIP = 6
    INDEX_FINGER_DIP = 7
    INDEX_FINGER_TIP = 8
    MIDDLE_FINGER_MCP = 9
    MIDDLE_FINGER_PIP = 10
    MIDDLE_FINGER_DIP = 11
    MIDDLE_FINGER_TIP = 12
    RING_FINGER_MCP = 13
    RING_FINGER_PIP = 14
    RING_FINGER_DIP = 15
    RING_FINGER_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


NB_HAND_LANDMARKS = len(HandLandmark)


class Point(NamedTuple):
    """A landmark in normalized camera space.

    Attributes:
        x: X coordinate, 0 (left) to 1 (right)
        y: Y coordinate, 0 (top) to 1 (bottom)
    """

    x: float
    y: float

    @classmethod
    def from_mediapipe(cls, normalized_landmark: NormalizedLandmark, mirroring: bool = False) -> Point:
        """Create a Point from a MediaPipe normalized landmark, mirroring the X coordinate if asked."""
        return cls(
            x=normalized_landmark.x if not mirroring else 1 - normalized_landmark.x,
            y=normalized_landmark.y,
        )


LandmarkSet: TypeAlias = Sequence[Point]


class DetectedHand(NamedTuple):
    """One hand as reported by the tracker for a frame."""

    landmarks: LandmarkSet
    score: float  # detection confidence, 0 to 1
    handedness: str | None = None


def landmarks_to_array(landmarks: LandmarkSet | None) -> np.ndarray[Any, Any] | None:
    """Convert a landmark set to a (21, 2) array, or None if it is not a complete hand."""
    if landmarks is None or len(landmarks) < NB_HAND_LANDMARKS:
        return None
    return np.array([(point[0], point[1]) for point in landmarks[:NB_HAND_LANDMARKS]], dtype=float)


def distance(points: np.ndarray[Any, Any], first: HandLandmark, second: HandLandmark) -> float:
    """Euclidean distance between two landmarks of a (21, 2) array."""
    return float(np.linalg.norm(points[first] - points[second]))
