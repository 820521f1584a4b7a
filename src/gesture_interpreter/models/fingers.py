from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Any, NamedTuple

import numpy as np

from .landmarks import HandLandmark

if TYPE_CHECKING:
    from ..config import FingerExtensionConfig


class FingerIndex(IntEnum):
    """Finger index constants for easier reference."""

    THUMB = 0
    INDEX = 1
    MIDDLE = 2
    RING = 3
    PINKY = 4


# (tip, reference) landmarks used to decide if a finger is extended, in FingerIndex order
EXTENSION_LANDMARKS: tuple[tuple[HandLandmark, HandLandmark], ...] = (
    (HandLandmark.THUMB_TIP, HandLandmark.THUMB_MCP),
    (HandLandmark.INDEX_FINGER_TIP, HandLandmark.INDEX_FINGER_MCP),
    (HandLandmark.MIDDLE_FINGER_TIP, HandLandmark.MIDDLE_FINGER_MCP),
    (HandLandmark.RING_FINGER_TIP, HandLandmark.RING_FINGER_MCP),
    (HandLandmark.PINKY_TIP, HandLandmark.PINKY_MCP),
)
_TIPS = [tip for tip, _ in EXTENSION_LANDMARKS]
_REFERENCES = [reference for _, reference in EXTENSION_LANDMARKS]


class FingerStates(NamedTuple):
    """Whether each finger is extended."""

    thumb: bool = False
    index: bool = False
    middle: bool = False
    ring: bool = False
    pinky: bool = False

    @property
    def extended_count(self) -> int:
        return sum(self)

    @classmethod
    def from_landmarks(cls, points: np.ndarray[Any, Any], config: FingerExtensionConfig) -> FingerStates:
        """Compute the extension of each finger from a (21, 2) landmarks array."""
        distances = np.linalg.norm(points[_TIPS] - points[_REFERENCES], axis=1)
        thresholds = np.array([config.thumb_threshold] + [config.finger_threshold] * 4)
        return cls(*(bool(extended) for extended in distances > thresholds))

    def to_dict(self) -> dict[str, bool]:
        return self._asdict()
