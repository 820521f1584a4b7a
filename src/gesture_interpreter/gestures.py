from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from .models.fingers import FingerStates


class GestureType(str, Enum):
    NONE = "none"  # No hand detected
    FIST = "fist"
    POINTING = "pointing"
    PEACE = "peace"
    THREE = "three"
    OPEN_HAND = "open_hand"


class GestureRule(NamedTuple):
    """A classification rule: the first rule whose predicate matches gives the gesture."""

    predicate: Callable[[FingerStates], bool]
    gesture: GestureType
    confidence: float


def _is_fist(fingers: FingerStates) -> bool:
    return fingers.extended_count == 0


def _is_pointing(fingers: FingerStates) -> bool:
    return fingers.extended_count == 1 and fingers.index


def _is_peace(fingers: FingerStates) -> bool:
    return fingers.extended_count == 2 and fingers.index and fingers.middle


def _is_three(fingers: FingerStates) -> bool:
    return fingers.extended_count == 3 and fingers.index and fingers.middle and fingers.ring


def _is_open_hand(fingers: FingerStates) -> bool:
    return fingers.extended_count == 5


def _always(fingers: FingerStates) -> bool:
    return True


# Evaluated in order, first match wins. The last rule is the fallback.
CLASSIFICATION_RULES: tuple[GestureRule, ...] = (
    GestureRule(_is_fist, GestureType.FIST, 0.9),
    GestureRule(_is_pointing, GestureType.POINTING, 0.95),
    GestureRule(_is_peace, GestureType.PEACE, 0.9),
    GestureRule(_is_three, GestureType.THREE, 0.85),
    GestureRule(_is_open_hand, GestureType.OPEN_HAND, 0.85),
    GestureRule(_always, GestureType.OPEN_HAND, 0.8),
)


def classify(
    fingers: FingerStates, rules: tuple[GestureRule, ...] = CLASSIFICATION_RULES
) -> tuple[GestureType, float]:
    """Return the gesture and its raw confidence for the given finger states."""
    for rule in rules:
        if rule.predicate(fingers):
            return rule.gesture, rule.confidence
    return GestureType.NONE, 0.0
