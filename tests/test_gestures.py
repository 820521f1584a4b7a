import numpy as np
import pytest

from gesture_interpreter import CLASSIFICATION_RULES, FingerIndex, FingerStates, GestureType, classify
from gesture_interpreter.config import FingerExtensionConfig

from .builders import ALL_FINGERS, make_landmarks


def fingers(*extended: str) -> FingerStates:
    return FingerStates(**{name: True for name in extended})


@pytest.mark.parametrize(
    "finger_states, gesture, confidence",
    [
        (fingers(), GestureType.FIST, 0.9),
        (fingers("index"), GestureType.POINTING, 0.95),
        (fingers("index", "middle"), GestureType.PEACE, 0.9),
        (fingers("index", "middle", "ring"), GestureType.THREE, 0.85),
        (fingers("thumb", "index", "middle", "ring", "pinky"), GestureType.OPEN_HAND, 0.85),
        # Anything else falls back to an open hand with a lower confidence
        (fingers("thumb"), GestureType.OPEN_HAND, 0.8),
        (fingers("middle"), GestureType.OPEN_HAND, 0.8),
        (fingers("thumb", "index"), GestureType.OPEN_HAND, 0.8),
        (fingers("thumb", "index", "middle"), GestureType.OPEN_HAND, 0.8),
        (fingers("index", "middle", "ring", "pinky"), GestureType.OPEN_HAND, 0.8),
    ],
)
def test_classify(finger_states, gesture, confidence):
    assert classify(finger_states) == (gesture, confidence)


def test_all_extended_is_never_peace_or_three():
    all_extended = fingers("thumb", "index", "middle", "ring", "pinky")
    matching = [rule.gesture for rule in CLASSIFICATION_RULES if rule.predicate(all_extended)]
    assert GestureType.PEACE not in matching
    assert GestureType.THREE not in matching
    assert classify(all_extended)[0] == GestureType.OPEN_HAND


def test_rules_order():
    assert [rule.gesture for rule in CLASSIFICATION_RULES] == [
        GestureType.FIST,
        GestureType.POINTING,
        GestureType.PEACE,
        GestureType.THREE,
        GestureType.OPEN_HAND,
        GestureType.OPEN_HAND,
    ]
    # The last rule is the fallback and matches everything
    assert CLASSIFICATION_RULES[-1].predicate(fingers("pinky"))


def test_classify_with_custom_rules():
    assert classify(fingers("index"), rules=()) == (GestureType.NONE, 0.0)


def test_finger_states_from_landmarks():
    config = FingerExtensionConfig()
    points = np.array(make_landmarks({FingerIndex.THUMB, FingerIndex.RING}))
    assert FingerStates.from_landmarks(points, config) == fingers("thumb", "ring")

    points = np.array(make_landmarks(ALL_FINGERS))
    assert FingerStates.from_landmarks(points, config).extended_count == 5

    # Tips are 0.2 away from their MCP, 0.15 for the thumb
    strict = FingerExtensionConfig(thumb_threshold=0.16, finger_threshold=0.21)
    assert FingerStates.from_landmarks(points, strict).extended_count == 0


def test_finger_thresholds():
    config = FingerExtensionConfig()
    assert config.thumb_threshold == 0.10
    assert config.finger_threshold == 0.15
