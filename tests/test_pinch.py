import pytest

from gesture_interpreter import GestureInterpreter, InterpreterConfig
from gesture_interpreter.config import PinchConfig

from .builders import make_landmarks


@pytest.mark.parametrize(
    "palm_width, expected",
    [
        (0.2, 0.045 * 0.8),  # scale 0.6 clamped to 0.8
        (0.3, 0.045 * 0.9),
        (0.5, 0.045 * 1.2),  # scale 1.5 clamped to 1.2
    ],
)
def test_adaptive_threshold(palm_width, expected):
    interpreter = GestureInterpreter()
    assert interpreter.adaptive_threshold(palm_width) == pytest.approx(expected)

    state = interpreter.process_landmarks(make_landmarks(palm_width=palm_width, pinch_distance=0.2), timestamp=0.0)
    assert state.pinch_state.threshold == pytest.approx(expected)
    assert state.pinch_state.is_custom_threshold is False


def test_pinch_active_under_threshold():
    interpreter = GestureInterpreter()
    state = interpreter.process_landmarks(make_landmarks(palm_width=0.3, pinch_distance=0.04), timestamp=0.0)
    assert state.pinch_state.distance == pytest.approx(0.04)
    assert state.pinch is True

    state = interpreter.process_landmarks(make_landmarks(palm_width=0.3, pinch_distance=0.041), timestamp=0.1)
    assert state.pinch is False


def test_pinch_confidence_from_distance():
    interpreter = GestureInterpreter()
    state = interpreter.process_landmarks(make_landmarks(pinch_distance=0.03), timestamp=0.0)
    assert state.pinch_state.confidence == pytest.approx(1 - 0.03 / 0.072)

    interpreter.reset()
    state = interpreter.process_landmarks(make_landmarks(pinch_distance=0.2), timestamp=0.0)
    assert state.pinch_state.confidence == 0


def test_pinch_confidence_grows_with_sustained_pinch():
    interpreter = GestureInterpreter()
    base = 1 - 0.03 / 0.072
    expected = [base, base + 0.1, base + 0.2, 1.0]
    for frame, confidence in enumerate(expected):
        state = interpreter.process_landmarks(make_landmarks(pinch_distance=0.03), timestamp=frame * 0.03)
        assert state.pinch is True
        assert state.pinch_state.confidence == pytest.approx(confidence)


def test_calibration_changes_outcome():
    # Adaptive threshold is 0.03 * 0.8 = 0.024 for this hand
    interpreter = GestureInterpreter(InterpreterConfig(pinch=PinchConfig(base_threshold=0.03)))
    assert interpreter.calibration is None

    interpreter.process_landmarks(make_landmarks(pinch_distance=0.03), timestamp=0.0)
    threshold = interpreter.calibrate()
    assert threshold == pytest.approx(0.036)
    assert interpreter.calibration == threshold

    state = interpreter.process_landmarks(make_landmarks(pinch_distance=0.034), timestamp=0.1)
    assert state.pinch is True
    assert state.pinch_state.threshold == pytest.approx(0.036)
    assert state.pinch_state.is_custom_threshold is True

    interpreter.reset_calibration()
    assert interpreter.calibration is None
    state = interpreter.process_landmarks(make_landmarks(pinch_distance=0.034), timestamp=0.2)
    assert state.pinch_state.threshold == pytest.approx(0.024)
    assert state.pinch is False
    assert state.pinch_state.is_custom_threshold is False


def test_calibrate_without_pinch_distance():
    interpreter = GestureInterpreter()
    assert interpreter.calibrate() is None

    interpreter.process_landmarks(make_landmarks(pinch_distance=0.0), timestamp=0.0)
    assert interpreter.calibrate() is None

    interpreter.process_landmarks(make_landmarks(pinch_distance=0.03), timestamp=0.1)
    interpreter.process_landmarks(None, timestamp=0.2)
    assert interpreter.calibrate() is None
    assert interpreter.calibration is None


def test_calibration_from_config_and_setter():
    interpreter = GestureInterpreter(InterpreterConfig(pinch=PinchConfig(threshold_override=0.05)))
    assert interpreter.calibration == 0.05

    interpreter = GestureInterpreter(InterpreterConfig(pinch=PinchConfig(threshold_override=0.05)), calibration=0.02)
    assert interpreter.calibration == 0.02

    interpreter.calibration = 0.06
    state = interpreter.process_landmarks(make_landmarks(palm_width=0.5, pinch_distance=0.058), timestamp=0.0)
    assert state.pinch is True
    assert state.pinch_state.threshold == 0.06

    with pytest.raises(ValueError):
        interpreter.calibration = 0
    with pytest.raises(ValueError):
        GestureInterpreter(calibration=-0.1)
    assert interpreter.calibration == 0.06
