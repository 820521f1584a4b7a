import pytest
from pydantic import ValidationError

from gesture_interpreter import Config
from gesture_interpreter.config import PinchConfig


def test_defaults():
    config = Config()
    assert config.interpreter.pinch.base_threshold == 0.045
    assert config.interpreter.pinch.threshold_override is None
    assert config.interpreter.smoothing.history_length == 5
    assert config.interpreter.smoothing.position_factor == 0.8
    assert config.interpreter.smoothing.gesture_confidence_factor == 0.1
    assert config.tracker.num_hands == 2


def test_load_missing_file(tmp_path):
    config = Config.load(tmp_path / "missing.json")
    assert config == Config()


def test_save_and_load_calibration(tmp_path):
    path = tmp_path / "sub" / "config.json"
    config = Config()
    config.interpreter.pinch.threshold_override = 0.036
    config.cli.camera = 2
    config.save(path)

    loaded = Config.load(path)
    assert loaded.interpreter.pinch.threshold_override == 0.036
    assert loaded.cli.camera == 2


def test_load_invalid_file_gives_defaults(tmp_path, capsys):
    path = tmp_path / "config.json"
    path.write_text('{"interpreter": {"pinch": {"base_threshold": "big"}}}')
    assert Config.load(path) == Config()
    assert "Error loading config" in capsys.readouterr().err


def test_path_is_a_directory(tmp_path):
    with pytest.raises(ValueError):
        Config.load(tmp_path)
    with pytest.raises(ValueError):
        Config().save(tmp_path)


def test_validation():
    with pytest.raises(ValidationError):
        PinchConfig(base_threshold=0)
    with pytest.raises(ValidationError):
        PinchConfig(threshold_override=-0.01)


def test_user_path():
    path = Config.get_user_path()
    assert path.name == "config.json"
    assert "gesture-interpreter" in str(path)
