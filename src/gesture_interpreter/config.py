import sys
from pathlib import Path

import platformdirs
from pydantic import BaseModel, Field


class FingerExtensionConfig(BaseModel):
    thumb_threshold: float = Field(
        0.10, gt=0, description="Min tip to MCP distance (normalized) for the thumb to be considered extended"
    )
    finger_threshold: float = Field(
        0.15, gt=0, description="Min tip to MCP distance (normalized) for other fingers to be considered extended"
    )


class PinchConfig(BaseModel):
    base_threshold: float = Field(
        0.045, gt=0, description="Thumb/index tips distance under which it's a pinch, before hand size scaling"
    )
    palm_width_factor: float = Field(3.0, gt=0, description="Multiplier applied to the palm width to get the scale")
    min_scale: float = Field(0.8, gt=0, description="Min hand size scale applied to the base threshold")
    max_scale: float = Field(1.2, gt=0, description="Max hand size scale applied to the base threshold")
    history_weight: float = Field(0.1, ge=0, description="Confidence bonus per pinching frame in history")
    max_history_bonus: float = Field(0.3, ge=0, description="Max confidence bonus from pinching frames in history")
    sustained_frames: int = Field(3, ge=1, description="Number of last history frames to check for a sustained pinch")
    sustained_bonus: float = Field(0.2, ge=0, description="Confidence bonus for a sustained pinch")
    calibration_multiplier: float = Field(
        1.2, gt=0, description="Multiplier applied to the current pinch distance when calibrating"
    )
    threshold_override: float | None = Field(
        None, gt=0, description="Calibrated pinch threshold replacing the adaptive one (None for adaptive)"
    )


class SmoothingConfig(BaseModel):
    gesture_confidence_factor: float = Field(
        0.1, gt=0, le=1, description="Interpolation factor toward the new gesture confidence per frame"
    )
    position_factor: float = Field(0.8, gt=0, le=1, description="Interpolation factor toward the new hand position")
    history_length: int = Field(5, ge=1, description="Number of frames kept in the gesture history")
    min_frame_interval: float = Field(
        0.001, gt=0, description="Min elapsed time (seconds) between frames used for velocity"
    )


class InterpreterConfig(BaseModel):
    fingers: FingerExtensionConfig = Field(
        default_factory=lambda: FingerExtensionConfig(),
        description="Configuration for finger extension detection",
    )
    pinch: PinchConfig = Field(default_factory=lambda: PinchConfig(), description="Configuration for pinch detection")
    smoothing: SmoothingConfig = Field(
        default_factory=lambda: SmoothingConfig(),
        description="Configuration for temporal smoothing",
    )


class TrackerConfig(BaseModel):
    num_hands: int = Field(2, ge=1, description="Max number of hands detected by MediaPipe")
    min_detection_confidence: float = Field(0.75, ge=0, le=1, description="MediaPipe min hand detection confidence")
    min_tracking_confidence: float = Field(0.75, ge=0, le=1, description="MediaPipe min tracking confidence")


class CLIConfig(BaseModel):
    """Configuration for CLI settings."""

    camera: int = Field(0, ge=0, description="Index of the camera device to open")
    mirror: bool = Field(True, description="Mirror the video output horizontally")
    size: int = Field(640, description="Maximum dimension for camera capture resolution")
    use_gpu: bool = Field(False, description="Use GPU acceleration for MediaPipe")


class Config(BaseModel):
    interpreter: InterpreterConfig = Field(
        default_factory=lambda: InterpreterConfig(), description="Gesture interpretation configuration"
    )
    tracker: TrackerConfig = Field(default_factory=lambda: TrackerConfig(), description="Hand tracker configuration")
    cli: CLIConfig = Field(default_factory=lambda: CLIConfig(), description="CLI configuration")

    @classmethod
    def get_user_path(cls) -> Path:
        app_name = "gesture-interpreter"
        config_dir = Path(platformdirs.user_config_dir(app_name))
        return config_dir / "config.json"

    @classmethod
    def validate_path(cls, path: Path | str | None) -> Path:
        if path is None:
            path = cls.get_user_path()
        elif isinstance(path, str):
            path = Path(path)

        return path.resolve()

    @classmethod
    def load(cls, path: Path | str | None = None) -> "Config":
        path = cls.validate_path(path)

        if not path.exists():
            print(f"Config file {path} does not exist. Returning default config.")
            return cls()

        if not path.is_file():
            raise ValueError(f"Path {path} exists and is not a file.")

        try:
            return cls.model_validate_json(path.read_text(), strict=True)
        except Exception as e:
            print(f"Error loading config from {path}: {e}", file=sys.stderr)
            print("Returning default config.", file=sys.stderr)
            return cls()

    def save(self, path: Path | str | None = None) -> None:
        path = self.validate_path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        if path.exists() and not path.is_file():
            raise ValueError(f"Path {path} exists and is not a file.")

        try:
            path.write_text(self.model_dump_json(indent=2))
        except Exception as e:
            print(f"Error saving config to {path}: {e}", file=sys.stderr)
            raise e
