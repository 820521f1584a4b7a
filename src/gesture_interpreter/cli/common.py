from __future__ import annotations

import os
import sys

import cv2  # type: ignore[import-untyped]
import typer

from ..config import Config

app = typer.Typer()

DEFAULT_USER_CONFIG_PATH = Config.get_user_path()


def get_model_path() -> str:
    return os.getenv("GESTURE_RECOGNIZER_MODEL_PATH", "").strip() or "gesture_recognizer.task"


def init_camera_capture(
    camera_index: int, show_preview: bool, desired_size: int
) -> tuple[cv2.VideoCapture | None, str | None]:
    """Initialize camera capture and set resolution."""
    cap = cv2.VideoCapture(camera_index)

    if not cap.isOpened():
        print(f"Error: Could not open camera {camera_index}", file=sys.stderr)
        return None, None

    # Keep the aspect ratio reported by the camera
    current_width = cap.get(cv2.CAP_PROP_FRAME_WIDTH) or 4
    current_height = cap.get(cv2.CAP_PROP_FRAME_HEIGHT) or 3
    aspect_ratio = current_width / current_height
    if current_width > current_height:
        width = desired_size
        height = int(desired_size / aspect_ratio)
    else:
        height = desired_size
        width = int(desired_size * aspect_ratio)

    cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
    cap.set(cv2.CAP_PROP_FOURCC, cv2.VideoWriter.fourcc(*"MJPG"))  # Use MJPEG for better performance
    cap.set(cv2.CAP_PROP_FPS, 30)

    cap_fps = cap.get(cv2.CAP_PROP_FPS)
    height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
    width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))

    print(f"Camera {camera_index} opened successfully at {width}x{height} with FPS: {cap_fps:.2f}")

    window_name = None
    if show_preview:
        window_name = f"Gesture Interpreter - camera {camera_index}"
        cv2.namedWindow(window_name, cv2.WINDOW_NORMAL)

    return cap, window_name


def _env_flag(name: str) -> bool | None:
    value = os.getenv(name, "").strip().lower()
    if value in ("false", "0", "no"):
        return False
    if value in ("true", "1", "yes"):
        return True
    return None


def determine_gpu_usage(gpu: bool | None, config: Config | None = None) -> bool:
    """Determine whether to use GPU.

    Priority order:
    1. CLI arguments (--gpu / --no-gpu)
    2. Environment variable (GESTURE_RECOGNIZER_USE_GPU)
    3. Config file (config.cli.use_gpu)
    4. Default (False)
    """
    if gpu is not None:
        use_gpu = gpu
    elif (env_gpu := _env_flag("GESTURE_RECOGNIZER_USE_GPU")) is not None:
        use_gpu = env_gpu
    elif config is not None:
        use_gpu = config.cli.use_gpu
    else:
        use_gpu = False

    if use_gpu:
        print("Using GPU acceleration (may fall back to CPU if GPU is unavailable)")
    else:
        print("Using CPU processing")

    return use_gpu


def determine_mirror_mode(mirror: bool | None, config: Config | None = None) -> bool:
    """Determine whether to use mirror mode.

    Priority order:
    1. CLI arguments (--mirror / --no-mirror)
    2. Environment variable (GESTURE_RECOGNIZER_MIRROR)
    3. Config file (config.cli.mirror)
    4. Default (True)
    """
    if mirror is not None:
        use_mirror = mirror
    elif (env_mirror := _env_flag("GESTURE_RECOGNIZER_MIRROR")) is not None:
        use_mirror = env_mirror
    elif config is not None:
        use_mirror = config.cli.mirror
    else:
        use_mirror = True

    if use_mirror:
        print("Mirror mode enabled (video output will be horizontally flipped)")
    else:
        print("Mirror mode disabled")

    return use_mirror
