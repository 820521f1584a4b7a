from __future__ import annotations

import sys
from pathlib import Path
from typing import cast

import cv2  # type: ignore[import-untyped]
import typer

from ..config import Config
from ..drawing import draw_state_and_info
from ..interpreter import GestureInterpreter
from ..models.state import GestureState
from ..recognizer import Recognizer, StreamInfo
from .common import (
    DEFAULT_USER_CONFIG_PATH,
    app,
    determine_gpu_usage,
    determine_mirror_mode,
    get_model_path,
    init_camera_capture,
)


def print_state_info(state: GestureState, stream_info: StreamInfo) -> None:
    """Print the gesture state to console, on a single updated line."""
    metrics = f"FPS: {stream_info.recognition_fps:.1f} | Latency: {stream_info.latency * 1000:.1f}ms"

    if not state.has_hand:
        print(f"\r{metrics} | No hand detected".ljust(120), end="")
        return

    parts = [
        f"{state.gesture.value} ({state.gesture_confidence:.2f})",
        f"openness: {state.openness:.2f}",
        f"pos: ({state.position.x:+.2f}, {state.position.y:+.2f})",
        f"vel: ({state.hand_velocity.x:+.2f}, {state.hand_velocity.y:+.2f})",
    ]
    if state.pinch_state is not None:
        threshold_type = "custom" if state.pinch_state.is_custom_threshold else "auto"
        pinch = "PINCH" if state.pinch else "pinch"
        parts.append(
            f"{pinch}: d={state.pinch_state.distance:.3f} t={state.pinch_state.threshold:.3f} ({threshold_type})"
            f" c={state.pinch_state.confidence:.2f}"
        )
    print(f"\r{metrics} | {' | '.join(parts)}".ljust(120), end="")


def handle_key(key: int, interpreter: GestureInterpreter, config: Config, config_path: Path | None) -> bool:
    """Apply the action bound to the key. Return False if the loop must stop."""
    if key in (ord("q"), 27):  # 'q' or ESC
        return False
    if key == ord("c"):
        threshold = interpreter.calibrate()
        if threshold is None:
            print("\nCannot calibrate: no pinch distance known, show your hand first")
        else:
            print(f"\nPinch threshold calibrated to {threshold:.4f}")
    elif key == ord("r"):
        interpreter.reset_calibration()
        print("\nPinch calibration reset")
    elif key == ord("s"):
        config.interpreter.pinch.threshold_override = interpreter.calibration
        config.save(config_path)
        print(f"\nCalibration saved to {Config.validate_path(config_path)}")
    return True


def run_gestures(
    camera_index: int,
    show_preview: bool,
    config: Config,
    config_path: Path | None,
    mirror: bool,
    desired_size: int,
    use_gpu: bool,
) -> None:
    """Show a live preview of the selected camera with gesture interpretation."""
    interpreter = GestureInterpreter(config.interpreter)

    cap, window_name = init_camera_capture(camera_index, show_preview, desired_size)
    if cap is None:
        return

    print("Loading gesture recognizer model...")

    try:
        with Recognizer(
            interpreter, get_model_path(), config=config.tracker, use_gpu=use_gpu, mirroring=mirror
        ) as recognizer:
            print("Gesture recognizer loaded successfully")
            if show_preview:
                print("Press 'c' to calibrate the pinch, 'r' to reset it, 's' to save it, 'q' or ESC to quit")

            for frame, stream_info, state in recognizer.handle_opencv_capture(cap):
                if not show_preview:
                    print_state_info(state, stream_info)
                    continue

                frame = draw_state_and_info(state, stream_info, frame)
                cv2.imshow(cast(str, window_name), frame)

                key = cv2.waitKey(1) & 0xFF
                if not handle_key(key, interpreter, config, config_path):
                    break

                try:
                    if cv2.getWindowProperty(cast(str, window_name), cv2.WND_PROP_VISIBLE) < 1:
                        break
                except cv2.error:
                    # Window was closed
                    break
    except Exception as e:
        print(f"\nError running gesture recognizer: {e}", file=sys.stderr)
        raise
    finally:
        cap.release()
        if show_preview:
            cv2.destroyAllWindows()


@app.callback(invoke_without_command=True)
def run_gestures_cmd(
    ctx: typer.Context,
    camera: int | None = typer.Option(None, "--camera", "--cam", help="Index of the camera device"),
    preview: bool = typer.Option(True, "--preview/--no-preview", help="Show visual preview window"),
    mirror: bool | None = typer.Option(None, "--mirror/--no-mirror", help="Mirror the video output"),
    size: int | None = typer.Option(None, "--size", "-s", help="Maximum dimension of the camera capture"),
    gpu: bool | None = typer.Option(None, "--gpu/--no-gpu", help="Use GPU acceleration"),
    config_path: Path | None = typer.Option(  # noqa: B008
        None, "--config", "-c", help=f"Path to config file. Default: {DEFAULT_USER_CONFIG_PATH}"
    ),
) -> None:
    """Run gesture interpretation on the selected camera."""
    # If a subcommand is being invoked, don't run the default behavior
    if ctx.invoked_subcommand is not None:
        return

    config = Config.load(config_path)

    # Use config values as defaults, but CLI options take precedence
    run_gestures(
        camera if camera is not None else config.cli.camera,
        show_preview=preview,
        config=config,
        config_path=config_path,
        mirror=determine_mirror_mode(mirror, config),
        desired_size=size if size is not None else config.cli.size,
        use_gpu=determine_gpu_usage(gpu, config),
    )
