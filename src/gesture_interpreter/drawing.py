from typing import TYPE_CHECKING, TypeAlias

import cv2  # type: ignore[import-untyped]

from .gestures import GestureType
from .models.fingers import FingerIndex
from .models.landmarks import HandLandmark, Point
from .models.state import GestureState, PinchState, Vector

if TYPE_CHECKING:
    from .recognizer import StreamInfo

OpenCVImage: TypeAlias = cv2.typing.MatLike  # Type alias for images (numpy arrays)

# BGR colors
GESTURE_COLORS = {
    GestureType.NONE: (128, 128, 128),
    GestureType.FIST: (0, 0, 255),
    GestureType.POINTING: (0, 255, 0),
    GestureType.PEACE: (255, 0, 255),
    GestureType.THREE: (255, 255, 0),
    GestureType.OPEN_HAND: (0, 255, 255),
}
PINCH_COLOR = (0, 165, 255)
PINCH_LINE_COLOR = (180, 180, 180)
TEXT_COLOR = (255, 255, 255)
WRIST_COLOR = (255, 255, 255)

# Colors for drawing fingers (BGR format for OpenCV)
FINGER_COLORS = [
    (255, 0, 0),  # Blue - THUMB
    (0, 255, 0),  # Green - INDEX
    (0, 255, 255),  # Yellow - MIDDLE
    (255, 0, 255),  # Magenta - RING
    (255, 255, 0),  # Cyan - PINKY
]

FONT = cv2.FONT_HERSHEY_SIMPLEX
LINE_HEIGHT = 20
PADDING = 10


def position_to_pixels(position: Vector, width: int, height: int) -> tuple[int, int]:
    """Convert a position in [-1, 1] (y up) to pixel coordinates."""
    x = int(round((position.x + 1) / 2 * width))
    y = int(round((1 - position.y) / 2 * height))
    return x, y


def landmark_to_pixels(point: Point, width: int, height: int) -> tuple[int, int]:
    """Convert a normalized landmark ([0, 1], y down) to pixel coordinates."""
    return int(round(point.x * width)), int(round(point.y * height))


def draw_landmarks(state: GestureState, image: OpenCVImage) -> OpenCVImage:
    """Draw the landmarks of the hand, and the line between the thumb and index tips."""
    if not state.landmarks:
        return image
    height, width = image.shape[:2]
    pixels = [landmark_to_pixels(point, width, height) for point in state.landmarks]

    line_color = PINCH_COLOR if state.pinch else PINCH_LINE_COLOR
    cv2.line(image, pixels[HandLandmark.THUMB_TIP], pixels[HandLandmark.INDEX_FINGER_TIP], line_color, 2)

    cv2.circle(image, pixels[HandLandmark.WRIST], 5, WRIST_COLOR, -1)
    for index, xy in enumerate(pixels[1:], start=1):
        # 4 landmarks per finger after the wrist
        cv2.circle(image, xy, 3, FINGER_COLORS[(index - 1) // 4], -1)

    return image


def pinch_debug_lines(pinch_state: PinchState) -> list[str]:
    threshold_type = "Custom" if pinch_state.is_custom_threshold else "Auto"
    return [
        f"Pinch distance: {pinch_state.distance * 100:.1f}%",
        f"Threshold: {pinch_state.threshold * 100:.1f}% ({threshold_type})",
        f"Confidence: {pinch_state.confidence * 100:.0f}%",
    ]


def state_lines(state: GestureState) -> list[str]:
    """Text describing the state, one entry per line."""
    if not state.has_hand:
        return ["No hand detected"]

    hand = state.handedness or "Hand"
    pinch = " PINCH" if state.pinch else ""
    lines = [f"{hand}: {state.gesture.value} ({state.gesture_confidence * 100:.0f}%){pinch}"]
    extended = [finger.name.lower() for finger in FingerIndex if state.finger_states[finger]]
    lines.append(f"Extended: {', '.join(extended) if extended else '-'}")
    lines.append(f"Openness: {state.openness:.2f}")
    lines.append(f"Velocity: ({state.hand_velocity.x:.2f}, {state.hand_velocity.y:.2f})/s")
    if state.pinch_state is not None:
        lines.extend(pinch_debug_lines(state.pinch_state))
    return lines


def draw_state(state: GestureState, frame: OpenCVImage) -> OpenCVImage:
    """Draw the hand position marker, the landmarks, the openness bar and the state description."""
    height, width = frame.shape[:2]

    if state.has_hand:
        color = GESTURE_COLORS[state.gesture]
        center = position_to_pixels(state.position, width, height)
        radius = int(10 + state.openness * 30)
        cv2.circle(frame, center, radius, color, 2, cv2.LINE_AA)
        if state.pinch:
            cv2.circle(frame, center, 6, PINCH_COLOR, -1, cv2.LINE_AA)

        frame = draw_landmarks(state, frame)

        # Openness bar on the right edge
        bar_height = int(state.openness * (height - 2 * PADDING))
        cv2.rectangle(
            frame,
            (width - 2 * PADDING, height - PADDING - bar_height),
            (width - PADDING, height - PADDING),
            color,
            -1,
        )

    for line_index, text in enumerate(state_lines(state)):
        y = 30 + PADDING + (line_index + 1) * LINE_HEIGHT
        cv2.putText(frame, text, (PADDING, y), FONT, 0.5, TEXT_COLOR, 1, cv2.LINE_AA)

    return frame


def draw_state_and_info(state: GestureState, stream_info: "StreamInfo", frame: OpenCVImage) -> OpenCVImage:
    """Draw the gesture state on the frame and return the modified frame."""
    if stream_info.mirroring:
        frame = cv2.flip(frame, 1)

    frame_width = frame.shape[1]
    header_height = 30

    # Add semi-transparent black header
    overlay = frame.copy()
    cv2.rectangle(overlay, (0, 0), (frame_width, header_height), (0, 0, 0), -1)
    frame = cv2.addWeighted(overlay, 0.7, frame, 0.3, 0)

    fps_text = f"FPS: frames: {stream_info.frames_fps:.1f}, recognition: {stream_info.recognition_fps:.1f}"
    latency_text = f"Latency: {stream_info.latency * 1000:.1f}ms"
    cv2.putText(
        frame,
        f"{fps_text}  |  {latency_text}",
        (PADDING, header_height - PADDING),
        FONT,
        0.5,
        (0, 255, 0),
        1,
        cv2.LINE_AA,
    )

    return draw_state(state, frame)
