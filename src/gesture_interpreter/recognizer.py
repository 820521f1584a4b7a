from __future__ import annotations

import os
import sys
import time
import urllib.request
from collections.abc import Iterator
from dataclasses import dataclass
from typing import ClassVar, NamedTuple, TypeAlias

import cv2

from .config import TrackerConfig
from .interpreter import GestureInterpreter
from .mediapipe import (
    BaseOptions,
    GestureRecognizer,
    GestureRecognizerOptions,
    GestureRecognizerResult,
    RunningMode,
    mp,
)
from .models.landmarks import DetectedHand, Point
from .models.state import GestureState

OpenCVImage: TypeAlias = cv2.typing.MatLike  # Type alias for images (numpy arrays)

DEFAULT_MODEL_PATH = "gesture_recognizer.task"


@dataclass
class RecognizerResult:
    hands: list[DetectedHand]
    timestamp: float  # Timestamp of the result, in seconds


def hands_from_result(result: GestureRecognizerResult, mirroring: bool = False) -> list[DetectedHand]:
    """Convert a MediaPipe result to the hands expected by the interpreter.

    The score of the handedness category is the confidence of the hand detection.
    """
    hands = []
    for hand_index, hand_landmarks in enumerate(result.hand_landmarks):
        score, handedness = 0.5, None
        if result.handedness and hand_index < len(result.handedness) and result.handedness[hand_index]:
            category = result.handedness[hand_index][0]
            score, handedness = category.score, category.category_name
        hands.append(
            DetectedHand(
                landmarks=[Point.from_mediapipe(landmark, mirroring) for landmark in hand_landmarks],
                score=score,
                handedness=handedness,
            )
        )
    return hands


class Recognizer:
    """Feed frames to MediaPipe and the resulting hands to a gesture interpreter."""

    model_url: ClassVar[str] = (
        "https://storage.googleapis.com/mediapipe-models/gesture_recognizer/gesture_recognizer/float16/1/gesture_recognizer.task"
    )

    def __init__(
        self,
        interpreter: GestureInterpreter,
        model_path: str = DEFAULT_MODEL_PATH,
        config: TrackerConfig | None = None,
        use_gpu: bool = False,
        mirroring: bool = False,
    ) -> None:
        self.interpreter = interpreter
        self.last_result: RecognizerResult | None = None
        self.mirroring = mirroring
        config = config if config is not None else TrackerConfig()

        self.check_model(model_path)

        self.recognizer: GestureRecognizer | None = GestureRecognizer.create_from_options(
            GestureRecognizerOptions(
                base_options=BaseOptions(
                    model_asset_path=model_path,
                    delegate=BaseOptions.Delegate.GPU if use_gpu else BaseOptions.Delegate.CPU,
                ),
                running_mode=RunningMode.LIVE_STREAM,
                num_hands=config.num_hands,
                min_hand_detection_confidence=config.min_detection_confidence,
                min_hand_presence_confidence=config.min_detection_confidence,
                min_tracking_confidence=config.min_tracking_confidence,
                result_callback=self.save_result,
            )
        )

    def check_model(self, model_path: str) -> None:
        if not os.path.exists(model_path):
            print(f"Model file '{model_path}' not found. Downloading...")
            try:
                urllib.request.urlretrieve(self.model_url, model_path)
                print(f"Successfully downloaded model to '{model_path}'")
            except Exception as exc:
                print(f"Failed to download model: {exc}", file=sys.stderr)
                raise RuntimeError(f"Could not download model from {self.model_url}: {exc}") from exc

    @staticmethod
    def convert_image_from_opencv(frame: OpenCVImage) -> mp.Image:
        # Convert frame to RGB (opencv BGR not supported by MediaPipe)
        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        return mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

    def recognize_image_from_opencv(self, frame: OpenCVImage, timestamp: float) -> mp.Image:
        return self.recognize_image(self.convert_image_from_opencv(frame), timestamp)

    def recognize_image(self, image: mp.Image, timestamp: float) -> mp.Image:
        if self.recognizer is None:
            raise RuntimeError("Recognizer is closed")
        self.recognizer.recognize_async(image, int(timestamp * 1000))  # Convert seconds to milliseconds
        return image

    def save_result(self, result: GestureRecognizerResult, input_image: mp.Image, timestamp_ms: int) -> None:
        """Save the latest recognition result (called by MediaPipe from its own thread)."""
        self.last_result = RecognizerResult(
            hands=hands_from_result(result, self.mirroring),
            timestamp=timestamp_ms / 1000,  # Convert milliseconds to seconds
        )

    def close(self) -> None:
        """Close the recognizer and release resources."""
        if self.recognizer:
            self.recognizer.close()
            self.recognizer = None

    def __enter__(self) -> Recognizer:
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: object) -> None:
        self.close()

    def handle_frames_from_opencv(self, frames: OpenCVFramesIterator) -> ResultsGenerator:
        """Read frames from the provided OpenCV frames provider."""
        start_time = time.perf_counter()
        last_recognized_timestamp: float = -1
        frames_count = 0
        recognized_frames_count = 0

        for frame in frames:
            frames_count += 1
            current_time = time.perf_counter()
            elapsed_time = current_time - start_time

            mp_image = self.recognize_image_from_opencv(frame, elapsed_time)

            result = self.last_result
            if result is None or result.timestamp == last_recognized_timestamp:
                continue

            recognized_frames_count += 1
            last_recognized_timestamp = result.timestamp

            stream_info = StreamInfo(
                frames_count=frames_count,
                recognized_frames_count=recognized_frames_count,
                frames_fps=frames_count / elapsed_time if elapsed_time > 0 else 0,
                recognition_fps=recognized_frames_count / elapsed_time if elapsed_time > 0 else 0,
                latency=elapsed_time - result.timestamp,
                height=mp_image.height,
                width=mp_image.width,
                mirroring=self.mirroring,
            )

            # Use the time of the frame that was recognized, not the current one
            state = self.interpreter.process(result.hands, result.timestamp)

            yield frame, stream_info, state

    def handle_opencv_capture(self, cap: cv2.VideoCapture) -> ResultsGenerator:
        """Read frames from an OpenCV VideoCapture object."""

        def frames_provider() -> OpenCVFramesIterator:
            while True:
                ret, frame = cap.read()
                if not ret:
                    break
                yield frame

        return self.handle_frames_from_opencv(frames_provider())


class StreamInfo(NamedTuple):
    frames_count: int  # Total number of frames from iterator
    recognized_frames_count: int  # Number of frames that were recognized
    frames_fps: float  # FPS of the frame iterator
    recognition_fps: float  # FPS of recognition
    latency: float  # Time since last result (current time - last result timestamp)
    width: int  # Width of the image
    height: int  # Height of the image
    mirroring: bool = False  # Whether the recognition results are for a mirrored output


ResultsGenerator: TypeAlias = Iterator[tuple[OpenCVImage, StreamInfo, GestureState]]
OpenCVFramesIterator: TypeAlias = Iterator[OpenCVImage]
