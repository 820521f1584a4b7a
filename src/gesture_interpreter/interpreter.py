"""Turn per-frame hand landmarks into a gesture state.

Each call to `GestureInterpreter.process` takes the hands detected by the tracker for one
frame, keeps only the most confident one, and returns an immutable `GestureState`:

- the extension of each finger, and a discrete gesture deduced from them,
- a pinch detection with a threshold adapted to the size of the hand, unless calibrated,
- an openness value in [0, 1],
- a smoothed position in [-1, 1] (y up) and its velocity in units per second.

A short history of the last frames is used to make the pinch confidence more stable.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable
from typing import Any

import numpy as np

from .config import InterpreterConfig
from .gestures import classify
from .models.fingers import FingerStates
from .models.history import GestureHistory
from .models.landmarks import DetectedHand, HandLandmark, LandmarkSet, Point, distance, landmarks_to_array
from .models.state import ZERO, GestureState, HistoryEntry, PinchState, Vector
from .smoothing import CoordSmoother, NumberSmoother

logger = logging.getLogger("gesture_interpreter.interpreter")


def clamp(value: float, min_value: float = 0.0, max_value: float = 1.0) -> float:
    return max(min_value, min(max_value, value))


def select_hand(hands: Iterable[DetectedHand]) -> DetectedHand | None:
    """Get the hand with the highest detection score, the first one in case of a tie."""
    best: DetectedHand | None = None
    for hand in hands:
        if best is None or hand.score > best.score:
            best = hand
    return best


class GestureInterpreter:
    def __init__(self, config: InterpreterConfig | None = None, calibration: float | None = None) -> None:
        self.config = config if config is not None else InterpreterConfig()
        smoothing = self.config.smoothing

        self.history = GestureHistory(smoothing.history_length)
        self._confidence_smoother = NumberSmoother(smoothing.gesture_confidence_factor)
        self._position_smoother = CoordSmoother(smoothing.position_factor)
        self._last_timestamp: float | None = None

        # The calibration may be changed from another thread than the one processing frames
        self._calibration_lock = threading.Lock()
        self._calibration: float | None = None
        self.calibration = calibration if calibration is not None else self.config.pinch.threshold_override

        self.state = GestureState()

    @property
    def calibration(self) -> float | None:
        """The calibrated pinch threshold, replacing the adaptive one when set."""
        with self._calibration_lock:
            return self._calibration

    @calibration.setter
    def calibration(self, threshold: float | None) -> None:
        if threshold is not None and threshold <= 0:
            raise ValueError(f"Pinch threshold must be positive, got {threshold}")
        with self._calibration_lock:
            self._calibration = threshold

    def calibrate(self) -> float | None:
        """Use the current pinch distance to set the pinch threshold.

        Only possible when a hand is currently tracked with a non-zero pinch distance. Returns the new
        threshold, or None if nothing was done.
        """
        pinch_state = self.state.pinch_state
        if pinch_state is None or pinch_state.distance <= 0:
            logger.debug("Calibration ignored: no pinch distance known")
            return None

        threshold = pinch_state.distance * self.config.pinch.calibration_multiplier
        self.calibration = threshold
        logger.debug(f"Pinch threshold calibrated to {threshold:.4f} (distance: {pinch_state.distance:.4f})")
        return threshold

    def reset_calibration(self) -> None:
        """Go back to the adaptive pinch threshold."""
        self.calibration = None
        logger.debug("Pinch calibration reset, using adaptive threshold")

    def reset(self) -> None:
        """Forget everything about previous frames. The calibration is kept."""
        self.history.clear()
        self._confidence_smoother.reset()
        self._position_smoother.reset()
        self._last_timestamp = None
        self.state = GestureState()

    def process(self, hands: Iterable[DetectedHand], timestamp: float | None = None) -> GestureState:
        """Interpret the hands detected for a frame. `timestamp` is in seconds, defaults to now."""
        if timestamp is None:
            timestamp = time.perf_counter()

        hand = select_hand(hands)
        points = landmarks_to_array(hand.landmarks) if hand is not None else None

        if hand is None or points is None:
            if hand is not None:
                logger.debug(f"Ignoring hand with {len(hand.landmarks or ())} landmarks")
            self._confidence_smoother.reset()
            self.state = GestureState.no_hand(Vector(*self._position_smoother.value), timestamp)
            return self.state

        finger_states = FingerStates.from_landmarks(points, self.config.fingers)

        gesture, confidence = classify(finger_states)
        gesture_confidence = clamp(self._confidence_smoother.update(confidence))

        pinch_state = self.detect_pinch(points)
        openness = self.compute_openness(points, finger_states)

        previous_position = Vector(*self._position_smoother.value)
        position = Vector(*self._position_smoother.update(self.raw_position(points)))
        velocity = self.compute_velocity(previous_position, position, timestamp)

        self.history.push(HistoryEntry(position, openness, pinch_state.is_pinching, timestamp))
        self._last_timestamp = timestamp

        self.state = GestureState(
            gesture=gesture,
            gesture_confidence=gesture_confidence,
            pinch_state=pinch_state,
            openness=openness,
            position=position,
            hand_velocity=velocity,
            finger_states=finger_states,
            handedness=hand.handedness,
            timestamp=timestamp,
            landmarks=tuple(Point(float(x), float(y)) for x, y in points),
        )
        return self.state

    def process_landmarks(self, landmarks: LandmarkSet | None, timestamp: float | None = None) -> GestureState:
        """Interpret a single hand (or no hand if `landmarks` is None)."""
        hands = [] if landmarks is None else [DetectedHand(landmarks=landmarks, score=1.0)]
        return self.process(hands, timestamp)

    def adaptive_threshold(self, palm_width: float) -> float:
        """Pinch threshold scaled by the size of the hand, approximated by the palm width."""
        config = self.config.pinch
        scale = clamp(palm_width * config.palm_width_factor, config.min_scale, config.max_scale)
        return config.base_threshold * scale

    def detect_pinch(self, points: np.ndarray[Any, Any]) -> PinchState:
        config = self.config.pinch

        pinch_distance = distance(points, HandLandmark.THUMB_TIP, HandLandmark.INDEX_FINGER_TIP)
        palm_width = distance(points, HandLandmark.INDEX_FINGER_MCP, HandLandmark.PINKY_MCP)

        calibration = self.calibration
        threshold = calibration if calibration is not None else self.adaptive_threshold(palm_width)

        confidence = max(0.0, 1 - pinch_distance / (threshold * 2))
        # Frames already pinching make the detection more stable
        confidence += min(config.max_history_bonus, self.history.pinch_count * config.history_weight)
        if self.history.last_all_pinching(config.sustained_frames):
            confidence += config.sustained_bonus

        return PinchState(
            distance=pinch_distance,
            threshold=threshold,
            confidence=clamp(confidence),
            is_pinching=pinch_distance < threshold,
            is_custom_threshold=calibration is not None,
        )

    @staticmethod
    def compute_openness(points: np.ndarray[Any, Any], finger_states: FingerStates) -> float:
        base_openness = min(1.0, distance(points, HandLandmark.WRIST, HandLandmark.MIDDLE_FINGER_TIP) * 2)
        fingers_factor = finger_states.extended_count / len(finger_states)
        return clamp((base_openness + fingers_factor) / 2)

    @staticmethod
    def raw_position(points: np.ndarray[Any, Any]) -> tuple[float, float]:
        """Wrist position mapped from [0, 1] (y down) to [-1, 1] (y up)."""
        x, y = points[HandLandmark.WRIST]
        return float((x - 0.5) * 2), float(-(y - 0.5) * 2)

    def compute_velocity(self, previous: Vector, current: Vector, timestamp: float) -> Vector:
        if self._last_timestamp is None:
            return ZERO
        elapsed = max(self.config.smoothing.min_frame_interval, timestamp - self._last_timestamp)
        return Vector((current.x - previous.x) / elapsed, (current.y - previous.y) / elapsed)
