"""
Hand tracking module using MediaPipe.
"""

import logging
import os
import threading
import time
import urllib.request
from typing import Any, Dict, Optional, Sequence

import cv2

from .pinch import PinchTracker
from .snapshot import NUM_LANDMARKS, HandSnapshot, Point


# MediaPipe reports handedness as seen in a mirrored image; on the raw camera
# frame its "Right" label is the user's left hand.
HANDEDNESS_TO_INDEX = {"Right": 0, "Left": 1}


def build_snapshot(hand_landmarks: Sequence[Sequence[Any]],
                   handedness: Sequence[Sequence[Any]],
                   pinch_tracker: PinchTracker,
                   timestamp_ms: int = 0) -> HandSnapshot:
    """
    Turn one MediaPipe result into a snapshot and advance pinch tracking.

    Args:
        hand_landmarks: Per detected hand, its normalized landmarks (objects with x, y)
        handedness: Per detected hand, its classification categories
        pinch_tracker: Pinch state machines, advanced by one frame
        timestamp_ms: Timestamp of the processed frame

    Returns:
        HandSnapshot keyed by hand index (0 = left, 1 = right)
    """
    hands: Dict[int, tuple] = {}
    for i, landmarks in enumerate(hand_landmarks):
        if len(landmarks) < NUM_LANDMARKS:
            continue

        label = None
        if i < len(handedness) and handedness[i]:
            label = handedness[i][0].category_name
        hand_index = HANDEDNESS_TO_INDEX.get(label)
        if hand_index is None or hand_index in hands:
            # Unknown or duplicate label, take the next free slot
            free = [idx for idx in range(pinch_tracker.num_hands) if idx not in hands]
            if not free:
                continue
            hand_index = free[0]
        if hand_index >= pinch_tracker.num_hands:
            continue

        hands[hand_index] = tuple(Point(float(lm.x), float(lm.y)) for lm in landmarks)

    pinch_state, cur_pinch = pinch_tracker.update(hands)
    return HandSnapshot(
        landmarks=hands,
        pinch_state=pinch_state,
        cur_pinch=cur_pinch,
        timestamp_ms=timestamp_ms,
    )


def ensure_model(model_path: str, model_url: str) -> str:
    """Download the hand landmarker model if it is not on disk yet.

    The download goes to a temporary file that is moved into place only once
    complete, so an interrupted download never leaves a truncated model.
    """
    if os.path.exists(model_path):
        return model_path

    logger = logging.getLogger("HandTracker")
    directory = os.path.dirname(model_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    partial_path = model_path + ".part"
    logger.info(f"Downloading hand landmarker model to {model_path}")
    try:
        urllib.request.urlretrieve(model_url, partial_path)
        os.replace(partial_path, model_path)
    except (OSError, ValueError) as e:
        if os.path.exists(partial_path):
            os.remove(partial_path)
        raise RuntimeError(f"Failed to download hand landmarker model: {e}") from e
    logger.info("Model downloaded")
    return model_path


class HandTracker:
    """MediaPipe-based hand tracker publishing pinch snapshots."""

    # Seconds stop_tracking() waits for the loop thread
    JOIN_TIMEOUT = 1.0

    def __init__(self,
                 frame_source,
                 max_num_hands: int = 2,
                 min_detection_confidence: float = 0.5,
                 min_tracking_confidence: float = 0.5,
                 pinch_threshold: float = 0.06,
                 release_frames: int = 1,
                 model_path: str = "models/hand_landmarker.task",
                 model_url: str = ""):
        """
        Initialize hand tracker.

        Args:
            frame_source: Object with latest() -> Optional[(frame_id, bgr_frame)]
            max_num_hands: Maximum number of hands to detect
            min_detection_confidence: Minimum confidence for hand detection
            min_tracking_confidence: Minimum confidence for hand tracking
            pinch_threshold: Normalized thumb-to-fingertip distance counted as a pinch
            release_frames: Unpinched frames before a pinch is released
            model_path: Location of the hand_landmarker.task model
            model_url: Where to download the model from when missing
        """
        self.frame_source = frame_source
        self.max_num_hands = max_num_hands
        self.min_detection_confidence = min_detection_confidence
        self.min_tracking_confidence = min_tracking_confidence
        self.pinch_threshold = pinch_threshold
        self.release_frames = release_frames
        self.model_path = model_path
        self.model_url = model_url

        # Thread-safe state
        self.snapshot_lock = threading.Lock()
        self.current_snapshot: Optional[HandSnapshot] = None
        self.running = False
        self.ready = False
        self.tracking_thread: Optional[threading.Thread] = None
        # One stop event per run; a stale loop only ever sees its own
        self._stop_event = threading.Event()
        self._stop_event.set()

        self._logger = logging.getLogger("HandTracker")

    def start_tracking(self) -> None:
        """Start hand tracking in a separate thread.

        Model download and loading happen on the tracking thread; failures
        there end the run and is_running() turns False.
        """
        if self.running:
            return

        stop_event = threading.Event()
        pinch_tracker = PinchTracker(self.pinch_threshold, self.release_frames)
        with self.snapshot_lock:
            self._stop_event = stop_event
            self.current_snapshot = None
            self.ready = False
            self.running = True
        self.tracking_thread = threading.Thread(
            target=self._tracking_loop, args=(stop_event, pinch_tracker), daemon=True)
        self.tracking_thread.start()
        self._logger.info("Started hand tracking")

    def stop_tracking(self) -> None:
        """Stop hand tracking thread and drop the last snapshot."""
        with self.snapshot_lock:
            self._stop_event.set()
            self.running = False
            self.current_snapshot = None
            self.ready = False
        if self.tracking_thread:
            self.tracking_thread.join(timeout=self.JOIN_TIMEOUT)
            if self.tracking_thread.is_alive():
                self._logger.warning("Tracking thread still busy, it will exit on its own")
            self.tracking_thread = None
            self._logger.info("Stopped hand tracking")

    def is_running(self) -> bool:
        return self.running

    def is_ready(self) -> bool:
        """True once the first frame has been processed."""
        return self.ready

    def get_snapshot(self) -> Optional[HandSnapshot]:
        """Get the latest snapshot in thread-safe manner."""
        with self.snapshot_lock:
            return self.current_snapshot

    def _create_landmarker(self):
        # mediapipe is slow to import; only pay for it once tracking starts
        import mediapipe as mp
        from mediapipe.tasks import python as mp_python
        from mediapipe.tasks.python import vision

        options = vision.HandLandmarkerOptions(
            base_options=mp_python.BaseOptions(model_asset_path=self.model_path),
            num_hands=self.max_num_hands,
            min_hand_detection_confidence=self.min_detection_confidence,
            min_hand_presence_confidence=self.min_detection_confidence,
            min_tracking_confidence=self.min_tracking_confidence,
            running_mode=vision.RunningMode.VIDEO,
        )
        return mp, vision.HandLandmarker.create_from_options(options)

    def _publish(self, stop_event: threading.Event, snapshot: HandSnapshot) -> None:
        with self.snapshot_lock:
            if stop_event.is_set():
                return
            self.current_snapshot = snapshot
            if not self.ready:
                self.ready = True
                self._logger.info("First hand tracking result published")

    def _finish(self, stop_event: threading.Event) -> None:
        with self.snapshot_lock:
            if not stop_event.is_set():
                # Run ended by itself, not by stop_tracking()
                stop_event.set()
                self.running = False

    def _tracking_loop(self, stop_event: threading.Event, pinch_tracker: PinchTracker) -> None:
        """Main hand tracking loop running in separate thread."""
        try:
            ensure_model(self.model_path, self.model_url)
            mp, landmarker = self._create_landmarker()
        except Exception as e:
            self._logger.error(f"Failed to create hand landmarker: {e}")
            self._finish(stop_event)
            return

        last_frame_id = None
        last_timestamp = -1
        start = time.monotonic()
        try:
            while not stop_event.is_set():
                latest = self.frame_source.latest()
                if latest is None or latest[0] == last_frame_id:
                    time.sleep(0.005)
                    continue
                last_frame_id, frame = latest

                # Timestamps must strictly increase in VIDEO mode
                timestamp_ms = max(int((time.monotonic() - start) * 1000), last_timestamp + 1)
                last_timestamp = timestamp_ms

                rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
                mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)
                result = landmarker.detect_for_video(mp_image, timestamp_ms)

                snapshot = build_snapshot(result.hand_landmarks, result.handedness,
                                          pinch_tracker, timestamp_ms)
                self._publish(stop_event, snapshot)
        except Exception as e:
            self._logger.error(f"Hand tracking failed: {e}")
        finally:
            landmarker.close()
            self._finish(stop_event)
