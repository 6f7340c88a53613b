"""
Webcam frame source.
"""

import logging
import threading
import time
from typing import Optional, Tuple

import cv2
import numpy as np


class FrameSource:
    """Reads the webcam in a background thread and keeps the latest frame."""

    # Consecutive failed reads before the camera is given up on
    MAX_READ_FAILURES = 5
    RETRY_DELAY = 0.05

    def __init__(self, camera_index: int = 0, width: int = 640, height: int = 480):
        """
        Initialize frame source.

        Args:
            camera_index: Camera device index
            width: Width frames are resized to
            height: Height frames are resized to
        """
        self.camera_index = camera_index
        self.width = width
        self.height = height

        # Thread-safe state
        self.frame_lock = threading.Lock()
        self._frame: Optional[np.ndarray] = None
        self._frame_id = 0
        self.running = False
        self._capture: Optional[cv2.VideoCapture] = None
        self._thread: Optional[threading.Thread] = None

        self._logger = logging.getLogger("FrameSource")

    def start(self) -> None:
        """Open the camera and start reading frames."""
        if self.running:
            return

        capture = cv2.VideoCapture(self.camera_index)
        if not capture.isOpened():
            capture.release()
            raise RuntimeError(f"Could not open camera {self.camera_index}")
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)

        self._capture = capture
        self.running = True
        self._thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._thread.start()
        self._logger.info(f"Started capture from camera {self.camera_index}")

    def stop(self) -> None:
        """Stop reading and release the camera."""
        if not self.running and self._thread is None:
            return

        self.running = False
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=1.0)
        self._thread = None
        self._logger.info("Stopped capture")

    def latest(self) -> Optional[Tuple[int, np.ndarray]]:
        """Get (frame_id, frame) for the newest frame.

        None before the first frame and once capture has stopped.
        """
        with self.frame_lock:
            if self._frame is None or not self.running:
                return None
            return self._frame_id, self._frame.copy()

    def _capture_loop(self) -> None:
        """Main capture loop running in separate thread."""
        capture = self._capture
        failures = 0
        try:
            while self.running:
                ret, frame = capture.read()
                if not ret:
                    failures += 1
                    if failures >= self.MAX_READ_FAILURES:
                        self._logger.warning(
                            f"Failed to read from camera {self.camera_index} {failures} times, giving up")
                        break
                    time.sleep(self.RETRY_DELAY)
                    continue
                failures = 0

                if frame.shape[1] != self.width or frame.shape[0] != self.height:
                    frame = cv2.resize(frame, (self.width, self.height))

                with self.frame_lock:
                    self._frame = frame
                    self._frame_id += 1

                time.sleep(0.001)
        finally:
            capture.release()
            with self.frame_lock:
                self.running = False
                self._frame = None
