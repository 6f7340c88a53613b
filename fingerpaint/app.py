"""
Main application logic for Finger Paint.
Combines webcam capture and hand tracking with the painting sketch.
"""

import logging
from typing import Optional

import cv2

from .config import AppConfig, CameraConfig, HandConfig, PinchConfig, get_default_config
from .core.canvas import Canvas
from .core.capture import FrameSource
from .core.hand import HandTracker
from .core.lifecycle import LifecycleController, LifecycleState
from .core.sketch import Sketch, button_rect


KEY_ESC = 27


class FingerPaintApp:
    """Main Finger Paint application."""

    def __init__(self, config: Optional[AppConfig] = None):
        """
        Initialize Finger Paint application.

        Args:
            config: Application configuration. Uses default if None.
        """
        self.config = (config or get_default_config()).validate()
        canvas_cfg = self.config.canvas

        self.frame_source = FrameSource(
            camera_index=self.config.camera.camera_index,
            width=canvas_cfg.width,
            height=canvas_cfg.height
        )
        self.hand_tracker = HandTracker(
            self.frame_source,
            max_num_hands=self.config.hand.max_num_hands,
            min_detection_confidence=self.config.hand.min_detection_confidence,
            min_tracking_confidence=self.config.hand.min_tracking_confidence,
            pinch_threshold=self.config.pinch.threshold,
            release_frames=self.config.pinch.release_frames,
            model_path=self.config.hand.model_path,
            model_url=self.config.hand.model_url
        )
        self.lifecycle = LifecycleController(self.hand_tracker)
        self.sketch = Sketch(
            width=canvas_cfg.width,
            height=canvas_cfg.height,
            color_map=self.config.color_map,
            background=canvas_cfg.background,
            dim_color=canvas_cfg.dim_color,
            dim_alpha=canvas_cfg.dim_alpha
        )
        self.canvas = Canvas(canvas_cfg.width, canvas_cfg.height)
        self.running = False
        self._logger = logging.getLogger("FingerPaintApp")

    def tick(self):
        """Run one frame: poll state, pull the latest data and rasterise it."""
        status = self.lifecycle.poll()
        latest = self.frame_source.latest()
        frame = latest[1] if latest is not None else None
        snapshot = self.hand_tracker.get_snapshot()
        commands = self.sketch.tick(frame, snapshot, status)
        return self.canvas.render(commands)

    def handle_key(self, key: int) -> bool:
        """React to a key press. Returns False when the app should quit."""
        if key in (ord('q'), KEY_ESC):
            return False
        if key == ord('s'):
            self.lifecycle.start()
        elif key == ord('x'):
            self.lifecycle.stop()
        elif key == ord(' '):
            self.lifecycle.toggle()
        elif key == ord('c'):
            self.sketch.clear()
            self._logger.info("Canvas cleared")
        return True

    def handle_click(self, x: int, y: int) -> None:
        """Toggle tracking when the start/stop button is clicked."""
        status = self.lifecycle.state
        if status is LifecycleState.LOADING:
            return
        x1, y1, x2, y2 = button_rect(status, self.config.canvas.width, self.config.canvas.height)
        if x1 <= x <= x2 and y1 <= y <= y2:
            self.lifecycle.toggle()

    def _mouse_callback(self, event, x, y, flags, param):
        _ = flags, param
        if event == cv2.EVENT_LBUTTONDOWN:
            self.handle_click(x, y)

    def run(self):
        """Open the window and run the render loop until quit."""
        if self.running:
            self._logger.warning("Application is already running!")
            return

        self.running = True
        window = self.config.canvas.window_name
        try:
            self.frame_source.start()
            if self.config.autostart:
                self.lifecycle.start()

            cv2.namedWindow(window, cv2.WINDOW_AUTOSIZE)
            cv2.setMouseCallback(window, self._mouse_callback)

            while self.running:
                cv2.imshow(window, self.tick())
                key = cv2.waitKey(1) & 0xFF
                if key != 0xFF and not self.handle_key(key):
                    break
        finally:
            self.stop()
            cv2.destroyAllWindows()

    def stop(self):
        """Stop the application and clean up resources."""
        self.lifecycle.stop()
        self.frame_source.stop()
        self.running = False
        self._logger.info("Application stopped")


def create_app(camera_index: int = 0,
               max_num_hands: int = 2,
               min_detection_confidence: float = 0.5,
               pinch_threshold: float = 0.06,
               autostart: bool = False) -> FingerPaintApp:
    """
    Create application with the common options set.

    Args:
        camera_index: Camera device index
        max_num_hands: Maximum number of hands to track
        min_detection_confidence: Minimum confidence for hand detection
        pinch_threshold: Normalized thumb-to-fingertip distance counted as a pinch
        autostart: Start hand tracking without waiting for the button

    Returns:
        Configured FingerPaintApp instance
    """
    config = AppConfig(
        camera=CameraConfig(camera_index=camera_index),
        hand=HandConfig(
            max_num_hands=max_num_hands,
            min_detection_confidence=min_detection_confidence
        ),
        pinch=PinchConfig(threshold=pinch_threshold),
        autostart=autostart
    )
    return FingerPaintApp(config)
