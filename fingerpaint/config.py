"""
Configuration management for Finger Paint.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .core.paint import ColorMap, DEFAULT_COLOR_MAP


@dataclass
class CanvasConfig:
    """Display canvas configuration."""
    width: int = 640
    height: int = 480
    background: Tuple[int, int, int] = (0, 0, 0)
    dim_color: Tuple[int, int, int] = (10, 10, 10)
    dim_alpha: float = 200 / 255
    window_name: str = "Finger Paint"


@dataclass
class CameraConfig:
    """Webcam configuration."""
    camera_index: int = 0


@dataclass
class HandConfig:
    """Hand tracking configuration."""
    max_num_hands: int = 2
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    model_path: str = "models/hand_landmarker.task"
    model_url: str = (
        "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
        "hand_landmarker/float16/1/hand_landmarker.task"
    )


@dataclass
class PinchConfig:
    """Pinch classification configuration."""
    threshold: float = 0.06  # normalized thumb-to-fingertip distance
    release_frames: int = 1


@dataclass
class AppConfig:
    """Main application configuration."""
    canvas: CanvasConfig
    camera: CameraConfig
    hand: HandConfig
    pinch: PinchConfig
    color_map: ColorMap = field(default_factory=lambda: DEFAULT_COLOR_MAP)
    autostart: bool = False

    def __init__(self,
                 canvas: Optional[CanvasConfig] = None,
                 camera: Optional[CameraConfig] = None,
                 hand: Optional[HandConfig] = None,
                 pinch: Optional[PinchConfig] = None,
                 color_map: Optional[ColorMap] = None,
                 autostart: bool = False):
        self.canvas = canvas or CanvasConfig()
        self.camera = camera or CameraConfig()
        self.hand = hand or HandConfig()
        self.pinch = pinch or PinchConfig()
        self.color_map = color_map or DEFAULT_COLOR_MAP
        self.autostart = autostart

    def validate(self) -> "AppConfig":
        """Check value ranges, raising ValueError on the first bad field."""
        if self.canvas.width <= 0 or self.canvas.height <= 0:
            raise ValueError(
                f"Canvas size must be positive, got {self.canvas.width}x{self.canvas.height}")
        if not 0.0 <= self.canvas.dim_alpha <= 1.0:
            raise ValueError(f"dim_alpha must be within [0, 1], got {self.canvas.dim_alpha}")
        if not 1 <= self.hand.max_num_hands <= 2:
            raise ValueError(f"max_num_hands must be 1 or 2, got {self.hand.max_num_hands}")
        for name in ("min_detection_confidence", "min_tracking_confidence"):
            value = getattr(self.hand, name)
            if not 0.0 < value <= 1.0:
                raise ValueError(f"{name} must be within (0, 1], got {value}")
        if not 0.0 < self.pinch.threshold <= 1.0:
            raise ValueError(f"Pinch threshold must be within (0, 1], got {self.pinch.threshold}")
        if self.pinch.release_frames < 1:
            raise ValueError(f"release_frames must be at least 1, got {self.pinch.release_frames}")
        return self


def get_default_config() -> AppConfig:
    """Get default application configuration."""
    return AppConfig()
