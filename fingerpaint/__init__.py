"""
Finger Paint - paint on a mirrored webcam canvas by pinching your fingers.
"""

from .app import FingerPaintApp, create_app
from .config import AppConfig, get_default_config

__version__ = "1.0.0"
__all__ = [
    "FingerPaintApp",
    "create_app",
    "AppConfig",
    "get_default_config"
]
