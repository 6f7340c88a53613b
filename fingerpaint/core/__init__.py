"""
Core functionality modules for Finger Paint.
"""

from .snapshot import HandSnapshot, PinchState, Point, FINGERTIPS, THUMB_TIP
from .canvas import Canvas, Background, CameraImage, Circle, Label, mirror_x, to_display
from .paint import (
    ColorMap,
    DEFAULT_COLOR_MAP,
    Dot,
    PaintBuffer,
    PaintAccumulator,
    accumulate,
    should_clear,
    update,
    render_dots,
)
from .landmarks import render_landmarks
from .pinch import PinchTracker
from .lifecycle import LifecycleController, LifecycleState
from .sketch import Sketch
from .capture import FrameSource
from .hand import HandTracker, build_snapshot

__all__ = [
    "HandSnapshot",
    "PinchState",
    "Point",
    "FINGERTIPS",
    "THUMB_TIP",
    "Canvas",
    "Background",
    "CameraImage",
    "Circle",
    "Label",
    "mirror_x",
    "to_display",
    "ColorMap",
    "DEFAULT_COLOR_MAP",
    "Dot",
    "PaintBuffer",
    "PaintAccumulator",
    "accumulate",
    "should_clear",
    "update",
    "render_dots",
    "render_landmarks",
    "PinchTracker",
    "LifecycleController",
    "LifecycleState",
    "Sketch",
    "FrameSource",
    "HandTracker",
    "build_snapshot",
]
