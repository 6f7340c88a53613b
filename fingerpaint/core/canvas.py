"""
Draw commands and the OpenCV canvas that rasterises them.

Renderers return plain command objects so that a tick can be inspected
without a window. Colours in commands are RGB; the canvas converts to the
BGR order OpenCV expects.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

import cv2
import numpy as np

from .snapshot import Point


Color = Tuple[int, int, int]

WHITE: Color = (255, 255, 255)
BLACK: Color = (0, 0, 0)


def mirror_x(nx: float, width: int) -> float:
    """Map a normalized x coordinate to a horizontally mirrored pixel x."""
    return width - nx * width


def to_display(point: Point, width: int, height: int) -> Tuple[float, float]:
    """Map a normalized point to mirrored canvas coordinates."""
    return mirror_x(point.x, width), point.y * height


@dataclass(frozen=True)
class Background:
    color: Color = BLACK


@dataclass(frozen=True, eq=False)
class CameraImage:
    """Camera frame stretched over the whole canvas, then dimmed."""
    frame: np.ndarray
    mirrored: bool = True
    dim_color: Color = (10, 10, 10)
    dim_alpha: float = 200 / 255


@dataclass(frozen=True)
class Circle:
    x: float
    y: float
    diameter: float
    fill: Color
    stroke: Optional[Color] = None
    stroke_weight: int = 0


@dataclass(frozen=True)
class Label:
    """Text on a filled box; (x, y) is the box's top-left corner."""
    x: int
    y: int
    text: str
    color: Color = WHITE
    background: Optional[Color] = (60, 60, 60)
    padding: int = 8


DrawCommand = Union[Background, CameraImage, Circle, Label]

LABEL_FONT = cv2.FONT_HERSHEY_SIMPLEX
LABEL_SCALE = 0.6
LABEL_THICKNESS = 1


def label_size(text: str, padding: int = 8) -> Tuple[int, int]:
    """Width and height of the box a Label with this text occupies."""
    (text_w, text_h), baseline = cv2.getTextSize(text, LABEL_FONT, LABEL_SCALE, LABEL_THICKNESS)
    return text_w + 2 * padding, text_h + baseline + 2 * padding


def _bgr(color: Color) -> Tuple[int, int, int]:
    r, g, b = color
    return int(b), int(g), int(r)


class Canvas:
    """Fixed-size BGR image that draw commands are applied to."""

    def __init__(self, width: int = 640, height: int = 480):
        self.width = width
        self.height = height
        self.image = np.zeros((height, width, 3), dtype=np.uint8)

    def render(self, commands: Iterable[DrawCommand]) -> np.ndarray:
        """Apply commands in order and return the resulting image."""
        for command in commands:
            if isinstance(command, Background):
                self.image[:] = _bgr(command.color)
            elif isinstance(command, CameraImage):
                self._draw_camera(command)
            elif isinstance(command, Circle):
                self._draw_circle(command)
            elif isinstance(command, Label):
                self._draw_label(command)
            else:
                raise TypeError(f"Unknown draw command: {command!r}")
        return self.image

    def _draw_camera(self, command: CameraImage) -> None:
        frame = command.frame
        if frame.shape[1] != self.width or frame.shape[0] != self.height:
            frame = cv2.resize(frame, (self.width, self.height))
        if command.mirrored:
            frame = cv2.flip(frame, 1)

        overlay = np.empty_like(frame)
        overlay[:] = _bgr(command.dim_color)
        self.image[:] = cv2.addWeighted(overlay, command.dim_alpha, frame, 1 - command.dim_alpha, 0)

    def _draw_circle(self, command: Circle) -> None:
        center = (int(round(command.x)), int(round(command.y)))
        radius = max(int(round(command.diameter / 2)), 1)
        cv2.circle(self.image, center, radius, _bgr(command.fill), -1, cv2.LINE_AA)
        if command.stroke is not None and command.stroke_weight > 0:
            cv2.circle(self.image, center, radius, _bgr(command.stroke),
                       command.stroke_weight, cv2.LINE_AA)

    def _draw_label(self, command: Label) -> None:
        box_w, box_h = label_size(command.text, command.padding)
        if command.background is not None:
            cv2.rectangle(self.image, (command.x, command.y),
                          (command.x + box_w, command.y + box_h), _bgr(command.background), -1)
        (_, text_h), _ = cv2.getTextSize(command.text, LABEL_FONT, LABEL_SCALE, LABEL_THICKNESS)
        origin = (command.x + command.padding, command.y + command.padding + text_h)
        cv2.putText(self.image, command.text, origin, LABEL_FONT, LABEL_SCALE,
                    _bgr(command.color), LABEL_THICKNESS, cv2.LINE_AA)
