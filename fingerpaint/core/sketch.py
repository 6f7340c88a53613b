"""
One rendering tick of the finger painting sketch.

The sketch does not own a window or a timer; whoever drives it calls tick()
once per display frame with the latest camera frame and hand snapshot and
gets back the draw commands for that frame.
"""

from typing import List, Optional, Tuple

import numpy as np

from .canvas import Background, CameraImage, DrawCommand, Label, label_size
from .landmarks import render_landmarks
from .lifecycle import LifecycleState
from .paint import ColorMap, DEFAULT_COLOR_MAP, PaintAccumulator
from .snapshot import HandSnapshot


BUTTON_TEXT = {
    LifecycleState.STOPPED: "Start Webcam",
    LifecycleState.LOADING: "...loading...",
    LifecycleState.STARTED: "Stop Webcam",
}
BUTTON_MARGIN = 10


def button_rect(status: LifecycleState, width: int, height: int) -> Tuple[int, int, int, int]:
    """(x1, y1, x2, y2) of the start/stop button for the given state."""
    box_w, box_h = label_size(BUTTON_TEXT[status])
    x1 = (width - box_w) // 2
    y1 = height - box_h - BUTTON_MARGIN
    return x1, y1, x1 + box_w, y1 + box_h


class Sketch:
    """Composes background, camera, paint, landmarks and the button overlay."""

    def __init__(self,
                 width: int = 640,
                 height: int = 480,
                 color_map: ColorMap = DEFAULT_COLOR_MAP,
                 background: Tuple[int, int, int] = (0, 0, 0),
                 dim_color: Tuple[int, int, int] = (10, 10, 10),
                 dim_alpha: float = 200 / 255,
                 show_button: bool = True):
        self.width = width
        self.height = height
        self.color_map = color_map
        self.background = background
        self.dim_color = dim_color
        self.dim_alpha = dim_alpha
        self.show_button = show_button
        self.paint = PaintAccumulator(color_map, width, height)

    def tick(self,
             frame: Optional[np.ndarray],
             snapshot: Optional[HandSnapshot],
             status: LifecycleState = LifecycleState.STOPPED) -> List[DrawCommand]:
        """Update the paint from the snapshot and return this frame's commands."""
        commands: List[DrawCommand] = [Background(self.background)]
        if frame is not None:
            commands.append(CameraImage(frame, True, self.dim_color, self.dim_alpha))
        commands.extend(self.paint.tick(snapshot))
        commands.extend(render_landmarks(snapshot, self.width, self.height, self.color_map))
        if self.show_button:
            x1, y1, _, _ = button_rect(status, self.width, self.height)
            commands.append(Label(x1, y1, BUTTON_TEXT[status]))
        return commands

    def clear(self) -> None:
        self.paint.clear()
