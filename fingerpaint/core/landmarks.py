"""
Draws every tracked hand landmark on top of the paint.
"""

from typing import List, Optional

from .canvas import Circle, WHITE, to_display
from .paint import ColorMap, DEFAULT_COLOR_MAP, ERASER_FINGER
from .snapshot import FINGERTIPS, HandSnapshot


EMPHASIS_DIAMETER = 40
EMPHASIS_STROKE_WEIGHT = 5
LANDMARK_DIAMETER = 10
# Landmark index of the eraser fingertip (left index finger)
ERASER_LANDMARK = (ERASER_FINGER[0], FINGERTIPS[ERASER_FINGER[1]])


def landmark_circle(hand_index: int, landmark_index: int, x: float, y: float,
                    color_map: ColorMap = DEFAULT_COLOR_MAP) -> Circle:
    """Style a single landmark already mapped to canvas coordinates."""
    fill = WHITE
    if color_map.has_hand(hand_index) and landmark_index in FINGERTIPS:
        fill = color_map.get(hand_index, FINGERTIPS.index(landmark_index)) or WHITE

    if (hand_index, landmark_index) == ERASER_LANDMARK:
        return Circle(x, y, EMPHASIS_DIAMETER, fill, WHITE, EMPHASIS_STROKE_WEIGHT)
    return Circle(x, y, LANDMARK_DIAMETER, fill)


def render_landmarks(snapshot: Optional[HandSnapshot], width: int, height: int,
                     color_map: ColorMap = DEFAULT_COLOR_MAP) -> List[Circle]:
    """Circles for all landmarks of all tracked hands, mirrored horizontally."""
    if snapshot is None or not snapshot.landmarks:
        return []

    circles = []
    for hand_index in sorted(snapshot.landmarks):
        for landmark_index, landmark in enumerate(snapshot.landmarks[hand_index]):
            x, y = to_display(landmark, width, height)
            circles.append(landmark_circle(hand_index, landmark_index, x, y, color_map))
    return circles
