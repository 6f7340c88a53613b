"""
Paint accumulation.

Every tracker frame in which a finger is held in a pinch leaves a dot at the
pinch position. Dots are only ever appended; releasing the left pinky pinch
wipes the whole buffer.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from .canvas import Circle, Color, to_display
from .snapshot import HandSnapshot, PinchState, Point


ERASER_RADIUS = 40
BRUSH_RADIUS = 10
# Left index finger paints with the large black "eraser" dot
ERASER_FINGER = (0, 0)
# Releasing a left pinky pinch clears the canvas
CLEAR_GESTURE = (0, 3)

NUM_HANDS = 2
NUM_FINGERS = 4

logger = logging.getLogger("PaintAccumulator")


@dataclass(frozen=True)
class ColorMap:
    """Static (hand_index, finger_index) -> RGB colour table."""
    rows: Tuple[Tuple[Color, ...], ...]

    def has_hand(self, hand_index: int) -> bool:
        return 0 <= hand_index < len(self.rows)

    def get(self, hand_index: int, finger_index: int) -> Optional[Color]:
        if not self.has_hand(hand_index):
            return None
        row = self.rows[hand_index]
        if not 0 <= finger_index < len(row):
            return None
        return row[finger_index]

    def __getitem__(self, hand_index: int) -> Tuple[Color, ...]:
        return self.rows[hand_index]


DEFAULT_COLOR_MAP = ColorMap((
    # Left fingertips
    ((0, 0, 0), (255, 0, 255), (0, 0, 255), (255, 255, 255)),
    # Right fingertips
    ((255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 0)),
))


@dataclass(frozen=True)
class Dot:
    x: float
    y: float
    hand_index: int
    finger_index: int
    radius: int


class PaintBuffer:
    """Append-only sequence of dots; insertion order is draw order."""

    def __init__(self, dots: Sequence[Dot] = ()):
        self._dots: List[Dot] = list(dots)

    def append(self, dot: Dot) -> None:
        self._dots.append(dot)

    def clear(self) -> None:
        self._dots = []

    def __len__(self) -> int:
        return len(self._dots)

    def __iter__(self) -> Iterator[Dot]:
        return iter(self._dots)

    def __getitem__(self, index: int) -> Dot:
        return self._dots[index]


def dot_radius(hand_index: int, finger_index: int) -> int:
    return ERASER_RADIUS if (hand_index, finger_index) == ERASER_FINGER else BRUSH_RADIUS


def accumulate(buffer: PaintBuffer, snapshot: Optional[HandSnapshot]) -> int:
    """Append a dot for every finger currently held in a pinch.

    Returns the number of dots appended. A missing snapshot, hand, finger or
    pinch position is skipped.
    """
    if snapshot is None:
        return 0

    added = 0
    for hand_index in sorted(snapshot.pinch_state):
        for finger_index, state in enumerate(snapshot.pinch_state[hand_index]):
            if state is not PinchState.HELD:
                continue
            position = snapshot.finger_position(hand_index, finger_index)
            if position is None:
                continue
            buffer.append(Dot(position.x, position.y, hand_index, finger_index,
                              dot_radius(hand_index, finger_index)))
            added += 1
    return added


def should_clear(snapshot: Optional[HandSnapshot]) -> bool:
    """True when the clear gesture was released this tick.

    A missing hand or finger entry counts as not released.
    """
    if snapshot is None:
        return False
    return snapshot.finger_state(*CLEAR_GESTURE) is PinchState.RELEASED


def update(buffer: PaintBuffer, snapshot: Optional[HandSnapshot]) -> PaintBuffer:
    """Accumulate, then clear if requested; returns the same buffer."""
    accumulate(buffer, snapshot)
    if should_clear(snapshot):
        logger.debug(f"Clear gesture released, discarding {len(buffer)} dots")
        buffer.clear()
    return buffer


def render_dots(buffer: PaintBuffer, width: int, height: int,
                color_map: ColorMap = DEFAULT_COLOR_MAP) -> List[Circle]:
    """Circles for every dot in insertion order, mirrored horizontally."""
    circles = []
    for dot in buffer:
        fill = color_map.get(dot.hand_index, dot.finger_index)
        if fill is None:
            continue
        x, y = to_display(Point(dot.x, dot.y), width, height)
        circles.append(Circle(x, y, dot.radius, fill))
    return circles


class PaintAccumulator:
    """Owns the paint buffer for the lifetime of the sketch."""

    def __init__(self, color_map: ColorMap = DEFAULT_COLOR_MAP,
                 width: int = 640, height: int = 480):
        self.color_map = color_map
        self.width = width
        self.height = height
        self._buffer = PaintBuffer()

    @property
    def buffer(self) -> PaintBuffer:
        return self._buffer

    def tick(self, snapshot: Optional[HandSnapshot]) -> List[Circle]:
        """Update the buffer from one snapshot and return the dots to draw."""
        update(self._buffer, snapshot)
        return render_dots(self._buffer, self.width, self.height, self.color_map)

    def clear(self) -> None:
        self._buffer.clear()
