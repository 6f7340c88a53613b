"""
Hand tracking snapshot types shared by the tracker and the renderers.

A snapshot is the latest result published by the hand tracker. Readers pull it
once per tick; the same snapshot may be returned on several consecutive ticks
and any part of it may be missing.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, NamedTuple, Optional, Tuple


NUM_LANDMARKS = 21
THUMB_TIP = 4
# Index, middle, ring and pinky tips, in finger order
FINGERTIPS = (8, 12, 16, 20)


class Point(NamedTuple):
    """Normalized image coordinate."""
    x: float
    y: float


class PinchState(Enum):
    """Per-finger pinch transition for the current tracker frame."""
    START = "start"
    HELD = "held"
    RELEASED = "released"


@dataclass(frozen=True)
class HandSnapshot:
    """Immutable view of the hand tracker's latest result.

    Every mapping is keyed by hand index (0 = left, 1 = right). A hand index
    that is missing from a mapping simply has no data this tick.
    """
    landmarks: Dict[int, Tuple[Point, ...]] = field(default_factory=dict)
    pinch_state: Dict[int, Tuple[Optional[PinchState], ...]] = field(default_factory=dict)
    cur_pinch: Dict[int, Tuple[Optional[Point], ...]] = field(default_factory=dict)
    timestamp_ms: int = 0

    def finger_state(self, hand_index: int, finger_index: int) -> Optional[PinchState]:
        """Pinch state for one finger, or None when absent."""
        states = self.pinch_state.get(hand_index)
        if not states or finger_index >= len(states):
            return None
        return states[finger_index]

    def finger_position(self, hand_index: int, finger_index: int) -> Optional[Point]:
        """Current pinch coordinate for one finger, or None when absent."""
        positions = self.cur_pinch.get(hand_index)
        if not positions or finger_index >= len(positions):
            return None
        return positions[finger_index]
