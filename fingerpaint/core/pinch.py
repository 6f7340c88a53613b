"""
Pinch classification for the hand tracker.

A finger is pinched while its tip is within ``threshold`` (normalized units)
of the thumb tip. Each (hand, finger) pair runs a small state machine:

    idle -> start -> held ... held -> released -> idle

``released`` is reported after ``release_frames`` consecutive frames without
a pinch, including frames where the hand is not visible at all.
"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

from .snapshot import FINGERTIPS, THUMB_TIP, PinchState, Point


def pinch_distance(landmarks: Sequence[Point], fingertip: int) -> float:
    """Distance between the thumb tip and a fingertip."""
    thumb = landmarks[THUMB_TIP]
    tip = landmarks[fingertip]
    return math.hypot(tip.x - thumb.x, tip.y - thumb.y)


def pinch_point(landmarks: Sequence[Point], fingertip: int) -> Point:
    """Midpoint between the thumb tip and a fingertip."""
    thumb = landmarks[THUMB_TIP]
    tip = landmarks[fingertip]
    return Point((thumb.x + tip.x) / 2, (thumb.y + tip.y) / 2)


class PinchTracker:
    """Tracks pinch transitions for every finger of every hand index."""

    def __init__(self, threshold: float = 0.06, release_frames: int = 1, num_hands: int = 2):
        self.threshold = threshold
        self.release_frames = release_frames
        self.num_hands = num_hands
        self.reset()

    def reset(self) -> None:
        """Forget all pinch state and positions."""
        fingers = len(FINGERTIPS)
        self._states: List[List[Optional[PinchState]]] = [
            [None] * fingers for _ in range(self.num_hands)
        ]
        self._positions: List[List[Optional[Point]]] = [
            [None] * fingers for _ in range(self.num_hands)
        ]
        self._unpinched_frames: List[List[int]] = [
            [0] * fingers for _ in range(self.num_hands)
        ]

    def update(self, hands: Dict[int, Sequence[Point]]
               ) -> Tuple[Dict[int, Tuple[Optional[PinchState], ...]],
                          Dict[int, Tuple[Optional[Point], ...]]]:
        """Advance every state machine by one tracker frame.

        Args:
            hands: Landmarks keyed by hand index; missing hands are treated
                as not pinching.

        Returns:
            Tuple of (pinch_state, cur_pinch) keyed by hand index, containing
            only hands that are visible or still have an active transition.
        """
        pinch_state = {}
        cur_pinch = {}
        for hand_index in range(self.num_hands):
            landmarks = hands.get(hand_index)
            for finger_index, fingertip in enumerate(FINGERTIPS):
                pinched = False
                if landmarks is not None and len(landmarks) > fingertip:
                    pinched = pinch_distance(landmarks, fingertip) < self.threshold
                    self._positions[hand_index][finger_index] = pinch_point(landmarks, fingertip)
                self._advance(hand_index, finger_index, pinched)

            states = tuple(self._states[hand_index])
            if landmarks is not None or any(state is not None for state in states):
                pinch_state[hand_index] = states
                cur_pinch[hand_index] = tuple(self._positions[hand_index])
        return pinch_state, cur_pinch

    def _advance(self, hand_index: int, finger_index: int, pinched: bool) -> None:
        state = self._states[hand_index][finger_index]

        if pinched:
            self._unpinched_frames[hand_index][finger_index] = 0
            if state in (PinchState.START, PinchState.HELD):
                state = PinchState.HELD
            else:
                state = PinchState.START
        elif state in (PinchState.START, PinchState.HELD):
            self._unpinched_frames[hand_index][finger_index] += 1
            if self._unpinched_frames[hand_index][finger_index] >= self.release_frames:
                state = PinchState.RELEASED
                self._unpinched_frames[hand_index][finger_index] = 0
        else:
            state = None

        self._states[hand_index][finger_index] = state
