"""
Tests for paint accumulation, clearing and dot rendering.
"""

from fingerpaint.core.canvas import Circle
from fingerpaint.core.paint import (
    DEFAULT_COLOR_MAP,
    Dot,
    PaintAccumulator,
    PaintBuffer,
    accumulate,
    render_dots,
    should_clear,
    update,
)
from fingerpaint.core.snapshot import HandSnapshot, PinchState, Point


HELD = PinchState.HELD
RELEASED = PinchState.RELEASED
START = PinchState.START


def make_snapshot(states, positions=None):
    """Build a snapshot from {hand: [state x4]} with a default position per finger."""
    cur_pinch = {}
    for hand, hand_states in states.items():
        cur_pinch[hand] = tuple(
            (positions or {}).get((hand, finger), Point(0.1 * (finger + 1), 0.5))
            for finger in range(len(hand_states))
        )
    return HandSnapshot(
        pinch_state={hand: tuple(s) for hand, s in states.items()},
        cur_pinch=cur_pinch,
    )


def test_held_finger_appends_dot():
    buffer = PaintBuffer()
    snapshot = make_snapshot({0: [HELD, None, None, None]}, {(0, 0): Point(0.5, 0.5)})

    added = accumulate(buffer, snapshot)

    assert added == 1
    assert list(buffer) == [Dot(0.5, 0.5, 0, 0, 40)]


def test_length_grows_by_number_of_held_fingers():
    buffer = PaintBuffer([Dot(0.2, 0.2, 1, 1, 10)])
    snapshot = make_snapshot({
        0: [START, HELD, RELEASED, None],
        1: [HELD, HELD, None, HELD],
    })

    update(buffer, snapshot)

    assert len(buffer) == 1 + 4
    assert [(d.hand_index, d.finger_index) for d in buffer][1:] == [(0, 1), (1, 0), (1, 1), (1, 3)]


def test_only_left_index_uses_eraser_radius():
    buffer = PaintBuffer()
    update(buffer, make_snapshot({0: [HELD, HELD, HELD, HELD], 1: [HELD, HELD, HELD, HELD]}))

    radii = {(d.hand_index, d.finger_index): d.radius for d in buffer}
    assert radii.pop((0, 0)) == 40
    assert set(radii.values()) == {10}


def test_missing_snapshot_is_noop():
    buffer = PaintBuffer([Dot(0.3, 0.4, 0, 1, 10)])

    update(buffer, None)
    update(buffer, HandSnapshot())

    assert list(buffer) == [Dot(0.3, 0.4, 0, 1, 10)]


def test_held_without_position_is_skipped():
    buffer = PaintBuffer()
    snapshot = HandSnapshot(pinch_state={1: (HELD, HELD)}, cur_pinch={1: (None,)})

    assert accumulate(buffer, snapshot) == 0
    assert len(buffer) == 0


def test_left_pinky_release_clears_buffer():
    buffer = PaintBuffer([Dot(0.1, 0.1, 1, 2, 10) for _ in range(25)])

    update(buffer, make_snapshot({0: [None, None, None, RELEASED]}))

    assert len(buffer) == 0


def test_clear_discards_same_tick_dots():
    buffer = PaintBuffer([Dot(0.5, 0.5, 0, 0, 40)])
    snapshot = make_snapshot({0: [HELD, HELD, None, RELEASED], 1: [HELD, None, None, None]})

    update(buffer, snapshot)

    assert len(buffer) == 0


def test_right_pinky_release_does_not_clear():
    buffer = PaintBuffer([Dot(0.5, 0.5, 0, 0, 40)])

    update(buffer, make_snapshot({1: [None, None, None, RELEASED]}))

    assert len(buffer) == 1


def test_missing_pinky_entry_is_not_released():
    assert not should_clear(HandSnapshot(pinch_state={0: (HELD, HELD, HELD)}))
    assert not should_clear(HandSnapshot(pinch_state={1: (None, None, None, RELEASED)}))
    assert not should_clear(None)
    assert should_clear(HandSnapshot(pinch_state={0: (None, None, None, RELEASED)}))


def test_render_scenario_center_dot():
    buffer = PaintBuffer([Dot(0.5, 0.5, 0, 0, 40)])

    circles = render_dots(buffer, 640, 480)

    assert circles == [Circle(320.0, 240.0, 40, DEFAULT_COLOR_MAP[0][0])]
    assert circles[0].stroke is None


def test_render_mirrors_and_keeps_insertion_order():
    buffer = PaintBuffer([
        Dot(0.0, 0.0, 1, 0, 10),
        Dot(1.0, 1.0, 1, 1, 10),
        Dot(0.25, 0.5, 0, 2, 10),
    ])

    circles = render_dots(buffer, 640, 480)

    assert [(c.x, c.y) for c in circles] == [(640.0, 0.0), (0.0, 480.0), (480.0, 240.0)]
    assert [c.fill for c in circles] == [(255, 0, 0), (0, 255, 0), (0, 0, 255)]


def test_render_is_pure():
    buffer = PaintBuffer([Dot(0.3, 0.7, 1, 3, 10), Dot(0.6, 0.2, 0, 0, 40)])

    assert render_dots(buffer, 640, 480) == render_dots(buffer, 640, 480)
    assert len(buffer) == 2


def test_accumulator_tick_sequence():
    accumulator = PaintAccumulator(width=640, height=480)

    circles = accumulator.tick(make_snapshot({0: [HELD, None, None, None]}, {(0, 0): Point(0.5, 0.5)}))
    assert circles == [Circle(320.0, 240.0, 40, (0, 0, 0))]

    # Tracker lost: the existing dot is still drawn
    assert accumulator.tick(None) == circles
    assert len(accumulator.buffer) == 1

    assert accumulator.tick(make_snapshot({0: [HELD, None, None, RELEASED]})) == []
    assert len(accumulator.buffer) == 0


def test_accumulator_repeated_snapshot_paints_again():
    accumulator = PaintAccumulator()
    snapshot = make_snapshot({1: [None, HELD, None, None]})

    accumulator.tick(snapshot)
    accumulator.tick(snapshot)

    assert len(accumulator.buffer) == 2


def test_accumulator_clear():
    accumulator = PaintAccumulator()
    accumulator.tick(make_snapshot({1: [HELD, HELD, None, None]}))

    accumulator.clear()

    assert len(accumulator.buffer) == 0
