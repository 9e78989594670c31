from observablescroll.utils.height_cache import HeightCache
from observablescroll.widgets.scroll_tracker import (ScrollReport, ScrollState,
                                                     ScrollTracker)


def feed(tracker, heights, first, top, visible=2):
    """Send one layout sample for rows `first`..`first + visible - 1`."""
    last = min(first + visible - 1, len(heights) - 1)
    window = {index: heights[index] for index in range(first, last + 1)}
    return tracker.on_layout_sample(first, last, window, top)


def true_offset(heights, first, top):
    return sum(heights[:first]) - top


def test_five_equal_rows_with_one_skipped_row():
    heights = [100] * 5
    tracker = ScrollTracker()

    assert feed(tracker, heights, 0, 0).scroll_y == 0
    assert feed(tracker, heights, 1, -40).scroll_y == 140
    # Row 2 was cached while visible in the previous sample.
    assert feed(tracker, heights, 3, -10).scroll_y == 310
    assert tracker.scroll_y == 310


def test_single_steps_match_exact_offsets_both_ways():
    heights = [50, 80, 120, 60, 90, 70, 40]
    tracker = ScrollTracker()

    path = [(0, 0), (0, -10), (1, -25), (2, 0), (3, -59), (4, -1), (5, -30),
            (4, -80), (3, -12), (2, -100), (1, 0), (0, -3)]
    for first, top in path:
        report = feed(tracker, heights, first, top)
        assert report.scroll_y == true_offset(heights, first, top)


def test_skip_with_cached_rows_equals_single_steps():
    heights = [40, 70, 55, 90, 65, 30]

    skipping = ScrollTracker()
    feed(skipping, heights, 0, 0, visible=4)
    skipped = feed(skipping, heights, 4, -12, visible=2)

    stepping = ScrollTracker()
    for first in range(4):
        feed(stepping, heights, first, 0)
    stepped = feed(stepping, heights, 4, -12)

    assert skipped.scroll_y == stepped.scroll_y == true_offset(heights, 4, -12)
    assert skipping.snapshot().accumulated_scrolled_height == stepping.snapshot().accumulated_scrolled_height


def test_skip_over_unmeasured_row_underestimates_by_its_height():
    heights = [40, 70, 55, 90, 65, 30]
    tracker = ScrollTracker()
    # Rows 0..2 are measured; row 3 never appears on screen.
    feed(tracker, heights, 0, 0, visible=3)
    report = feed(tracker, heights, 4, -8, visible=2)

    assert report.scroll_y == true_offset(heights, 4, -8) - heights[3]


def test_skip_over_unmeasured_rows_logs_diagnostics():
    messages = []
    tracker = ScrollTracker(log=lambda component, message: messages.append((component, message)))
    heights = [10] * 10
    feed(tracker, heights, 0, 0, visible=1)
    feed(tracker, heights, 5, 0, visible=1)

    assert any("Skipped 4 row(s)" in message for _, message in messages)
    assert any("No cached height for skipped row 3" in message for _, message in messages)
    assert all(component == "SCROLL" for component, _ in messages)


def test_advance_then_retreat_restores_offset():
    heights = [30, 45, 60, 75, 90, 105, 120]
    tracker = ScrollTracker()
    for first in range(3):
        feed(tracker, heights, first, 0, visible=3)

    before = feed(tracker, heights, 2, -15, visible=3).scroll_y
    feed(tracker, heights, 5, -20, visible=2)
    after = feed(tracker, heights, 2, -15, visible=3).scroll_y

    assert after == before == true_offset(heights, 2, -15)


def test_direction_classification():
    heights = [100] * 6
    tracker = ScrollTracker()

    assert feed(tracker, heights, 0, 0).direction == ScrollState.STATIONARY
    assert feed(tracker, heights, 0, -30).direction == ScrollState.ADVANCING
    assert feed(tracker, heights, 1, -10).direction == ScrollState.ADVANCING
    assert feed(tracker, heights, 4, -10).direction == ScrollState.ADVANCING
    assert feed(tracker, heights, 4, -10).direction == ScrollState.STATIONARY
    assert feed(tracker, heights, 4, 0).direction == ScrollState.RETREATING
    assert feed(tracker, heights, 3, -50).direction == ScrollState.RETREATING
    assert feed(tracker, heights, 0, 0).direction == ScrollState.RETREATING
    assert tracker.direction == ScrollState.RETREATING


def test_first_sample_after_construction_ignores_unset_height():
    heights = [100] * 6
    tracker = ScrollTracker()

    report = feed(tracker, heights, 3, -5)

    # Rows 1 and 2 were never measured and the previous first row has no
    # height yet, so only the top offset counts.
    assert report.scroll_y == 5
    assert tracker.snapshot().accumulated_scrolled_height == 0


def test_empty_viewport_is_ignored():
    tracker = ScrollTracker()

    assert tracker.on_layout_sample(0, -1, {}, 0) is None
    assert tracker.scroll_y == 0
    assert len(tracker.height_cache) == 0
    assert tracker.snapshot().prev_first_visible_height is None


def test_top_row_height_change_is_picked_up():
    tracker = ScrollTracker()
    tracker.on_layout_sample(0, 1, {0: 100, 1: 50}, 0)
    tracker.on_layout_sample(0, 1, {0: 150, 1: 50}, -20)
    report = tracker.on_layout_sample(1, 1, {1: 50}, -5)

    assert report.scroll_y == 155


def test_non_top_row_keeps_height_from_when_it_became_first():
    tracker = ScrollTracker()
    tracker.on_layout_sample(0, 1, {0: 100, 1: 80}, 0)
    tracker.on_layout_sample(1, 2, {1: 80, 2: 60}, -10)
    tracker.on_layout_sample(1, 2, {1: 200, 2: 60}, -10)
    report = tracker.on_layout_sample(2, 2, {2: 60}, 0)

    assert report.scroll_y == 180
    assert tracker.height_cache.lookup(1) == 200


def test_heights_can_come_from_a_callable():
    tracker = ScrollTracker()
    tracker.on_layout_sample(0, 2, lambda index: 25 * (index + 1), 0)
    report = tracker.on_layout_sample(1, 2, lambda index: 25 * (index + 1), -7)

    assert report.scroll_y == 32
    assert tracker.height_cache.lookup(2) == 75


def test_gesture_flags():
    heights = [100] * 4
    tracker = ScrollTracker()
    feed(tracker, heights, 0, 0)

    tracker.on_gesture_start()
    first = feed(tracker, heights, 0, -20)
    second = feed(tracker, heights, 0, -40)
    released = tracker.on_gesture_end()
    third = feed(tracker, heights, 0, -45)

    assert first == ScrollReport(scroll_y=20, direction=ScrollState.ADVANCING,
                                 first_scroll=True, dragging=True)
    assert second.first_scroll is False and second.dragging is True
    assert released == ScrollState.ADVANCING
    assert third.dragging is False and third.first_scroll is False


def test_snapshot_restore_continues_identically():
    heights = [40, 70, 55, 90, 65, 30, 80]
    original = ScrollTracker()
    for first, top in [(0, 0), (1, -10), (2, -30), (3, -5)]:
        feed(original, heights, first, top, visible=3)
    feed(original, heights, 1, -20, visible=2)

    restored = ScrollTracker.from_snapshot(original.snapshot())

    assert restored.scroll_y == original.scroll_y
    assert restored.height_cache == original.height_cache
    # Jumps over rows that are only known from the cache.
    assert feed(restored, heights, 5, -3) == feed(original, heights, 5, -3)
    assert feed(restored, heights, 2, -1) == feed(original, heights, 2, -1)


def test_restore_mid_gesture_reports_identically():
    heights = [100] * 8
    original = ScrollTracker()
    feed(original, heights, 0, 0, visible=4)
    original.on_gesture_start()

    restored = ScrollTracker.from_snapshot(original.snapshot())
    expected = feed(original, heights, 1, -20, visible=4)

    assert feed(restored, heights, 1, -20, visible=4) == expected
    assert expected == ScrollReport(120, ScrollState.ADVANCING, True, True)

    restored = ScrollTracker.from_snapshot(original.snapshot())
    assert restored.dragging is True
    assert feed(restored, heights, 3, -60, visible=2) == feed(original, heights, 3, -60, visible=2)
    assert restored.on_gesture_end() == original.on_gesture_end() == ScrollState.ADVANCING


def test_restore_with_empty_cache():
    tracker = ScrollTracker(height_cache=HeightCache({1: 10}))
    tracker.restore(ScrollTracker().snapshot())

    assert len(tracker.height_cache) == 0
    assert tracker.scroll_y == 0
    assert tracker.direction == ScrollState.STATIONARY
