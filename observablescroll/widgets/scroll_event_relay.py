"""Routes host scroll events to a raw listener, the tracker and the callbacks."""

from __future__ import annotations

from dataclasses import dataclass

from observablescroll.widgets.scroll_callbacks import (RawScrollState,
                                                       ScrollListener,
                                                       ScrollViewCallbacks)
from observablescroll.widgets.scroll_tracker import (ScrollReport, ScrollState,
                                                     ScrollTracker)


@dataclass(frozen=True)
class LayoutSample:
    """What a view knows about its visible rows after one layout pass."""

    first_visible_index: int
    last_visible_index: int
    heights: dict[int, int]
    first_visible_top: int

    @property
    def visible_item_count(self) -> int:
        return self.last_visible_index - self.first_visible_index + 1


class ScrollEventRelay:
    """Feeds one view's events through its tracker.

    An upstream listener that was registered before tracking was attached
    keeps receiving every raw notification, whether or not a sample could be
    tracked.
    """

    def __init__(self, tracker: ScrollTracker | None = None,
                 callbacks: ScrollViewCallbacks | None = None,
                 upstream: ScrollListener | None = None):
        self.tracker = tracker if tracker is not None else ScrollTracker()
        self._callbacks = callbacks
        self._upstream = upstream

    @property
    def callbacks(self) -> ScrollViewCallbacks | None:
        return self._callbacks

    @property
    def upstream(self) -> ScrollListener | None:
        return self._upstream

    def set_callbacks(self, callbacks: ScrollViewCallbacks | None):
        self._callbacks = callbacks

    def set_upstream(self, listener: ScrollListener | None):
        self._upstream = listener

    def dispatch_scroll(self, view, sample: LayoutSample | None,
                        total_item_count: int) -> ScrollReport | None:
        if self._upstream is not None:
            if sample is None:
                self._upstream.on_scroll(view, 0, 0, total_item_count)
            else:
                self._upstream.on_scroll(view, sample.first_visible_index,
                                         sample.visible_item_count, total_item_count)
        if sample is None:
            return None

        report = self.tracker.on_layout_sample(
            sample.first_visible_index,
            sample.last_visible_index,
            sample.heights,
            sample.first_visible_top,
        )
        if report is not None and self._callbacks is not None:
            self._callbacks.on_scroll_changed(report.scroll_y, report.first_scroll,
                                              report.dragging)
        return report

    def dispatch_gesture_start(self, view):
        self.tracker.on_gesture_start()
        if self._upstream is not None:
            self._upstream.on_scroll_state_changed(view, RawScrollState.TOUCH_SCROLL)
        if self._callbacks is not None:
            self._callbacks.on_down_motion_event()

    def dispatch_gesture_end(self, view) -> ScrollState:
        direction = self.tracker.on_gesture_end()
        if self._upstream is not None:
            self._upstream.on_scroll_state_changed(view, RawScrollState.IDLE)
        if self._callbacks is not None:
            self._callbacks.on_up_or_cancel_motion_event(direction)
        return direction
