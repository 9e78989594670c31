"""Observer interfaces for scroll-tracking views.

Subclass and override only the methods you need; the defaults do nothing.
"""

from enum import IntEnum


class RawScrollState(IntEnum):
    """Scroll state reported to raw scroll listeners."""

    IDLE = 0
    TOUCH_SCROLL = 1


class ScrollViewCallbacks:
    """Receives the tracked absolute offset and pointer boundaries."""

    def on_scroll_changed(self, scroll_y: int, first_scroll: bool, dragging: bool):
        pass

    def on_down_motion_event(self):
        pass

    def on_up_or_cancel_motion_event(self, scroll_state):
        pass


class ScrollListener:
    """Receives the raw, untracked scroll notifications of a view."""

    def on_scroll_state_changed(self, view, scroll_state: RawScrollState):
        pass

    def on_scroll(self, view, first_visible_item: int, visible_item_count: int,
                  total_item_count: int):
        pass
