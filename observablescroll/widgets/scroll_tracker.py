"""Pure logic for reconstructing an absolute scroll offset from layout samples."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from observablescroll.utils.height_cache import HeightCache


class ScrollState(str, Enum):
    """Coarse direction of the last offset change."""

    ADVANCING = 'advancing'  # offset grew, content moved up
    RETREATING = 'retreating'
    STATIONARY = 'stationary'


@dataclass(frozen=True)
class ScrollReport:
    """Result of one processed layout sample."""

    scroll_y: int
    direction: ScrollState
    first_scroll: bool
    dragging: bool


@dataclass
class ScrollTrackerState:
    """Everything needed to continue a trajectory after a restore."""

    prev_first_visible_index: int = 0
    prev_first_visible_height: int | None = None
    accumulated_scrolled_height: int = 0
    prev_scroll_y: int = 0
    scroll_y: int = 0
    child_heights: dict[int, int] = field(default_factory=dict)
    # Pointer state; not part of the persisted byte record.
    direction: ScrollState = ScrollState.STATIONARY
    first_scroll: bool = False
    dragging: bool = False


class ScrollTracker:
    """Accumulates the heights of rows that scrolled past the top edge.

    The host only knows which row is first on screen and where its top sits,
    so the absolute offset is rebuilt incrementally: every time the first
    visible row changes, the height of the row(s) that crossed the top edge
    is added to (or removed from) an accumulator. Rows skipped between two
    samples are summed from the height cache; rows that were never measured
    contribute nothing and the offset is underestimated by their height until
    they are seen again.
    """

    def __init__(self, height_cache: HeightCache | None = None,
                 log: Callable[..., None] | None = None):
        self.height_cache = height_cache if height_cache is not None else HeightCache()
        self._log = log
        self._prev_first_visible_index = 0
        self._prev_first_visible_height: int | None = None
        self._accumulated_scrolled_height = 0
        self._prev_scroll_y = 0
        self._scroll_y = 0
        self._direction = ScrollState.STATIONARY
        self._first_scroll = False
        self._dragging = False

    @property
    def scroll_y(self) -> int:
        return self._scroll_y

    @property
    def direction(self) -> ScrollState:
        return self._direction

    @property
    def first_scroll(self) -> bool:
        return self._first_scroll

    @property
    def dragging(self) -> bool:
        return self._dragging

    def _trace(self, message: str):
        if self._log is not None:
            self._log("SCROLL", message)

    def on_gesture_start(self):
        self._first_scroll = True
        self._dragging = True

    def on_gesture_end(self) -> ScrollState:
        self._dragging = False
        return self._direction

    def _skipped_height(self, upper: int, lower: int) -> int:
        """Sum cached heights of rows strictly between `lower` and `upper`."""
        if upper - lower <= 1:
            return 0
        self._trace(f"Skipped {upper - lower - 1} row(s) between {lower} and {upper}")
        total = 0
        for index in range(upper - 1, lower, -1):
            height = self.height_cache.lookup(index)
            if height is None:
                self._trace(f"No cached height for skipped row {index}")
                continue
            total += height
        return total

    def on_layout_sample(
        self,
        first_visible_index: int,
        last_visible_index: int,
        child_height_at: Mapping[int, int] | Callable[[int], int],
        first_visible_child_top: int,
    ) -> ScrollReport | None:
        """Consume one layout pass and return the new absolute offset.

        Returns None when nothing is laid out (`last_visible_index` below
        `first_visible_index` or a negative first index).
        """
        if first_visible_index < 0 or last_visible_index < first_visible_index:
            return None

        if isinstance(child_height_at, Mapping):
            height_of = child_height_at.__getitem__
        else:
            height_of = child_height_at

        for index in range(first_visible_index, last_visible_index + 1):
            self.height_cache.observe(index, height_of(index))
        first_height = int(height_of(first_visible_index))

        prev_index = self._prev_first_visible_index
        if first_visible_index > prev_index:
            skipped = self._skipped_height(first_visible_index, prev_index)
            self._accumulated_scrolled_height += (self._prev_first_visible_height or 0) + skipped
            self._prev_first_visible_height = first_height
        elif first_visible_index < prev_index:
            skipped = self._skipped_height(prev_index, first_visible_index)
            self._accumulated_scrolled_height -= first_height + skipped
            self._prev_first_visible_height = first_height
        elif first_visible_index == 0:
            self._prev_first_visible_height = first_height

        if self._prev_first_visible_height is not None and self._prev_first_visible_height < 0:
            self._prev_first_visible_height = 0

        self._scroll_y = self._accumulated_scrolled_height - int(first_visible_child_top)
        self._prev_first_visible_index = first_visible_index

        if self._scroll_y > self._prev_scroll_y:
            self._direction = ScrollState.ADVANCING
        elif self._scroll_y < self._prev_scroll_y:
            self._direction = ScrollState.RETREATING
        else:
            self._direction = ScrollState.STATIONARY
        self._prev_scroll_y = self._scroll_y

        report = ScrollReport(
            scroll_y=self._scroll_y,
            direction=self._direction,
            first_scroll=self._first_scroll,
            dragging=self._dragging,
        )
        self._first_scroll = False
        return report

    def snapshot(self) -> ScrollTrackerState:
        return ScrollTrackerState(
            prev_first_visible_index=self._prev_first_visible_index,
            prev_first_visible_height=self._prev_first_visible_height,
            accumulated_scrolled_height=self._accumulated_scrolled_height,
            prev_scroll_y=self._prev_scroll_y,
            scroll_y=self._scroll_y,
            child_heights=dict(self.height_cache.items()),
            direction=self._direction,
            first_scroll=self._first_scroll,
            dragging=self._dragging,
        )

    def restore(self, state: ScrollTrackerState):
        """Replace the whole tracker state with a snapshot."""
        self._prev_first_visible_index = state.prev_first_visible_index
        self._prev_first_visible_height = state.prev_first_visible_height
        self._accumulated_scrolled_height = state.accumulated_scrolled_height
        self._prev_scroll_y = state.prev_scroll_y
        self._scroll_y = state.scroll_y
        self.height_cache = HeightCache(state.child_heights)
        self._direction = state.direction
        self._first_scroll = state.first_scroll
        self._dragging = state.dragging

    @classmethod
    def from_snapshot(cls, state: ScrollTrackerState,
                      log: Callable[..., None] | None = None) -> ScrollTracker:
        tracker = cls(log=log)
        tracker.restore(state)
        return tracker
