from PySide6.QtCore import QByteArray, QDataStream, QIODevice, Signal
from PySide6.QtWidgets import QAbstractItemView, QListView

from observablescroll.utils.flow_log import log_flow
from observablescroll.widgets.layout_sample_service import LayoutSampleService
from observablescroll.widgets.scroll_callbacks import (ScrollListener,
                                                       ScrollViewCallbacks)
from observablescroll.widgets.scroll_event_relay import ScrollEventRelay
from observablescroll.widgets.scroll_state_codec import (ScrollStateError,
                                                         read_state,
                                                         write_state)
from observablescroll.widgets.scroll_tracker import (ScrollTracker,
                                                     ScrollTrackerState)


class ObservableListView(QListView):
    """QListView that reports an absolute vertical scroll offset.

    Qt only tells us which rows are laid out and where, so every layout pass
    is turned into a sample for a ScrollTracker. Observers can either connect
    to the signals below or register a ScrollViewCallbacks object.
    """

    scroll_changed = Signal(int, bool, bool)  # scroll_y, first_scroll, dragging
    down_motion_event = Signal()
    up_or_cancel_motion_event = Signal(object)  # ScrollState

    def __init__(self, parent=None):
        super().__init__(parent)
        # Qt setters below already run updateGeometries().
        self._sampler = LayoutSampleService(self)
        self._relay = ScrollEventRelay(ScrollTracker(log=log_flow))
        self._pending_scroll_value = None  # host scrollbar value from a restore
        self.setVerticalScrollMode(QAbstractItemView.ScrollMode.ScrollPerPixel)
        self.setUniformItemSizes(False)

        # Dragging the scrollbar handle is a gesture too.
        self.verticalScrollBar().sliderPressed.connect(self._on_gesture_start)
        self.verticalScrollBar().sliderReleased.connect(self._on_gesture_end)

    @property
    def tracker(self) -> ScrollTracker:
        return self._relay.tracker

    def set_scroll_view_callbacks(self, callbacks: ScrollViewCallbacks | None):
        self._relay.set_callbacks(callbacks)

    def set_on_scroll_listener(self, listener: ScrollListener | None):
        self._relay.set_upstream(listener)

    def scroll_vertically_to(self, y: int):
        self.verticalScrollBar().setValue(int(y))

    def get_current_scroll_y(self) -> int:
        return self._relay.tracker.scroll_y

    def reset_scroll_tracking(self):
        """Return to the top and start a new trajectory, e.g. after a model reset."""
        self._pending_scroll_value = None
        self.verticalScrollBar().setValue(0)
        self._relay.tracker.restore(ScrollTrackerState())
        self._dispatch_layout_sample()

    def scrollContentsBy(self, dx, dy):
        super().scrollContentsBy(dx, dy)
        self._dispatch_layout_sample()

    def updateGeometries(self):
        super().updateGeometries()
        self._dispatch_layout_sample()

    def mousePressEvent(self, event):
        self._on_gesture_start()
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event):
        self._on_gesture_end()
        super().mouseReleaseEvent(event)

    def _on_gesture_start(self):
        self._relay.dispatch_gesture_start(self)
        self.down_motion_event.emit()

    def _on_gesture_end(self):
        direction = self._relay.dispatch_gesture_end(self)
        self.up_or_cancel_motion_event.emit(direction)

    def _dispatch_layout_sample(self):
        sample = self._sampler.collect_sample()
        if self._pending_scroll_value is not None:
            # Hold samples until the restored position can be applied,
            # otherwise the first layout at y=0 reads as a jump to the top.
            if sample is None:
                return
            self._apply_pending_scroll()
            return

        report = self._relay.dispatch_scroll(self, sample, self._sampler.total_item_count())
        if report is None:
            return
        log_flow(
            "SCROLL",
            f"first={sample.first_visible_index} scroll_y={report.scroll_y} "
            f"first height={sample.heights[sample.first_visible_index]} "
            f"first top={sample.first_visible_top}",
            throttle_key="scroll_sample",
            every_s=0.05,
        )
        self.scroll_changed.emit(report.scroll_y, report.first_scroll, report.dragging)

    def _apply_pending_scroll(self):
        if self._pending_scroll_value is None:
            # Already applied by a layout pass triggered while sampling.
            return
        scrollbar = self.verticalScrollBar()
        target = max(0, min(self._pending_scroll_value, scrollbar.maximum()))
        self._pending_scroll_value = None
        if scrollbar.value() == target:
            self._dispatch_layout_sample()
        else:
            # scrollContentsBy dispatches the sample.
            scrollbar.setValue(target)

    def save_scroll_state(self) -> QByteArray:
        """Return the tracker record followed by the scrollbar position."""
        data = QByteArray()
        stream = QDataStream(data, QIODevice.OpenModeFlag.WriteOnly)
        write_state(stream, self._relay.tracker.snapshot())
        stream.writeInt32(self.verticalScrollBar().value())
        return data

    def restore_scroll_state(self, data) -> bool:
        """Restore a record from save_scroll_state(); False if it is unusable."""
        if data is None:
            return False
        buffer = QByteArray(data)
        if buffer.isEmpty():
            return False
        stream = QDataStream(buffer, QIODevice.OpenModeFlag.ReadOnly)
        try:
            state = read_state(stream)
        except ScrollStateError as e:
            log_flow("STATE", f"Ignoring saved scroll state: {e}", level="WARNING")
            return False
        scroll_value = stream.readInt32()
        if stream.status() != QDataStream.Status.Ok:
            scroll_value = state.scroll_y

        self._relay.tracker.restore(state)
        self._pending_scroll_value = scroll_value
        if self._sampler.collect_sample() is not None:
            self._apply_pending_scroll()
        return True
