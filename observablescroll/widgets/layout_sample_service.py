from PySide6.QtCore import QPoint

from observablescroll.widgets.scroll_event_relay import LayoutSample


class LayoutSampleService:
    """Reads the visible row window of a QListView after a layout pass."""

    def __init__(self, view):
        self._view = view

    def total_item_count(self) -> int:
        model = self._view.model()
        if model is None:
            return 0
        return int(model.rowCount())

    def _hit_x(self) -> int:
        width = max(1, int(self._view.viewport().width()))
        return max(0, min(width - 1, int(self._view.spacing()) + 1))

    def _row_near(self, y: int, step: int) -> int:
        """Return the row at `y`, stepping over spacing gaps; -1 if none."""
        x = self._hit_x()
        height = int(self._view.viewport().height())
        reach = int(self._view.spacing()) + 1
        for offset in range(reach + 1):
            hit_y = y + offset * step
            if hit_y < 0 or hit_y >= height:
                break
            index = self._view.indexAt(QPoint(x, hit_y))
            if index.isValid():
                return index.row()
        return -1

    def collect_sample(self) -> LayoutSample | None:
        """Return the current sample, or None when no row is laid out."""
        total = self.total_item_count()
        if total <= 0:
            return None
        viewport_height = int(self._view.viewport().height())
        if viewport_height <= 0:
            return None

        first = self._row_near(0, 1)
        if first < 0:
            return None
        last = self._row_near(viewport_height - 1, -1)
        if last < first:
            # Content ends above the bottom edge.
            last = total - 1

        model = self._view.model()
        column = self._view.modelColumn()
        heights = {}
        first_top = 0
        for row in range(first, last + 1):
            rect = self._view.visualRect(model.index(row, column))
            heights[row] = max(0, int(rect.height()))
            if row == first:
                first_top = int(rect.top())
        return LayoutSample(
            first_visible_index=first,
            last_visible_index=last,
            heights=heights,
            first_visible_top=first_top,
        )
