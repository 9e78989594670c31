import random

from PySide6.QtCore import QAbstractListModel, QModelIndex, QSize, Qt

from observablescroll.utils.settings import DEFAULT_SETTINGS, settings

DEMO_ITEM_WIDTH = 320
DEMO_SETTING_KEYS = ('demo_item_count', 'demo_min_item_height',
                     'demo_max_item_height', 'demo_seed')


def generate_item_heights(count: int, min_height: int, max_height: int,
                          seed: int) -> list[int]:
    """Return `count` pseudo-random row heights, reproducible for a seed."""
    count = max(0, int(count))
    min_height = max(1, int(min_height))
    max_height = max(min_height, int(max_height))
    rng = random.Random(seed)
    return [rng.randint(min_height, max_height) for _ in range(count)]


def heights_from_settings() -> list[int]:
    def _int_setting(key):
        try:
            return int(settings.value(key, defaultValue=DEFAULT_SETTINGS[key], type=int))
        except Exception:
            return DEFAULT_SETTINGS[key]

    return generate_item_heights(*(_int_setting(key) for key in DEMO_SETTING_KEYS))


class DemoItemModel(QAbstractListModel):
    """Flat list of rows with varying heights."""

    def __init__(self, heights: list[int] | None = None, parent=None):
        super().__init__(parent)
        self._heights = list(heights) if heights is not None else []

    @classmethod
    def from_settings(cls, parent=None) -> 'DemoItemModel':
        return cls(heights_from_settings(), parent)

    def total_height(self) -> int:
        return sum(self._heights)

    def set_heights(self, heights: list[int]):
        self.beginResetModel()
        self._heights = list(heights)
        self.endResetModel()

    def rowCount(self, parent=None) -> int:
        if parent is not None and parent.isValid():
            return 0
        return len(self._heights)

    def data(self, index: QModelIndex, role=None) -> str | QSize | None:
        if not index.isValid() or not 0 <= index.row() < len(self._heights):
            return None
        height = self._heights[index.row()]
        if role == Qt.ItemDataRole.DisplayRole:
            return f'Item {index.row()}  ({height}px)'
        if role == Qt.ItemDataRole.SizeHintRole:
            return QSize(DEMO_ITEM_WIDTH, height)
        return None
