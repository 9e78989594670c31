"""Last observed row heights, keyed by item index."""


class HeightCache:
    """Remembers how tall each item was the last time it was laid out.

    Rows that scroll out of a virtualized view can no longer be measured, so
    the tracker falls back to these values when a fast scroll skips over them.
    Keys are sparse: an index only appears once its row has been on screen.
    """

    def __init__(self, heights: dict[int, int] | None = None):
        self._heights: dict[int, int] = {}
        if heights:
            self.update(heights)

    def observe(self, index: int, height: int):
        self._heights[int(index)] = int(height)

    def lookup(self, index: int) -> int | None:
        return self._heights.get(index)

    def update(self, heights: dict[int, int]):
        for index, height in heights.items():
            self.observe(index, height)

    def items(self) -> list[tuple[int, int]]:
        """Return (index, height) pairs in ascending index order."""
        return sorted(self._heights.items())

    def __len__(self) -> int:
        return len(self._heights)

    def __eq__(self, other) -> bool:
        if not isinstance(other, HeightCache):
            return NotImplemented
        return self._heights == other._heights

    def __repr__(self) -> str:
        return f'HeightCache({self._heights!r})'
