"""Binary layout of a saved ScrollTrackerState.

Fields are big-endian int32 values written through QDataStream, in this order:
prev first visible index, prev first visible height (-1 when unset),
accumulated scrolled height, prev scroll y, scroll y, cache entry count,
then one (index, height) pair per cache entry in ascending index order.
Host views may append their own state after the record.
"""

from PySide6.QtCore import QByteArray, QDataStream, QIODevice

from observablescroll.widgets.scroll_tracker import ScrollTrackerState

UNSET_HEIGHT = -1


class ScrollStateError(ValueError):
    """Raised when saved scroll state bytes cannot be decoded."""


def write_state(stream: QDataStream, state: ScrollTrackerState):
    prev_height = state.prev_first_visible_height
    stream.writeInt32(state.prev_first_visible_index)
    stream.writeInt32(UNSET_HEIGHT if prev_height is None else prev_height)
    stream.writeInt32(state.accumulated_scrolled_height)
    stream.writeInt32(state.prev_scroll_y)
    stream.writeInt32(state.scroll_y)
    pairs = sorted(state.child_heights.items())
    stream.writeInt32(len(pairs))
    for index, height in pairs:
        stream.writeInt32(index)
        stream.writeInt32(height)


def read_state(stream: QDataStream) -> ScrollTrackerState:
    prev_index = stream.readInt32()
    prev_height = stream.readInt32()
    accumulated = stream.readInt32()
    prev_scroll_y = stream.readInt32()
    scroll_y = stream.readInt32()
    count = stream.readInt32()
    if stream.status() != QDataStream.Status.Ok:
        raise ScrollStateError('Scroll state record is truncated')
    if count < 0:
        raise ScrollStateError(f'Invalid cache entry count: {count}')

    child_heights = {}
    for _ in range(count):
        index = stream.readInt32()
        height = stream.readInt32()
        if stream.status() != QDataStream.Status.Ok:
            raise ScrollStateError(
                f'Scroll state ended after {len(child_heights)} of {count} cache entries')
        child_heights[index] = height

    return ScrollTrackerState(
        prev_first_visible_index=prev_index,
        prev_first_visible_height=None if prev_height < 0 else prev_height,
        accumulated_scrolled_height=accumulated,
        prev_scroll_y=prev_scroll_y,
        scroll_y=scroll_y,
        child_heights=child_heights,
    )


def state_to_bytes(state: ScrollTrackerState) -> QByteArray:
    data = QByteArray()
    stream = QDataStream(data, QIODevice.OpenModeFlag.WriteOnly)
    write_state(stream, state)
    return data


def state_from_bytes(data) -> ScrollTrackerState:
    if data is None:
        raise ScrollStateError('No scroll state to restore')
    # The stream does not own the buffer; keep it referenced while reading.
    buffer = QByteArray(data)
    stream = QDataStream(buffer, QIODevice.OpenModeFlag.ReadOnly)
    return read_state(stream)
