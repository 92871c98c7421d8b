"""Viewport pagination: fit a cursor-centred run of siblings into a height.

Pure module: no rendering, no store access. Heights come in as a sequence;
LazyHeights lets callers measure items only when the window reaches them.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import overload


def paginate(
    child_ids: Sequence[int],
    cursor_index: int,
    render_heights: Sequence[int],
    available_height: int,
) -> tuple[int, int]:
    """Return the inclusive (first, last) index range to draw around the cursor.

    The cursor item is always included, even when it alone is taller than
    available_height (the caller clips it). The window then grows one item
    at a time, strictly alternating up and down, and an item is only added
    when it fits entirely. A direction stops at its boundary or at the first
    item that does not fit; growth ends when both directions have stopped or
    the budget is exactly used up.

    An empty sibling list yields (0, -1).
    """
    count = len(child_ids)
    if count == 0:
        return (0, -1)
    cursor = min(max(cursor_index, 0), count - 1)

    used = render_heights[cursor]
    first = last = cursor
    up_open = cursor > 0
    down_open = cursor < count - 1
    go_up = True

    while (up_open or down_open) and used < available_height:
        if go_up and up_open:
            height = render_heights[first - 1]
            if used + height <= available_height:
                first -= 1
                used += height
                up_open = first > 0
            else:
                up_open = False
        elif not go_up and down_open:
            height = render_heights[last + 1]
            if used + height <= available_height:
                last += 1
                used += height
                down_open = last < count - 1
            else:
                down_open = False
        go_up = not go_up

    return (first, last)


def window_height(render_heights: Sequence[int], first: int, last: int) -> int:
    return sum(render_heights[i] for i in range(first, last + 1))


class LazyHeights(Sequence[int]):
    """Sequence of item heights measured on first access.

    Lets paginate() walk a long sibling list while only the items it
    actually reaches get rendered (and, through the renderer, queued).
    """

    def __init__(self, count: int, measure: Callable[[int], int]) -> None:
        self._count = count
        self._measure = measure
        self._cache: dict[int, int] = {}

    def __len__(self) -> int:
        return self._count

    @overload
    def __getitem__(self, index: int) -> int: ...

    @overload
    def __getitem__(self, index: slice) -> list[int]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(self._count))]
        if index < 0:
            index += self._count
        if not 0 <= index < self._count:
            raise IndexError(index)
        height = self._cache.get(index)
        if height is None:
            height = max(0, int(self._measure(index)))
            self._cache[index] = height
        return height

    @property
    def measured(self) -> dict[int, int]:
        return dict(self._cache)
