"""Iterators that take values out of a :class:`~probetable.raw.RawTable`."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterator
from typing import Any

from probetable.raw import RawTable


class Drain:
    """Yields every value that was in a table, which is left empty.

    The table is emptied as soon as the drain is created. Its storage is
    kept, so its capacity does not change. Values the drain never yields
    are discarded with it.
    """

    __slots__ = ("_values",)

    def __init__(self, raw: RawTable) -> None:
        self._values: deque[Any] = deque(raw.get(index) for index in raw.occupied())
        raw.clear()

    def __iter__(self) -> Drain:
        return self

    def __next__(self) -> Any:
        if not self._values:
            raise StopIteration
        return self._values.popleft()

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return repr(list(self._values))


class ExtractIf:
    """Removes and yields, lazily, the values for which ``f`` returns true.

    Values are tested one at a time as the iterator advances. If it is not
    run to the end, the values it has not reached stay in the table.
    """

    __slots__ = ("_raw", "_f", "_indices")

    def __init__(self, raw: RawTable, f: Callable[[Any], bool]) -> None:
        self._raw = raw
        self._f = f
        self._indices: Iterator[int] = raw.occupied()

    def __iter__(self) -> ExtractIf:
        return self

    def __next__(self) -> Any:
        for index in self._indices:
            if self._f(self._raw.get(index)):
                value, _ = self._raw.remove(index)
                return value
        raise StopIteration