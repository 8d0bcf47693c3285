"""A hash table whose callers supply hash values and equality themselves."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from functools import partial
from typing import Any

from probetable.entry import AbsentEntry, Entry, OccupiedEntry, VacantEntry
from probetable.iterators import Drain, ExtractIf
from probetable.raw import RawTable

Hasher = Callable[[Any], int]
Eq = Callable[[Any], bool]


class HashTable:
    """Low-level hash table with explicit hashing.

    Lookups take the hash of the wanted value and a predicate that picks it
    out among the values stored under that hash. Whenever values may have to
    move, a ``hasher`` must be passed that returns the hash each value was
    inserted with. Nothing stops a caller from storing several equal values;
    lookups then return any one of them.
    """

    __slots__ = ("raw",)

    def __init__(self, capacity: int = 0) -> None:
        self.raw = RawTable(capacity)

    def find(self, hash: int, eq: Eq) -> Any:
        """The value with this hash for which ``eq`` holds, or None."""
        index = self.raw.find(hash, eq)
        return None if index is None else self.raw.get(index)

    def find_entry(self, hash: int, eq: Eq) -> OccupiedEntry | AbsentEntry:
        """An occupied entry for the matching value, or an absent entry.

        Unlike :meth:`entry`, this never grows the table.
        """
        index = self.raw.find(hash, eq)
        if index is None:
            return AbsentEntry(self)
        return OccupiedEntry(self, hash, index)

    def entry(self, hash: int, eq: Eq, hasher: Hasher) -> Entry:
        """An occupied entry for the matching value, or a vacant one to fill.

        The table may grow to make room for an insertion.
        """
        found, index = self.raw.find_or_find_insert_slot(hash, eq, hasher)
        if found:
            return OccupiedEntry(self, hash, index)
        return VacantEntry(self, hash, index)

    def insert_unique(self, hash: int, value: Any, hasher: Hasher) -> OccupiedEntry:
        """Store ``value`` without checking for an equal one already stored."""
        index = self.raw.insert(hash, value, hasher)
        return OccupiedEntry(self, hash, index)

    def clear(self) -> None:
        """Remove every value, keeping the capacity."""
        self.raw.clear()

    def shrink_to_fit(self, hasher: Hasher) -> None:
        """Shrink the capacity as far as the stored values allow."""
        self.raw.shrink_to(len(self.raw), hasher)

    def shrink_to(self, min_capacity: int, hasher: Hasher) -> None:
        """Shrink the capacity, but not below ``min_capacity``."""
        self.raw.shrink_to(min_capacity, hasher)

    def reserve(self, additional: int, hasher: Hasher) -> None:
        """Make room for at least ``additional`` more values.

        Raises OverflowError if the capacity overflows and MemoryError if
        memory runs out.
        """
        self.raw.reserve(additional, hasher)

    def try_reserve(self, additional: int, hasher: Hasher) -> None:
        """Make room for ``additional`` more values or raise TryReserveError."""
        self.raw.try_reserve(additional, hasher)

    def capacity(self) -> int:
        """Number of values the table holds before it has to grow."""
        return self.raw.capacity()

    def __len__(self) -> int:
        return len(self.raw)

    def is_empty(self) -> bool:
        """True if the table holds no values."""
        return len(self.raw) == 0

    def __iter__(self) -> Iterator[Any]:
        raw = self.raw
        for index in raw.occupied():
            yield raw.get(index)

    def iter_hash(self, hash: int) -> Iterator[Any]:
        """Values that may have this hash; others can appear too."""
        raw = self.raw
        for index in raw.probe_hash(hash):
            yield raw.get(index)

    def retain(self, f: Callable[[Any], bool]) -> None:
        """Keep only the values for which ``f`` returns true."""
        raw = self.raw
        for index in raw.occupied():
            if not f(raw.get(index)):
                raw.remove(index)

    def drain(self) -> Drain:
        """Empty the table, yielding every value it held."""
        return Drain(self.raw)

    def extract_if(self, f: Callable[[Any], bool]) -> ExtractIf:
        """Lazily remove and yield the values for which ``f`` returns true."""
        return ExtractIf(self.raw, f)

    def get_many(
        self, hashes: Iterable[int], eq: Callable[[int, Any], bool]
    ) -> list[Any]:
        """Look up several values at once.

        ``eq(i, value)`` decides whether ``value`` is the one wanted by the
        ``i``-th query. Missing values come back as None. Raises ValueError
        if two queries find the same value.
        """
        indices: list[int | None] = [
            self.raw.find(hash, partial(eq, i)) for i, hash in enumerate(hashes)
        ]
        found = [index for index in indices if index is not None]
        if len(set(found)) != len(found):
            raise ValueError("queries in get_many overlap")
        return [None if index is None else self.raw.get(index) for index in indices]

    def allocation_size(self) -> int:
        """Approximate bytes allocated for the table's storage."""
        return self.raw.allocation_size()

    def copy(self) -> HashTable:
        """A shallow copy holding the same values."""
        other = HashTable()
        other.raw = self.raw.copy()
        return other

    __copy__ = copy

    def __repr__(self) -> str:
        return "{" + ", ".join(repr(value) for value in self) + "}"