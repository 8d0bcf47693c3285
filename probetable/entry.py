"""Views onto a single place in a hash table, present or not.

An entry refers to a table object that exposes its storage as ``raw``, a
:class:`~probetable.raw.RawTable`. Entries are built by the table's lookup
methods: :class:`OccupiedEntry` for a value that was found,
:class:`VacantEntry` for a free slot that is ready to be filled, and
:class:`AbsentEntry` for a failed lookup that reserved nothing.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any


class Entry:
    """A place in a table: either an :class:`OccupiedEntry` or a :class:`VacantEntry`."""

    __slots__ = ()

    def __new__(cls, *args: Any, **kwargs: Any) -> Entry:
        if cls is Entry:
            raise TypeError("Entry is either an OccupiedEntry or a VacantEntry")
        return super().__new__(cls)

    def insert(self, value: Any) -> OccupiedEntry:
        """Set the value, replacing any existing one; return the occupied entry."""
        assert isinstance(self, OccupiedEntry)
        self.set(value)
        return self

    def or_insert(self, default: Any) -> OccupiedEntry:
        """Insert ``default`` if the entry is vacant; return the occupied entry."""
        if isinstance(self, OccupiedEntry):
            return self
        return self.insert(default)

    def or_insert_with(self, default: Callable[[], Any]) -> OccupiedEntry:
        """Insert ``default()`` if the entry is vacant; return the occupied entry.

        ``default`` is only called when a value has to be inserted.
        """
        if isinstance(self, OccupiedEntry):
            return self
        return self.insert(default())

    def and_modify(self, f: Callable[[Any], Any]) -> Entry:
        """Apply ``f`` to an occupied entry's value and return this entry.

        ``f`` may change the value in place and return None, or return the
        value that replaces it. Its hash must stay the same. Vacant entries
        are returned untouched and ``f`` is not called.
        """
        if isinstance(self, OccupiedEntry):
            replacement = f(self.get())
            if replacement is not None:
                self.set(replacement)
        return self


class OccupiedEntry(Entry):
    """A value found in a table, at a known slot."""

    __slots__ = ("_table", "_hash", "_index")

    def __init__(self, table: Any, hash: int, index: int) -> None:
        self._table = table
        self._hash = hash
        self._index = index

    @property
    def hash(self) -> int:
        """The hash the value was found or inserted with."""
        return self._hash

    @property
    def index(self) -> int:
        """The slot that holds the value."""
        return self._index

    def get(self) -> Any:
        """The value in the entry."""
        return self._table.raw.get(self._index)

    def set(self, value: Any) -> None:
        """Replace the value in the entry; the hash must stay the same."""
        self._table.raw.set(self._index, value)

    def remove(self) -> tuple[Any, VacantEntry]:
        """Take the value out; return it and a vacant entry for the same hash."""
        value, slot = self._table.raw.remove(self._index)
        return value, VacantEntry(self._table, self._hash, slot)

    def into_table(self) -> Any:
        """The table this entry belongs to."""
        return self._table

    def __repr__(self) -> str:
        return f"OccupiedEntry(value={self.get()!r})"


class VacantEntry(Entry):
    """A free slot, reserved for a value with a known hash."""

    __slots__ = ("_table", "_hash", "_slot")

    def __init__(self, table: Any, hash: int, slot: int) -> None:
        self._table = table
        self._hash = hash
        self._slot = slot

    @property
    def hash(self) -> int:
        """The hash a value inserted here is stored with."""
        return self._hash

    def insert(self, value: Any) -> OccupiedEntry:
        """Store ``value`` in the slot; return an entry for it."""
        index = self._table.raw.insert_in_slot(self._hash, self._slot, value)
        return OccupiedEntry(self._table, self._hash, index)

    def into_table(self) -> Any:
        """The table this entry belongs to."""
        return self._table

    def __repr__(self) -> str:
        return "VacantEntry"


class AbsentEntry:
    """The outcome of a lookup that found nothing and reserved no slot."""

    __slots__ = ("_table",)

    def __init__(self, table: Any) -> None:
        self._table = table

    def into_table(self) -> Any:
        """The table that was searched."""
        return self._table

    def __repr__(self) -> str:
        return "AbsentEntry"