"""Open-addressing storage with explicit hashing and control bytes.

Every slot has a control byte: ``EMPTY``, ``DELETED`` (a tombstone) or the
top seven bits of the hash of the value stored there. Lookups start at the
bucket chosen by the low bits of the hash and probe linearly until they
reach an ``EMPTY`` byte. Callers always supply hash values and equality
predicates themselves, and a ``hasher`` whenever values may have to move.
"""

from __future__ import annotations

import struct
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

EMPTY = 0xFF
DELETED = 0x80
GROUP_WIDTH = 16

CAPACITY_OVERFLOW = "capacity_overflow"
ALLOC_ERROR = "alloc_error"

_HASH_MASK = (1 << 64) - 1
_USIZE_MAX = sys.maxsize * 2 + 1
_ISIZE_MAX = sys.maxsize
_POINTER_SIZE = struct.calcsize("P")

Hasher = Callable[[Any], int]
Eq = Callable[[Any], bool]


class TryReserveError(Exception):
    """Raised when capacity cannot be reserved.

    ``kind`` is ``CAPACITY_OVERFLOW`` when the requested size is too large to
    describe, or ``ALLOC_ERROR`` when memory could not be obtained.
    """

    def __init__(self, kind: str) -> None:
        message = (
            "hash table capacity overflow"
            if kind == CAPACITY_OVERFLOW
            else "hash table allocation failed"
        )
        super().__init__(message)
        self.kind = kind


@contextmanager
def _infallible() -> Iterator[None]:
    """Turn reservation failures into the errors a plain call raises."""
    try:
        yield
    except TryReserveError as err:
        if err.kind == CAPACITY_OVERFLOW:
            raise OverflowError("hash table capacity overflow") from err
        raise MemoryError("hash table allocation failed") from err


def _normalize(hash_value: int) -> int:
    return hash_value & _HASH_MASK


def _h2(hash_value: int) -> int:
    return (hash_value >> 57) & 0x7F


def _is_special(ctrl: int) -> bool:
    return bool(ctrl & 0x80)


def _capacity_to_buckets(capacity: int) -> int | None:
    """Bucket count needed to hold ``capacity`` items, or None on overflow."""
    if capacity < 8:
        return 4 if capacity < 4 else 8
    if capacity > _USIZE_MAX // 8:
        return None
    adjusted = capacity * 8 // 7
    buckets = 1 << (adjusted - 1).bit_length()
    if buckets > _USIZE_MAX:
        return None
    return buckets


def _bucket_mask_to_capacity(bucket_mask: int) -> int:
    if bucket_mask < 8:
        return bucket_mask
    return ((bucket_mask + 1) // 8) * 7


def _buckets_for(capacity: int) -> int:
    buckets = _capacity_to_buckets(capacity)
    if buckets is None or buckets * (_POINTER_SIZE + 1) + GROUP_WIDTH > _ISIZE_MAX:
        raise TryReserveError(CAPACITY_OVERFLOW)
    return buckets


class RawTable:
    """Slot storage addressed by index, with caller-supplied hashing."""

    def __init__(self, capacity: int = 0) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self._reset(0)
        if capacity:
            with _infallible():
                self._reset(_buckets_for(capacity))

    def _reset(self, buckets: int) -> None:
        try:
            self._ctrl = bytearray([EMPTY]) * buckets
            self._slots: list[Any] = [None] * buckets
        except MemoryError as err:
            raise TryReserveError(ALLOC_ERROR) from err
        self._buckets = buckets
        self._items = 0
        self._growth_left = _bucket_mask_to_capacity(buckets - 1) if buckets else 0

    def _probe(self, hash_value: int) -> Iterator[int]:
        mask = self._buckets - 1
        pos = hash_value & mask
        for _ in range(self._buckets):
            yield pos
            pos = (pos + 1) & mask

    def _find_insert_slot(self, hash_value: int) -> int:
        for pos in self._probe(hash_value):
            if _is_special(self._ctrl[pos]):
                return pos
        raise RuntimeError("hash table has no free slot")

    def _record(self, hash_value: int, slot: int, value: Any) -> int:
        if self._ctrl[slot] == EMPTY:
            self._growth_left -= 1
        self._ctrl[slot] = _h2(hash_value)
        self._slots[slot] = value
        self._items += 1
        return slot

    def _check_full(self, index: int) -> None:
        if not 0 <= index < self._buckets or _is_special(self._ctrl[index]):
            raise IndexError(f"slot {index} does not hold a value")

    def _rebuild(self, buckets: int, hasher: Hasher) -> None:
        """Move every value into a fresh layout of ``buckets`` slots."""
        try:
            ctrl = bytearray([EMPTY]) * buckets
            slots: list[Any] = [None] * buckets
        except MemoryError as err:
            raise TryReserveError(ALLOC_ERROR) from err
        mask = buckets - 1
        for index in self.occupied():
            value = self._slots[index]
            hash_value = _normalize(hasher(value))
            pos = hash_value & mask
            while ctrl[pos] != EMPTY:
                pos = (pos + 1) & mask
            ctrl[pos] = _h2(hash_value)
            slots[pos] = value
        self._ctrl = ctrl
        self._slots = slots
        self._buckets = buckets
        self._growth_left = _bucket_mask_to_capacity(mask) - self._items

    def _reserve_rehash(self, additional: int, hasher: Hasher) -> None:
        new_items = self._items + additional
        if new_items > _USIZE_MAX:
            raise TryReserveError(CAPACITY_OVERFLOW)
        full_capacity = (
            _bucket_mask_to_capacity(self._buckets - 1) if self._buckets else 0
        )
        if new_items <= full_capacity // 2:
            # Enough room overall: clear out tombstones without growing.
            self._rebuild(self._buckets, hasher)
        else:
            self._rebuild(_buckets_for(max(new_items, full_capacity + 1)), hasher)

    def find(self, hash: int, eq: Eq) -> int | None:
        """Index of a value with this hash for which ``eq`` holds, or None."""
        if not self._buckets:
            return None
        hash_value = _normalize(hash)
        h2 = _h2(hash_value)
        for pos in self._probe(hash_value):
            ctrl = self._ctrl[pos]
            if ctrl == h2 and eq(self._slots[pos]):
                return pos
            if ctrl == EMPTY:
                return None
        return None

    def find_or_find_insert_slot(
        self, hash: int, eq: Eq, hasher: Hasher
    ) -> tuple[bool, int]:
        """Return ``(True, index)`` of a match or ``(False, slot)`` to insert at.

        Room for one more value is reserved first, so the slot can be filled
        with :meth:`insert_in_slot` without growing.
        """
        self.reserve(1, hasher)
        hash_value = _normalize(hash)
        h2 = _h2(hash_value)
        free: int | None = None
        for pos in self._probe(hash_value):
            ctrl = self._ctrl[pos]
            if ctrl == h2 and eq(self._slots[pos]):
                return True, pos
            if _is_special(ctrl):
                if free is None:
                    free = pos
                if ctrl == EMPTY:
                    break
        if free is None:
            raise RuntimeError("hash table has no free slot")
        return False, free

    def insert(self, hash: int, value: Any, hasher: Hasher) -> int:
        """Store ``value`` without looking for an equal one; return its index."""
        hash_value = _normalize(hash)
        slot = self._find_insert_slot(hash_value) if self._buckets else None
        if slot is None or (self._growth_left == 0 and self._ctrl[slot] == EMPTY):
            with _infallible():
                self._reserve_rehash(1, hasher)
            slot = self._find_insert_slot(hash_value)
        return self._record(hash_value, slot, value)

    def insert_in_slot(self, hash: int, slot: int, value: Any) -> int:
        """Store ``value`` in a free slot found earlier; return its index."""
        if not 0 <= slot < self._buckets or not _is_special(self._ctrl[slot]):
            raise ValueError(f"slot {slot} is not free")
        if self._ctrl[slot] == EMPTY and self._growth_left == 0:
            raise ValueError("no room left for an insertion without growing")
        return self._record(_normalize(hash), slot, value)

    def get(self, index: int) -> Any:
        """The value stored at ``index``."""
        self._check_full(index)
        return self._slots[index]

    def set(self, index: int, value: Any) -> None:
        """Replace the value stored at ``index``; its hash must not change."""
        self._check_full(index)
        self._slots[index] = value

    def remove(self, index: int) -> tuple[Any, int]:
        """Take the value out of ``index``; return it and the freed slot."""
        self._check_full(index)
        value = self._slots[index]
        self._slots[index] = None
        following = (index + 1) & (self._buckets - 1)
        if self._ctrl[following] == EMPTY:
            # No probe sequence can run past this slot, so it may be empty.
            self._ctrl[index] = EMPTY
            self._growth_left += 1
        else:
            self._ctrl[index] = DELETED
        self._items -= 1
        return value, index

    def clear(self) -> None:
        """Remove every value, keeping the allocated slots."""
        self._ctrl[:] = bytearray([EMPTY]) * self._buckets
        self._slots[:] = [None] * self._buckets
        self._items = 0
        self._growth_left = (
            _bucket_mask_to_capacity(self._buckets - 1) if self._buckets else 0
        )

    def reserve(self, additional: int, hasher: Hasher) -> None:
        """Make room for ``additional`` more values.

        Raises OverflowError if the size cannot be described and MemoryError
        if memory runs out.
        """
        with _infallible():
            self.try_reserve(additional, hasher)

    def try_reserve(self, additional: int, hasher: Hasher) -> None:
        """Make room for ``additional`` more values or raise TryReserveError."""
        if additional < 0:
            raise ValueError("additional must not be negative")
        if additional > self._growth_left:
            self._reserve_rehash(additional, hasher)

    def shrink_to(self, min_capacity: int, hasher: Hasher) -> None:
        """Shrink storage, keeping room for at least ``min_capacity`` values."""
        if min_capacity < 0:
            raise ValueError("min_capacity must not be negative")
        min_size = max(self._items, min_capacity)
        if min_size == 0:
            self._reset(0)
            return
        min_buckets = _capacity_to_buckets(min_size)
        if min_buckets is None or min_buckets >= self._buckets:
            return
        with _infallible():
            if self._items == 0:
                self._reset(min_buckets)
            else:
                self._rebuild(min_buckets, hasher)

    def capacity(self) -> int:
        """Number of values the table holds before it has to grow."""
        return self._items + self._growth_left

    def __len__(self) -> int:
        return self._items

    def occupied(self) -> Iterator[int]:
        """Indices of all stored values, in slot order.

        The value at the current index may be removed while iterating.
        """
        ctrl = self._ctrl
        for pos, byte in enumerate(ctrl):
            if not _is_special(byte):
                yield pos

    def probe_hash(self, hash: int) -> Iterator[int]:
        """Indices of values that may have this hash; callers must verify."""
        if not self._buckets:
            return
        hash_value = _normalize(hash)
        h2 = _h2(hash_value)
        ctrl = self._ctrl
        for pos in self._probe(hash_value):
            byte = ctrl[pos]
            if byte == h2:
                yield pos
            elif byte == EMPTY:
                return

    def allocation_size(self) -> int:
        """Approximate bytes held for slots and control bytes."""
        if not self._buckets:
            return 0
        return self._buckets * _POINTER_SIZE + self._buckets + GROUP_WIDTH

    def copy(self) -> RawTable:
        """A table with the same layout holding the same values (shallow)."""
        other = RawTable()
        other._ctrl = bytearray(self._ctrl)
        other._slots = list(self._slots)
        other._buckets = self._buckets
        other._items = self._items
        other._growth_left = self._growth_left
        return other