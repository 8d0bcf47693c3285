from itertools import islice

import pytest
from hypothesis import given
from hypothesis import strategies as st

from probetable.iterators import Drain, ExtractIf
from probetable.raw import RawTable


def hasher(value):
    return hash(value)


def make_table(values, capacity=0):
    raw = RawTable(capacity)
    for value in values:
        raw.insert(hasher(value), value, hasher)
    return raw


def contains(raw, value):
    return raw.find(hasher(value), lambda v: v == value) is not None


def test_drain_yields_everything_and_empties_table():
    raw = make_table([1, 2, 3])
    capacity = raw.capacity()
    drained = sorted(Drain(raw))
    assert drained == [1, 2, 3]
    assert len(raw) == 0
    assert raw.capacity() == capacity


def test_drain_empties_table_even_when_not_consumed():
    raw = make_table(range(10))
    drain = Drain(raw)
    assert len(raw) == 0
    assert len(drain) == 10
    assert not contains(raw, 3)


def test_drain_len_counts_remaining():
    raw = make_table(range(5))
    drain = Drain(raw)
    next(drain)
    next(drain)
    assert len(drain) == 3
    assert len(list(drain)) == 3
    assert len(drain) == 0


def test_drain_is_fused():
    drain = Drain(make_table([7]))
    assert list(drain) == [7]
    with pytest.raises(StopIteration):
        next(drain)
    with pytest.raises(StopIteration):
        next(drain)


def test_drain_repr_lists_remaining_values():
    drain = Drain(make_table([5]))
    assert repr(drain) == "[5]"
    next(drain)
    assert repr(drain) == "[]"


def test_table_usable_after_drain():
    raw = make_table(range(20))
    list(Drain(raw))
    raw.insert(hasher(42), 42, hasher)
    assert contains(raw, 42)
    assert len(raw) == 1


def test_extract_if_splits_evens_and_odds():
    raw = make_table(range(8))
    evens = sorted(ExtractIf(raw, lambda v: v % 2 == 0))
    odds = sorted(raw.get(i) for i in raw.occupied())
    assert evens == [0, 2, 4, 6]
    assert odds == [1, 3, 5, 7]


def test_extract_if_partial_keeps_unvisited_values():
    raw = make_table(range(8))
    taken = list(islice(ExtractIf(raw, lambda v: v % 2 == 0), 2))
    assert len(taken) == 2
    assert all(v % 2 == 0 for v in taken)
    assert len(raw) == 6
    remaining = {raw.get(i) for i in raw.occupied()}
    assert remaining == set(range(8)) - set(taken)


def test_extract_if_is_lazy():
    raw = make_table(range(4))
    seen = []

    def predicate(value):
        seen.append(value)
        return True

    extract = ExtractIf(raw, predicate)
    assert seen == []
    assert len(raw) == 4
    first = next(extract)
    assert seen == [first]
    assert len(raw) == 3


def test_extract_if_calls_predicate_once_per_value():
    raw = make_table(range(30))
    seen = []
    list(ExtractIf(raw, lambda v: seen.append(v) or v < 10))
    assert sorted(seen) == list(range(30))
    assert len(raw) == 20


def test_extract_if_on_empty_table():
    raw = RawTable()
    assert list(ExtractIf(raw, lambda v: True)) == []
    assert len(raw) == 0


def test_extract_if_is_fused():
    extract = ExtractIf(make_table([1, 2]), lambda v: True)
    assert sorted(extract) == [1, 2]
    with pytest.raises(StopIteration):
        next(extract)


def test_lookups_work_after_extract_if():
    raw = make_table(range(100))
    list(ExtractIf(raw, lambda v: v % 3 == 0))
    for value in range(100):
        assert contains(raw, value) == (value % 3 != 0)


@given(st.sets(st.integers(min_value=-1000, max_value=1000)))
def test_extract_if_partitions_table(values):
    raw = make_table(values)
    extracted = list(ExtractIf(raw, lambda v: v > 0))
    kept = [raw.get(i) for i in raw.occupied()]
    assert set(extracted) == {v for v in values if v > 0}
    assert set(kept) == {v for v in values if v <= 0}
    assert len(raw) == len(kept)


@given(st.lists(st.integers()))
def test_drain_returns_every_inserted_value(values):
    raw = make_table(values)
    assert sorted(Drain(raw)) == sorted(values)
    assert len(raw) == 0