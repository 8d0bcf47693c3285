# probetable

A low-level hash table in which you supply the hash and the equality check
yourself.

`probetable.table.HashTable` is for values that cannot hash or compare
themselves without outside data. One example is a table of indices into a
list, where the hash comes from the list element. It also suits code that
already knows a value's hash and does not want it computed again.

Methods that search the table take a `hash` (an integer) and an `eq`
callable. The table visits the candidates stored under that hash and calls
`eq` on each one until `eq` returns true. Methods that may move values, such
as inserting, reserving or shrinking, also take a `hasher` callable. It must
return the same hash each value was inserted with.

The table does not stop you from storing several equal values. If you do,
lookups still work and return one of the matches, but they get slower.

## Installation

```
pip install probetable
```

The package has no dependencies outside the standard library.

## Usage

```python
from probetable.table import HashTable

table = HashTable()
hasher = hash

for word in ["one", "two", "three"]:
    table.insert_unique(hasher(word), word, hasher)

assert table.find(hasher("two"), lambda v: v == "two") == "two"
assert table.find(hasher("four"), lambda v: v == "four") is None
assert len(table) == 3
assert sorted(table) == ["one", "three", "two"]
```

`HashTable(capacity)` starts with room for at least `capacity` values;
`HashTable()` allocates nothing until the first insertion. Iterating over the
table yields its values in no particular order. `iter_hash(hash)` yields the
values that may have the given hash; other values can appear too, so check
each one.

### Entries

`entry(hash, eq, hasher)` returns an `OccupiedEntry` when a matching value is
stored and a `VacantEntry` otherwise; both are `Entry` objects. It may grow
the table to make room for the insertion.

```python
pairs = HashTable()
key_hash = lambda pair: hash(pair[0])

pairs.entry(hash("pony"), lambda p: p[0] == "pony", key_hash).or_insert(("pony", 1))
pairs.entry(hash("pony"), lambda p: p[0] == "pony", key_hash) \
    .and_modify(lambda p: ("pony", p[1] + 1)) \
    .or_insert(("pony", 1))
assert pairs.find(hash("pony"), lambda p: p[0] == "pony") == ("pony", 2)
```

- `insert(value)` stores the value, replacing any existing one.
- `or_insert(default)` and `or_insert_with(factory)` insert only when the
  entry is vacant. The factory is called only in that case.
- `and_modify(f)` calls `f` on an occupied entry's value. `f` may change the
  value in place and return None, or return the value that replaces it.

All three insertion methods return the `OccupiedEntry`. An `OccupiedEntry`
has `get()`, `set(value)`, `remove()`, `into_table()` and the read-only
properties `hash` and `index`. The replacement value must keep the same hash.

`find_entry(hash, eq)` never grows the table. It returns an `OccupiedEntry`
when the value is found and an `AbsentEntry` when it is not.
`OccupiedEntry.remove()` takes the value out and returns it together with a
`VacantEntry`, which you can use to insert a new value under the same hash.
`insert_unique` also returns an `OccupiedEntry` for the value it stored.

### Bulk operations

- `retain(f)` keeps only the values for which `f` returns true.
- `drain()` empties the table at once and returns a `Drain` that yields every
  value it held. The capacity is kept.
- `extract_if(f)` returns an `ExtractIf` that removes and yields the values
  for which `f` returns true. Values it has not reached yet stay in the table
  if you stop early.
- `get_many(hashes, eq)` looks up several values at once. `eq(i, value)`
  matches the `i`-th query. Missing values come back as None. It raises
  `ValueError` if two queries find the same value.
- `clear()` removes every value and keeps the capacity.
- `copy()` returns a shallow copy.

### Capacity

`capacity()` is the number of values the table can hold before it has to
grow, and `is_empty()` tells whether it holds any.

- `reserve(additional, hasher)` makes room for more values. It raises
  `OverflowError` if the capacity cannot be described and `MemoryError` if
  memory runs out.
- `try_reserve(additional, hasher)` does the same but raises
  `probetable.raw.TryReserveError` instead. Its `kind` attribute is
  `"capacity_overflow"` or `"alloc_error"`.
- `shrink_to(min_capacity, hasher)` shrinks the storage but keeps room for at
  least `min_capacity` values and for every stored value. `shrink_to_fit`
  shrinks as far as the stored values allow.
- `allocation_size()` gives an approximate number of bytes held for the
  storage; it is 0 for a table that has allocated nothing.

### Lower level

`probetable.raw.RawTable` is the storage underneath. It works with slot
indices instead of values: `find` returns an index or None, and `get`, `set`
and `remove` take an index.

## What this package does not provide

There is no map or set type that hashes and compares its own keys. Build
one by wrapping `HashTable` with the hash function and equality you need.

## Running the tests

```
pip install -e ".[test]"
pytest
```