"""
BucketMap -- a separately chained hash map built on a plain bucket list.

Each bucket index holds either None or a non-empty list of entries whose keys
hashed to that index. Before a new key is inserted, the load factor
(count / capacity) is checked against LOAD_FACTOR; once it is reached the
bucket list is doubled and every entry is moved into the new list.
"""

from collections.abc import Sized
from typing import TypeVar, Generic, List, Iterable, Iterator, Optional, Tuple

K = TypeVar('K')
V = TypeVar('V')

DEFAULT_CAPACITY = 16
LOAD_FACTOR = 0.7
GROWTH_FACTOR = 2

_MISSING = object()


class Entry(Generic[K, V]):
    """A key/value pair stored in a chain. The key cannot be reassigned."""

    __slots__ = ('_key', 'value')

    def __init__(self, key: K, value: V) -> None:
        self._key = key
        self.value = value

    @property
    def key(self) -> K:
        return self._key

    def __repr__(self) -> str:
        return f"Entry({self._key!r}, {self.value!r})"


class BucketMap(Generic[K, V]):
    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity < 1:
            raise ValueError("capacity must be a positive integer")
        self._capacity = capacity
        self._count = 0
        self._buckets: List[Optional[List[Entry[K, V]]]] = [None] * capacity

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[K, V]]) -> 'BucketMap[K, V]':
        """Build a map by inserting each pair in order.

        When the input has a known length the map starts with that many
        buckets. Later duplicates overwrite earlier ones.
        """
        if isinstance(pairs, Sized):
            result: BucketMap[K, V] = cls(max(len(pairs), 1))
        else:
            result = cls()
        for key, value in pairs:
            result.insert(key, value)
        return result

    # -- bucket store ------------------------------------------------------

    def _bucket_index(self, key: K) -> int:
        return hash(key) % self._capacity

    def _chain(self, index: int):
        chain = self._buckets[index]
        return chain if chain is not None else ()

    def _chain_for_insert(self, index: int) -> List[Entry[K, V]]:
        chain = self._buckets[index]
        if chain is None:
            chain = []
            self._buckets[index] = chain
        return chain

    def _find(self, key: K) -> Optional[Entry[K, V]]:
        for entry in self._chain(self._bucket_index(key)):
            if entry.key == key:
                return entry
        return None

    # -- resize policy -----------------------------------------------------

    def _needs_resize(self) -> bool:
        return self._count / self._capacity >= LOAD_FACTOR

    def _resize(self, new_capacity: int) -> None:
        new_buckets: List[Optional[List[Entry[K, V]]]] = [None] * new_capacity
        for chain in self._buckets:
            if chain is None:
                continue
            for entry in chain:
                index = hash(entry.key) % new_capacity
                if not 0 <= index < new_capacity:
                    raise RuntimeError(f"rehash produced index {index} outside capacity {new_capacity}")
                target = new_buckets[index]
                if target is None:
                    new_buckets[index] = [entry]
                else:
                    target.append(entry)
        self._buckets = new_buckets
        self._capacity = new_capacity

    # -- operations --------------------------------------------------------

    def insert(self, key: K, value: V) -> None:
        entry = self._find(key)
        if entry is not None:
            entry.value = value
            return
        # Grow before adding so the new entry hashes against the final capacity.
        if self._needs_resize():
            self._resize(self._capacity * GROWTH_FACTOR)
        self._chain_for_insert(self._bucket_index(key)).append(Entry(key, value))
        self._count += 1

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        entry = self._find(key)
        if entry is None:
            return default
        return entry.value

    def remove(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Remove key and return its value, or default if it is absent.

        Capacity never shrinks.
        """
        index = self._bucket_index(key)
        chain = self._buckets[index]
        if chain is None:
            return default
        for i, entry in enumerate(chain):
            if entry.key == key:
                chain.pop(i)
                if not chain:
                    self._buckets[index] = None
                self._count -= 1
                return entry.value
        return default

    def contains(self, key: K) -> bool:
        return self._find(key) is not None

    def size(self) -> int:
        return self._count

    def capacity(self) -> int:
        return self._capacity

    def is_empty(self) -> bool:
        return self._count == 0

    def load_factor(self) -> float:
        return self._count / self._capacity

    def chain_lengths(self) -> List[int]:
        return [len(chain) if chain is not None else 0 for chain in self._buckets]

    def clear(self) -> None:
        self._buckets = [None] * self._capacity
        self._count = 0

    def copy(self) -> 'BucketMap[K, V]':
        """Create a copy of this BucketMap with the same capacity.

        Note: values are shared, not copied. Mutating a mutable value through
        one map is visible through the other.
        """
        clone: BucketMap[K, V] = BucketMap(self._capacity)
        for key, value in self.items():
            clone.insert(key, value)
        return clone

    # -- iteration ---------------------------------------------------------

    def _entries(self) -> Iterator[Entry[K, V]]:
        for chain in self._buckets:
            if chain is not None:
                yield from chain

    def items(self) -> Iterator[Tuple[K, V]]:
        for entry in self._entries():
            yield entry.key, entry.value

    def keys(self) -> Iterator[K]:
        for entry in self._entries():
            yield entry.key

    def values(self) -> Iterator[V]:
        for entry in self._entries():
            yield entry.value

    def iter_mut(self) -> Iterator[Entry[K, V]]:
        """Yield the stored entries so values can be updated in place.

        Assigning entry.value changes the mapping; entry.key is read-only.
        Do not insert or remove keys while the iteration is running.
        """
        return self._entries()

    def drain(self) -> Iterator[Tuple[K, V]]:
        """Take every entry out of the map and yield them as (key, value) pairs.

        The map is emptied as soon as drain() is called, before the returned
        iterator is consumed. Capacity is kept.
        """
        buckets = self._buckets
        self._buckets = [None] * self._capacity
        self._count = 0
        return self._drain_buckets(buckets)

    @staticmethod
    def _drain_buckets(buckets: List[Optional[List[Entry[K, V]]]]) -> Iterator[Tuple[K, V]]:
        for chain in buckets:
            if chain is None:
                continue
            for entry in chain:
                yield entry.key, entry.value

    # -- dunder methods ----------------------------------------------------

    def __len__(self) -> int:
        return self._count

    def __contains__(self, key: object) -> bool:
        return self.contains(key)

    def __getitem__(self, key: K) -> V:
        entry = self._find(key)
        if entry is None:
            raise KeyError(key)
        return entry.value

    def __setitem__(self, key: K, value: V) -> None:
        self.insert(key, value)

    def __delitem__(self, key: K) -> None:
        if self.remove(key, _MISSING) is _MISSING:
            raise KeyError(key)

    def __iter__(self) -> Iterator[K]:
        return self.keys()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BucketMap):
            return NotImplemented
        if self._count != other._count:
            return False
        for key, value in self.items():
            if other.get(key, _MISSING) != value:
                return False
        return True

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join(f"{k!r}: {v!r}" for k, v in self.items())
        return f"BucketMap({{{body}}})"
