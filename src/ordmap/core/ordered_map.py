from __future__ import annotations

import logging
from itertools import islice
from typing import (
    Any,
    Callable,
    Generic,
    Hashable,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    TypeVar,
)

from ordmap.contracts.error import InvariantError

from .slots import KeyIndex, SlotStore

logger = logging.getLogger("ordmap")

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
W = TypeVar("W")
A = TypeVar("A")

_CHECK_INVARIANTS = False


def set_invariant_checks(enabled: bool) -> None:
    """Verify the representation after every public operation (debug aid)."""

    global _CHECK_INVARIANTS
    _CHECK_INVARIANTS = bool(enabled)
    logger.debug("Invariant checks %s", "enabled" if _CHECK_INVARIANTS else "disabled")


def invariant_checks_enabled() -> bool:
    return _CHECK_INVARIANTS


class OrderedMap(Generic[K, V]):
    """Key/value map that remembers and exposes insertion order.

    Lookups go through a key index into a slot store. Live order is the
    ascending order of slot positions; removals leave tombstones behind until
    the map is rebuilt (``compact``, ``map``, ``filter``, splices, ...).

    Every operation returns a new map and leaves the receiver untouched.
    """

    __slots__ = ("_index", "_slots")

    def __init__(self, pairs: Iterable[Tuple[K, V]] = ()) -> None:
        self._index: KeyIndex[K] = KeyIndex()
        self._slots: SlotStore[K, V] = SlotStore()
        for key, value in pairs:
            self._move_to_end(key, value)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def empty(cls) -> "OrderedMap[K, V]":
        return cls()

    @classmethod
    def singleton(cls, key: K, value: V) -> "OrderedMap[K, V]":
        return cls([(key, value)])

    @classmethod
    def from_list(cls, pairs: Iterable[Tuple[K, V]]) -> "OrderedMap[K, V]":
        """Build a map from pairs; a repeated key takes the later value and position."""

        return cls(pairs)

    @classmethod
    def _from_unique(cls, entries: Iterable[Tuple[K, V]]) -> "OrderedMap[K, V]":
        built = cls()
        for key, value in entries:
            built._index.insert(key, built._slots.append(key, value))
        return built._checked()

    def _clone(self) -> "OrderedMap[K, V]":
        clone = type(self)()
        clone._index = self._index.copy()
        clone._slots = self._slots.copy()
        return clone

    # ------------------------------------------------------------------
    # In-place primitives (only ever applied to a private copy)
    # ------------------------------------------------------------------
    def _put(self, key: K, value: V) -> None:
        position = self._index.lookup(key)
        if position is None:
            self._index.insert(key, self._slots.append(key, value))
        else:
            self._slots.set(position, value)

    def _delete(self, key: K) -> bool:
        position = self._index.remove(key)
        if position is None:
            return False
        self._slots.tombstone(position)
        return True

    def _move_to_end(self, key: K, value: V) -> None:
        self._delete(key)
        self._index.insert(key, self._slots.append(key, value))

    def _checked(self) -> "OrderedMap[K, V]":
        if _CHECK_INVARIANTS:
            self.check_invariants()
        return self

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------
    def insert(self, key: K, value: V) -> "OrderedMap[K, V]":
        """Add ``key`` at the end, or replace its value without moving it."""

        clone = self._clone()
        clone._put(key, value)
        return clone._checked()

    def insert_all(self, pairs: Iterable[Tuple[K, V]]) -> "OrderedMap[K, V]":
        """Same result as chaining ``insert`` over ``pairs``, with a single copy."""

        clone = self._clone()
        for key, value in pairs:
            clone._put(key, value)
        return clone._checked()

    def update(self, key: K, transform: Callable[[Optional[V]], Optional[V]]) -> "OrderedMap[K, V]":
        """Replace the value with ``transform(current)``; ``None`` removes the key."""

        result = transform(self.get(key))
        if result is None:
            return self.remove(key)
        return self.insert(key, result)

    def remove(self, key: K) -> "OrderedMap[K, V]":
        if key not in self._index:
            return self
        clone = self._clone()
        clone._delete(key)
        return clone._checked()

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        position = self._index.lookup(key)
        if position is None:
            return default
        return self._slots.get(position)

    def member(self, key: K) -> bool:
        return key in self._index

    def size(self) -> int:
        return len(self._index)

    def is_empty(self) -> bool:
        return len(self._index) == 0

    def get_at_index(self, index: int) -> Optional[V]:
        if index < 0 or index >= len(self._index):
            return None
        for _key, value in islice(self._slots.entries(), index, index + 1):
            return value
        return None

    def get_index(self, key: K) -> Optional[int]:
        position = self._index.lookup(key)
        if position is None:
            return None
        return sum(1 for live in self._slots.live_positions() if live < position)

    def get_before(self, key: K) -> Optional[V]:
        index = self.get_index(key)
        if index is None or index == 0:
            return None
        return self.get_at_index(index - 1)

    def get_after(self, key: K) -> Optional[V]:
        index = self.get_index(key)
        if index is None:
            return None
        return self.get_at_index(index + 1)

    # ------------------------------------------------------------------
    # Positional operations
    # ------------------------------------------------------------------
    def _splice(self, key: K, value: V, at: int) -> "OrderedMap[K, V]":
        # Skip by slot position: keys such as NaN are found by identity but never compare equal.
        entries = list(self._slots.entries_except(self._index.lookup(key)))
        entries.insert(at, (key, value))
        return self._from_unique(entries)

    def insert_start(self, key: K, value: V) -> "OrderedMap[K, V]":
        return self._splice(key, value, 0)

    def insert_end(self, key: K, value: V) -> "OrderedMap[K, V]":
        # Appending never disturbs the order of other keys, so no renumbering.
        clone = self._clone()
        clone._move_to_end(key, value)
        return clone._checked()

    def _insert_near(self, marker: K, key: K, value: V, offset: int) -> "OrderedMap[K, V]":
        if (marker is key or marker == key) and key in self._index:
            return self.insert(key, value)
        marker_index = self.get_index(marker)
        if marker_index is None:
            return self.insert_end(key, value)
        key_index = self.get_index(key)
        if key_index is not None and key_index < marker_index:
            marker_index -= 1
        return self._splice(key, value, marker_index + offset)

    def insert_before(self, marker: K, key: K, value: V) -> "OrderedMap[K, V]":
        """Place ``key`` right before ``marker``; appends when ``marker`` is absent."""

        return self._insert_near(marker, key, value, 0)

    def insert_after(self, marker: K, key: K, value: V) -> "OrderedMap[K, V]":
        """Place ``key`` right after ``marker``; appends when ``marker`` is absent."""

        return self._insert_near(marker, key, value, 1)

    def slice(self, start: int, end: int) -> "OrderedMap[K, V]":
        """Entries whose live index is within ``[start, end)``.

        Bounds are clipped to the live entries; a negative bound counts as 0.
        """

        return self._from_unique(self.to_list()[max(start, 0) : max(end, 0)])

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def keys(self) -> List[K]:
        return [key for key, _ in self._slots.entries()]

    def values(self) -> List[V]:
        return [value for _, value in self._slots.entries()]

    def to_list(self) -> List[Tuple[K, V]]:
        return list(self._slots.entries())

    def items(self) -> List[Tuple[K, V]]:
        return self.to_list()

    def foldl(self, step: Callable[[K, V, A], A], init: A) -> A:
        acc = init
        for key, value in self._slots.entries():
            acc = step(key, value, acc)
        return acc

    def foldr(self, step: Callable[[K, V, A], A], init: A) -> A:
        acc = init
        for key, value in reversed(self.to_list()):
            acc = step(key, value, acc)
        return acc

    def map(self, fn: Callable[[K, V], W]) -> "OrderedMap[K, W]":
        return OrderedMap._from_unique((key, fn(key, value)) for key, value in self._slots.entries())

    def filter(self, predicate: Callable[[K, V], bool]) -> "OrderedMap[K, V]":
        return self._from_unique(
            (key, value) for key, value in self._slots.entries() if predicate(key, value)
        )

    def partition(
        self, predicate: Callable[[K, V], bool]
    ) -> Tuple["OrderedMap[K, V]", "OrderedMap[K, V]"]:
        kept: List[Tuple[K, V]] = []
        rejected: List[Tuple[K, V]] = []
        for key, value in self._slots.entries():
            (kept if predicate(key, value) else rejected).append((key, value))
        return self._from_unique(kept), self._from_unique(rejected)

    # ------------------------------------------------------------------
    # Compaction and introspection
    # ------------------------------------------------------------------
    def compact(self) -> "OrderedMap[K, V]":
        """Rebuild without tombstones; order and values are unchanged."""

        compacted = self._from_unique(self._slots.entries())
        logger.debug(
            "Compacted ordered map (slots %d -> %d)", len(self._slots), len(compacted._slots)
        )
        return compacted

    def slot_count(self) -> int:
        return len(self._slots)

    def tombstone_count(self) -> int:
        return self._slots.tombstone_count()

    def tombstone_ratio(self) -> float:
        return self._slots.tombstone_ratio()

    def check_invariants(self) -> None:
        """Raise ``InvariantError`` if the index and slot store disagree."""

        seen: set[int] = set()
        for key, position in self._index.items():
            entry = self._slots.entry(position)
            if entry is None:
                raise InvariantError(f"key {key!r} points at dead slot {position}")
            if entry[0] is not key and entry[0] != key:
                raise InvariantError(f"slot {position} holds {entry[0]!r}, index expects {key!r}")
            if position in seen:
                raise InvariantError(f"slot {position} is shared by several keys")
            seen.add(position)
        live = self._slots.live_count()
        if live != len(self._index):
            raise InvariantError(f"{live} live slots but {len(self._index)} indexed keys")
        for position in self._slots.live_positions():
            if position not in seen:
                raise InvariantError(f"live slot {position} is not reachable from any key")

    # ------------------------------------------------------------------
    # Python protocol
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __iter__(self) -> Iterator[K]:
        return (key for key, _ in self._slots.entries())

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, OrderedMap):
            return NotImplemented
        return self.to_list() == other.to_list()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_list()!r})"


def empty() -> OrderedMap[Any, Any]:
    return OrderedMap()


def singleton(key: K, value: V) -> OrderedMap[K, V]:
    return OrderedMap.singleton(key, value)


def from_list(pairs: Iterable[Tuple[K, V]]) -> OrderedMap[K, V]:
    return OrderedMap.from_list(pairs)


def compact(ordered: OrderedMap[K, V]) -> OrderedMap[K, V]:
    return ordered.compact()


__all__ = [
    "OrderedMap",
    "compact",
    "empty",
    "from_list",
    "invariant_checks_enabled",
    "set_invariant_checks",
    "singleton",
]
