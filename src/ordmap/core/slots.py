from __future__ import annotations

from typing import Any, Dict, Generic, Hashable, Iterator, List, Optional, Tuple, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class _Tombstone:
    __slots__ = ()

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return "<tombstone>"


_TOMBSTONE = _Tombstone()


class SlotStore(Generic[K, V]):
    """Append-only sequence of ``(key, value)`` slots.

    Removing a slot replaces it with a tombstone so that every other slot keeps
    its position. The sequence only shrinks when the owner rebuilds it.
    """

    __slots__ = ("_slots", "_live")

    def __init__(self) -> None:
        self._slots: List[Any] = []
        self._live = 0

    def __len__(self) -> int:
        return len(self._slots)

    def copy(self) -> "SlotStore[K, V]":
        clone: SlotStore[K, V] = SlotStore()
        clone._slots = list(self._slots)
        clone._live = self._live
        return clone

    def append(self, key: K, value: V) -> int:
        self._slots.append((key, value))
        self._live += 1
        return len(self._slots) - 1

    def is_live(self, position: int) -> bool:
        return 0 <= position < len(self._slots) and self._slots[position] is not _TOMBSTONE

    def get(self, position: int) -> Optional[V]:
        if not self.is_live(position):
            return None
        return self._slots[position][1]

    def entry(self, position: int) -> Optional[Tuple[K, V]]:
        if not self.is_live(position):
            return None
        return self._slots[position]

    def set(self, position: int, value: V) -> None:
        if not self.is_live(position):
            raise IndexError(f"slot {position} is not live")
        key = self._slots[position][0]
        # Tuples are replaced, never mutated: copies share slot objects.
        self._slots[position] = (key, value)

    def tombstone(self, position: int) -> None:
        if self.is_live(position):
            self._slots[position] = _TOMBSTONE
            self._live -= 1

    def live_count(self) -> int:
        return self._live

    def tombstone_count(self) -> int:
        return len(self._slots) - self._live

    def tombstone_ratio(self) -> float:
        return (self.tombstone_count() / len(self._slots)) if self._slots else 0.0

    def live_positions(self) -> Iterator[int]:
        for position, slot in enumerate(self._slots):
            if slot is not _TOMBSTONE:
                yield position

    def entries(self) -> Iterator[Tuple[K, V]]:
        for slot in self._slots:
            if slot is not _TOMBSTONE:
                yield slot

    def entries_except(self, skipped: Optional[int]) -> Iterator[Tuple[K, V]]:
        """Live entries in order, leaving out the slot at ``skipped``."""

        for position, slot in enumerate(self._slots):
            if slot is not _TOMBSTONE and position != skipped:
                yield slot


class KeyIndex(Generic[K]):
    """Exact mapping from key to its current slot position."""

    __slots__ = ("_positions",)

    def __init__(self) -> None:
        self._positions: Dict[K, int] = {}

    def __len__(self) -> int:
        return len(self._positions)

    def __contains__(self, key: object) -> bool:
        return key in self._positions

    def copy(self) -> "KeyIndex[K]":
        clone: KeyIndex[K] = KeyIndex()
        clone._positions = dict(self._positions)
        return clone

    def lookup(self, key: K) -> Optional[int]:
        return self._positions.get(key)

    def insert(self, key: K, position: int) -> None:
        self._positions[key] = position

    def remove(self, key: K) -> Optional[int]:
        return self._positions.pop(key, None)

    def items(self) -> Iterator[Tuple[K, int]]:
        return iter(self._positions.items())


__all__ = ["KeyIndex", "SlotStore"]
