from __future__ import annotations

import pytest

from ordmap.core.slots import KeyIndex, SlotStore


def test_slot_store_append_and_tombstone() -> None:
    store: SlotStore[str, int] = SlotStore()
    assert store.append("a", 1) == 0
    assert store.append("b", 2) == 1
    assert store.append("c", None) == 2  # type: ignore[arg-type]
    store.tombstone(1)
    assert len(store) == 3
    assert store.live_count() == 2
    assert store.tombstone_count() == 1
    assert store.tombstone_ratio() == pytest.approx(1 / 3)
    assert store.get(1) is None
    assert store.entry(1) is None
    assert store.is_live(2) and store.get(2) is None
    assert list(store.live_positions()) == [0, 2]
    assert list(store.entries()) == [("a", 1), ("c", None)]


def test_slot_store_tombstone_twice_counts_once() -> None:
    store: SlotStore[str, int] = SlotStore()
    store.append("a", 1)
    store.tombstone(0)
    store.tombstone(0)
    store.tombstone(5)
    assert store.live_count() == 0
    assert store.tombstone_ratio() == 1.0


def test_slot_store_set_and_copy_are_independent() -> None:
    store: SlotStore[str, int] = SlotStore()
    store.append("a", 1)
    clone = store.copy()
    clone.set(0, 10)
    clone.append("b", 2)
    assert store.entry(0) == ("a", 1)
    assert clone.entry(0) == ("a", 10)
    assert len(store) == 1 and len(clone) == 2


def test_slot_store_set_on_dead_slot_raises() -> None:
    store: SlotStore[str, int] = SlotStore()
    store.append("a", 1)
    store.tombstone(0)
    with pytest.raises(IndexError):
        store.set(0, 2)
    with pytest.raises(IndexError):
        store.set(3, 2)


def test_empty_slot_store_ratio() -> None:
    assert SlotStore().tombstone_ratio() == 0.0
    assert SlotStore().get(0) is None


def test_key_index_roundtrip() -> None:
    index: KeyIndex[str] = KeyIndex()
    index.insert("a", 0)
    index.insert("b", 3)
    assert index.lookup("b") == 3
    assert "a" in index and len(index) == 2
    clone = index.copy()
    assert index.remove("a") == 0
    assert index.remove("a") is None
    assert index.lookup("a") is None
    assert clone.lookup("a") == 0
    assert dict(index.items()) == {"b": 3}
