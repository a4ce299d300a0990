from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from hypothesis import given, settings, strategies as st

from ordmap import OrderedMap, compact, from_list

Pairs = List[Tuple[Any, int]]
Op = Tuple[str, Any, Any, Optional[int]]


@dataclass(frozen=True)
class CollidingKey:
    """Key whose hash intentionally collides with peers for stress testing."""

    value: int

    def __hash__(self) -> int:  # pragma: no cover - trivial
        return 0

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"CK({self.value})"


def _key_strategy() -> st.SearchStrategy[Any]:
    small_ints = st.integers(-8, 8)
    colliding = st.builds(CollidingKey, st.integers(-4, 4))
    return st.one_of(small_ints, colliding)


def _value_strategy() -> st.SearchStrategy[int]:
    return st.integers(-1_000, 1_000)


def _pairs_strategy() -> st.SearchStrategy[Pairs]:
    return st.lists(st.tuples(_key_strategy(), _value_strategy()), max_size=25)


def _operation_strategy() -> st.SearchStrategy[Op]:
    key = _key_strategy()
    value = _value_strategy()
    return st.one_of(
        st.tuples(st.just("insert"), key, st.none(), value),
        st.tuples(st.just("remove"), key, st.none(), st.none()),
        st.tuples(st.just("update"), key, st.none(), st.one_of(st.none(), value)),
        st.tuples(st.just("insert_start"), key, st.none(), value),
        st.tuples(st.just("insert_end"), key, st.none(), value),
        st.tuples(st.just("insert_before"), key, key, value),
        st.tuples(st.just("insert_after"), key, key, value),
        st.tuples(st.just("compact"), st.none(), st.none(), st.none()),
    )


# --------------------------------------------------------------------
# Reference model: a plain list of (key, value) pairs in live order.
# --------------------------------------------------------------------
def _model_keys(model: Pairs) -> List[Any]:
    return [k for k, _ in model]


def _model_remove(model: Pairs, key: Any) -> Pairs:
    return [(k, v) for k, v in model if k != key]


def _model_insert(model: Pairs, key: Any, value: int) -> Pairs:
    if key in _model_keys(model):
        return [(k, value if k == key else v) for k, v in model]
    return model + [(key, value)]


def _model_apply(model: Pairs, op: Op) -> Pairs:
    name, key, marker, value = op
    if name == "insert":
        return _model_insert(model, key, value)
    if name == "remove":
        return _model_remove(model, key)
    if name == "update":
        return _model_remove(model, key) if value is None else _model_insert(model, key, value)
    if name == "insert_start":
        return [(key, value)] + _model_remove(model, key)
    if name == "insert_end":
        return _model_remove(model, key) + [(key, value)]
    if name in ("insert_before", "insert_after"):
        keys = _model_keys(model)
        if marker == key and key in keys:
            return _model_insert(model, key, value)
        if marker not in keys:
            return _model_remove(model, key) + [(key, value)]
        rest = _model_remove(model, key)
        at = _model_keys(rest).index(marker) + (1 if name == "insert_after" else 0)
        return rest[:at] + [(key, value)] + rest[at:]
    return model  # compact


def _apply(ordered: OrderedMap[Any, int], op: Op) -> OrderedMap[Any, int]:
    name, key, marker, value = op
    if name == "insert":
        return ordered.insert(key, value)
    if name == "remove":
        return ordered.remove(key)
    if name == "update":
        return ordered.update(key, lambda _current: value)
    if name == "insert_start":
        return ordered.insert_start(key, value)
    if name == "insert_end":
        return ordered.insert_end(key, value)
    if name == "insert_before":
        return ordered.insert_before(marker, key, value)
    if name == "insert_after":
        return ordered.insert_after(marker, key, value)
    return ordered.compact()


def _assert_matches(ordered: OrderedMap[Any, int], model: Pairs) -> None:
    ordered.check_invariants()
    assert ordered.to_list() == model
    assert ordered.size() == len(model) == len(ordered)
    assert ordered.keys() == _model_keys(model)
    assert ordered.values() == [v for _, v in model]
    assert ordered.size() + ordered.tombstone_count() == ordered.slot_count()
    for index, (key, value) in enumerate(model):
        assert ordered.get(key) == value
        assert ordered.get_index(key) == index
        assert ordered.get_at_index(index) == value
        assert ordered.get_before(key) == (model[index - 1][1] if index > 0 else None)
        assert ordered.get_after(key) == (model[index + 1][1] if index + 1 < len(model) else None)
    assert ordered.get_at_index(len(model)) is None


@settings(max_examples=150, deadline=None)
@given(_pairs_strategy(), st.lists(_operation_strategy(), min_size=1, max_size=40))
def test_ordered_map_matches_list_model(initial: Pairs, operations: List[Op]) -> None:
    ordered = from_list(initial)
    model: Pairs = []
    for key, value in initial:
        model = _model_remove(model, key) + [(key, value)]
    _assert_matches(ordered, model)

    for op in operations:
        before = ordered.to_list()
        updated = _apply(ordered, op)
        # The previous version is never mutated.
        assert ordered.to_list() == before
        model = _model_apply(model, op)
        _assert_matches(updated, model)
        ordered = updated


@given(_pairs_strategy(), st.integers(-30, 30), st.integers(-30, 30))
def test_slice_keeps_live_index_window(pairs: Pairs, start: int, end: int) -> None:
    ordered = from_list(pairs)
    sliced = ordered.slice(start, end)
    entries = ordered.to_list()
    assert sliced.to_list() == [entry for index, entry in enumerate(entries) if start <= index < end]
    assert sliced.tombstone_count() == 0


@given(_pairs_strategy(), st.lists(_key_strategy(), max_size=10))
def test_compact_is_observationally_transparent(pairs: Pairs, removals: List[Any]) -> None:
    ordered = from_list(pairs)
    for key in removals:
        ordered = ordered.remove(key)
    compacted = compact(ordered)
    assert compacted.to_list() == ordered.to_list()
    assert compacted.size() == ordered.size()
    assert compacted.tombstone_count() == 0
    assert compact(compacted) == compacted


@given(_pairs_strategy())
def test_folds_agree_with_to_list(pairs: Pairs) -> None:
    ordered = from_list(pairs)
    forward = ordered.foldl(lambda k, v, acc: acc + [(k, v)], [])
    backward = ordered.foldr(lambda k, v, acc: acc + [(k, v)], [])
    assert forward == ordered.to_list()
    assert backward == list(reversed(ordered.to_list()))
