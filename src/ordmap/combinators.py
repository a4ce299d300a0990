"""Combinators that compose two ordered maps.

Everything here goes through the public ``OrderedMap`` API only.
"""

from __future__ import annotations

from typing import Callable, Hashable, List, TypeVar

from .core.ordered_map import OrderedMap

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
L = TypeVar("L")
R = TypeVar("R")
A = TypeVar("A")


def union(left: OrderedMap[K, V], right: OrderedMap[K, V]) -> OrderedMap[K, V]:
    """Insert every entry of ``left`` into ``right``.

    Shared keys keep their position in ``right`` and take the value from
    ``left``; keys only in ``left`` are appended in ``left``'s order.
    """

    return right.insert_all(left.to_list())


def intersect(left: OrderedMap[K, V], right: OrderedMap[K, object]) -> OrderedMap[K, V]:
    """Entries of ``left`` whose key is also in ``right``, in ``left``'s order."""

    return left.filter(lambda key, _value: right.member(key))


def diff(left: OrderedMap[K, V], right: OrderedMap[K, object]) -> OrderedMap[K, V]:
    """Entries of ``left`` whose key is not in ``right``, in ``left``'s order."""

    return left.filter(lambda key, _value: not right.member(key))


def merge(
    on_left: Callable[[K, L, A], A],
    on_both: Callable[[K, L, R, A], A],
    on_right: Callable[[K, R, A], A],
    left: OrderedMap[K, L],
    right: OrderedMap[K, R],
    init: A,
) -> A:
    """Fold over the union of both key sets, calling one callback per key.

    Keys are visited in ``left``'s order first, then the keys only found in
    ``right`` in ``right``'s order.
    """

    ordered_keys: List[K] = left.keys() + [key for key in right.keys() if not left.member(key)]
    acc = init
    for key in ordered_keys:
        in_left = left.member(key)
        in_right = right.member(key)
        if in_left and in_right:
            acc = on_both(key, left.get(key), right.get(key), acc)  # type: ignore[arg-type]
        elif in_left:
            acc = on_left(key, left.get(key), acc)  # type: ignore[arg-type]
        else:
            acc = on_right(key, right.get(key), acc)  # type: ignore[arg-type]
    return acc


__all__ = ["diff", "intersect", "merge", "union"]
