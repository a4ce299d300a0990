"""Insertion-ordered associative container."""

from .combinators import diff, intersect, merge, union
from .contracts.error import BadInputError, InvariantError
from .core.ordered_map import (
    OrderedMap,
    compact,
    empty,
    from_list,
    set_invariant_checks,
    singleton,
)
from .log import configure_logging

__all__ = [
    "BadInputError",
    "InvariantError",
    "OrderedMap",
    "compact",
    "configure_logging",
    "diff",
    "empty",
    "from_list",
    "intersect",
    "merge",
    "set_invariant_checks",
    "singleton",
    "union",
]
