from .ordered_map import (
    OrderedMap,
    compact,
    empty,
    from_list,
    invariant_checks_enabled,
    set_invariant_checks,
    singleton,
)
from .slots import KeyIndex, SlotStore

__all__ = [
    "KeyIndex",
    "OrderedMap",
    "SlotStore",
    "compact",
    "empty",
    "from_list",
    "invariant_checks_enabled",
    "set_invariant_checks",
    "singleton",
]
