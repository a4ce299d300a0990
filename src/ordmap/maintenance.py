"""Tombstone-driven maintenance for ordered maps.

The map itself never compacts on its own. Callers that churn through many
removals can run :func:`maybe_compact` after a batch of updates to reclaim
slots once the tombstone ratio crosses the configured threshold.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional, TypeVar

from .config import CompactionPolicy, OrdmapConfig
from .core.ordered_map import OrderedMap, set_invariant_checks

logger = logging.getLogger("ordmap")

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class MapStats:
    size: int
    slots: int
    tombstones: int
    tombstone_ratio: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "size": self.size,
            "slots": self.slots,
            "tombstones": self.tombstones,
            "tombstone_ratio": self.tombstone_ratio,
        }


def sample_stats(ordered: OrderedMap[Any, Any]) -> MapStats:
    return MapStats(
        size=ordered.size(),
        slots=ordered.slot_count(),
        tombstones=ordered.tombstone_count(),
        tombstone_ratio=ordered.tombstone_ratio(),
    )


def should_compact(ordered: OrderedMap[Any, Any], policy: CompactionPolicy) -> bool:
    if not policy.enabled:
        return False
    if ordered.slot_count() < policy.min_slots:
        return False
    return ordered.tombstone_ratio() > policy.max_tombstone_ratio


def maybe_compact(
    ordered: OrderedMap[K, V],
    policy: Optional[CompactionPolicy] = None,
    on_compaction: Optional[Callable[[MapStats, MapStats], None]] = None,
) -> OrderedMap[K, V]:
    """Return a compacted copy when the policy says so, otherwise ``ordered``."""

    policy = policy or CompactionPolicy()
    if not should_compact(ordered, policy):
        return ordered
    before = sample_stats(ordered)
    logger.info(
        "Auto-compacting ordered map (tombstone_ratio=%.3f, slots=%d)",
        before.tombstone_ratio,
        before.slots,
        extra={"map_stats": before.to_dict()},
    )
    compacted = ordered.compact()
    if on_compaction:
        try:
            on_compaction(before, sample_stats(compacted))
        except Exception:
            logger.exception("on_compaction callback failed")
    return compacted


def apply_config(cfg: OrdmapConfig) -> None:
    """Apply process-wide settings from a loaded configuration."""

    set_invariant_checks(cfg.debug.check_invariants)


__all__ = ["MapStats", "apply_config", "maybe_compact", "sample_stats", "should_compact"]
