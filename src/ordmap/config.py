"""Typed configuration loader for ordmap maintenance and debugging."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .contracts.error import BadInputError

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _coerce_bool(name: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in _TRUE:
            return True
        if normalized in _FALSE:
            return False
    raise BadInputError(f"{name} must be boolean")


@dataclass
class CompactionPolicy:
    enabled: bool = True
    max_tombstone_ratio: float = 0.25
    min_slots: int = 32

    def validate(self) -> None:
        if not 0.0 <= self.max_tombstone_ratio <= 1.0:
            raise BadInputError("compaction.max_tombstone_ratio must be in [0, 1]")
        if self.min_slots < 0:
            raise BadInputError("compaction.min_slots must be >= 0")


@dataclass
class DebugPolicy:
    check_invariants: bool = False

    def validate(self) -> None:
        return


@dataclass
class OrdmapConfig:
    compaction: CompactionPolicy = field(default_factory=CompactionPolicy)
    debug: DebugPolicy = field(default_factory=DebugPolicy)

    @classmethod
    def load(cls, path: Path | None) -> OrdmapConfig:
        if path is None:
            cfg = cls()
        else:
            try:
                data = tomllib.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError as exc:
                raise BadInputError(f"Config file not found: {path}") from exc
            except tomllib.TOMLDecodeError as exc:
                raise BadInputError(f"Invalid TOML: {exc}") from exc
            cfg = cls.from_dict(data)
        cfg.apply_env_overrides(os.environ)
        cfg.validate()
        return cfg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OrdmapConfig:
        compaction_data = data.get("compaction", {})
        if not isinstance(compaction_data, dict):
            raise BadInputError("[compaction] section must be a table")
        debug_data = data.get("debug", {})
        if not isinstance(debug_data, dict):
            raise BadInputError("[debug] section must be a table")

        compaction_kwargs: dict[str, Any] = {}
        if "enabled" in compaction_data:
            compaction_kwargs["enabled"] = _coerce_bool("compaction.enabled", compaction_data["enabled"])
        if "max_tombstone_ratio" in compaction_data:
            try:
                compaction_kwargs["max_tombstone_ratio"] = float(compaction_data["max_tombstone_ratio"])
            except (TypeError, ValueError) as exc:
                raise BadInputError("compaction.max_tombstone_ratio must be a number") from exc
        if "min_slots" in compaction_data:
            raw_min = compaction_data["min_slots"]
            if isinstance(raw_min, bool) or not isinstance(raw_min, int):
                raise BadInputError("compaction.min_slots must be an integer")
            compaction_kwargs["min_slots"] = raw_min
        unknown = set(compaction_data) - {"enabled", "max_tombstone_ratio", "min_slots"}
        if unknown:
            raise BadInputError(
                f"Unknown compaction keys: {', '.join(sorted(unknown))}",
                hint="Supported keys: enabled, max_tombstone_ratio, min_slots",
            )

        debug_kwargs: dict[str, Any] = {}
        if "check_invariants" in debug_data:
            debug_kwargs["check_invariants"] = _coerce_bool(
                "debug.check_invariants", debug_data["check_invariants"]
            )

        return cls(compaction=CompactionPolicy(**compaction_kwargs), debug=DebugPolicy(**debug_kwargs))

    def apply_env_overrides(self, env: Mapping[str, str]) -> None:
        compaction_mapping: dict[str, tuple[str, Callable[[str], Any]]] = {
            "ORDMAP_MAX_TOMBSTONE_RATIO": ("max_tombstone_ratio", float),
            "ORDMAP_MIN_SLOTS": ("min_slots", int),
        }
        for key, (attr, caster) in compaction_mapping.items():
            raw_value = env.get(key)
            if raw_value is None:
                continue
            try:
                value = caster(raw_value)
            except ValueError as exc:
                raise BadInputError(f"Invalid env override {key}={raw_value!r}") from exc
            setattr(self.compaction, attr, value)

        raw_enabled = env.get("ORDMAP_COMPACTION_ENABLED")
        if raw_enabled is not None:
            self.compaction.enabled = _coerce_bool("ORDMAP_COMPACTION_ENABLED", raw_enabled)

        raw_checks = env.get("ORDMAP_CHECK_INVARIANTS")
        if raw_checks is not None:
            self.debug.check_invariants = _coerce_bool("ORDMAP_CHECK_INVARIANTS", raw_checks)

    def validate(self) -> None:
        self.compaction.validate()
        self.debug.validate()


DEFAULT_CONFIG = OrdmapConfig()


def load_config(path: str | None) -> OrdmapConfig:
    config_path = Path(path) if path else None
    return OrdmapConfig.load(config_path)


__all__ = [
    "CompactionPolicy",
    "DEFAULT_CONFIG",
    "DebugPolicy",
    "OrdmapConfig",
    "load_config",
]
