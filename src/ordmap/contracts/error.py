"""Error types shared across the ordmap package."""

from __future__ import annotations

import json
from dataclasses import dataclass


@dataclass(slots=True)
class ErrorEnvelope:
    """Machine-readable description of a raised error."""

    error: str
    detail: str
    hint: str | None = None

    def to_json(self) -> str:
        payload = {"error": self.error, "detail": self.detail}
        if self.hint:
            payload["hint"] = self.hint
        return json.dumps(payload, ensure_ascii=False)


class EnvelopeError(Exception):
    """Base exception that carries an optional hint for the error envelope."""

    label = "Error"

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def envelope(self) -> ErrorEnvelope:
        return ErrorEnvelope(error=self.label, detail=str(self), hint=self.hint)


class BadInputError(EnvelopeError):
    """Raised for malformed user input (config files, env overrides, policies)."""

    label = "BadInput"


class InvariantError(EnvelopeError):
    """Raised when internal consistency checks fail."""

    label = "Invariant"


__all__ = [
    "ErrorEnvelope",
    "EnvelopeError",
    "BadInputError",
    "InvariantError",
]
