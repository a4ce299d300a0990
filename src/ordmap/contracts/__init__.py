"""Error contracts for ordmap."""

from .error import (
    BadInputError,
    EnvelopeError,
    ErrorEnvelope,
    InvariantError,
)

__all__ = [
    "ErrorEnvelope",
    "EnvelopeError",
    "BadInputError",
    "InvariantError",
]
