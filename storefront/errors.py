"""
Error taxonomy.

Errors are values: they travel inside `Error(...)` and are matched, not caught.

    match store.set_quantity(customer, line_id, 3):
        case Ok(line):
            ...
        case Error(NotFoundError() as e):
            show(e.message)
"""

from __future__ import annotations

from dataclasses import dataclass


# ═══════════════════════════════════════════════════════════════════════════════
# Local Errors — recovered by rejecting the action
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ValidationError:
    """Missing or invalid input, or an action not allowed in the current state."""

    message: str


@dataclass(frozen=True, slots=True)
class NotFoundError:
    """Operation on a cart line, SKU or order that does not exist."""

    entity: str
    key: str

    @property
    def message(self) -> str:
        return f"{self.entity} {self.key!r} not found"


# ═══════════════════════════════════════════════════════════════════════════════
# Remote Errors — abort the in-flight transition
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class TransportError:
    """
    Network or server failure during an external call.

    status is the HTTP status when the server answered at all.
    """

    message: str
    status: int | None = None

    @classmethod
    def from_exception(cls, exc: Exception) -> TransportError:
        return cls(message=str(exc) or type(exc).__name__)


type StorefrontError = ValidationError | NotFoundError | TransportError


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "ValidationError",
    "NotFoundError",
    "TransportError",
    "StorefrontError",
)
