"""
Idempotency types — records kept per submission key.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto


class RecordState(Enum):
    """
    PENDING → COMPLETED (success)
            → (deleted on failure, so the caller may retry)
    """

    PENDING = auto()
    COMPLETED = auto()


@dataclass(frozen=True, slots=True)
class IdempotencyRecord[T]:
    key: str
    state: RecordState
    value: T | None
    created_at: datetime
    expires_at: datetime | None

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and datetime.now() > self.expires_at

    @property
    def is_pending(self) -> bool:
        return self.state == RecordState.PENDING

    @property
    def is_completed(self) -> bool:
        return self.state == RecordState.COMPLETED


@dataclass(frozen=True, slots=True)
class IdempotencyResult[T]:
    """Value plus whether it was replayed from an earlier identical submission."""

    value: T
    from_cache: bool
    key: str


class IdempotencyErrorKind(Enum):
    CONFLICT = auto()  # same key already running
    STORE_ERROR = auto()
    EXECUTION = auto()  # wrapped operation failed


@dataclass(frozen=True, slots=True)
class IdempotencyError[E]:
    """original_error holds the operation's own error when kind is EXECUTION."""

    kind: IdempotencyErrorKind
    message: str
    original_error: E | Exception | None = None


__all__ = (
    "RecordState",
    "IdempotencyRecord",
    "IdempotencyResult",
    "IdempotencyErrorKind",
    "IdempotencyError",
)
