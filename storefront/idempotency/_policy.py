"""
Idempotency policy — how long results are replayed.

A submission that arrives while the same key is still running is refused
with CONFLICT; the caller decides whether to try again.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import timedelta


@dataclass(frozen=True, slots=True)
class Policy:
    """
    Immutable; each with_* returns a new Policy.

    Example:
        policy = Policy().with_ttl(hours=1)
    """

    result_ttl: timedelta | None = None

    def with_ttl(
        self,
        *,
        seconds: float | None = None,
        minutes: float | None = None,
        hours: float | None = None,
        delta: timedelta | None = None,
    ) -> Policy:
        if delta is None:
            total = (seconds or 0) + (minutes or 0) * 60 + (hours or 0) * 3600
            delta = timedelta(seconds=total) if total > 0 else None
        return replace(self, result_ttl=delta)


__all__ = ("Policy",)
