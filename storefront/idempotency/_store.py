"""
Idempotency store protocol and the in-process implementation.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Protocol

from kungfu import Result, Ok, Error

from storefront.idempotency._types import RecordState, IdempotencyRecord


@dataclass(frozen=True, slots=True)
class StoreError:
    message: str
    cause: Exception | None = None


class Store[T](Protocol):
    """
    Record storage. set_pending must be atomic: Ok(False) when the key exists.
    """

    async def get(self, key: str) -> Result[IdempotencyRecord[T] | None, StoreError]: ...

    async def set_pending(self, key: str, ttl: timedelta | None) -> Result[bool, StoreError]: ...

    async def set_completed(
        self, key: str, value: T, ttl: timedelta | None
    ) -> Result[None, StoreError]: ...

    async def delete(self, key: str) -> Result[bool, StoreError]: ...


type StoreAny = Store[Any]


@dataclass(slots=True)
class _StoredRecord[T]:
    key: str
    state: RecordState
    value: T | None
    created_at: datetime
    expires_at: datetime | None

    def to_record(self) -> IdempotencyRecord[T]:
        return IdempotencyRecord(
            key=self.key,
            state=self.state,
            value=self.value,
            created_at=self.created_at,
            expires_at=self.expires_at,
        )

    def expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now > self.expires_at


class MemoryStore[T]:
    """
    Single-process store guarded by an asyncio.Lock.

    Records do not survive a restart. Expired records are swept whenever a
    new key is claimed.
    """

    def __init__(self) -> None:
        self._records: dict[str, _StoredRecord[T]] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def _sweep(self, now: datetime) -> None:
        for key in [k for k, record in self._records.items() if record.expired(now)]:
            del self._records[key]

    async def get(self, key: str) -> Result[IdempotencyRecord[T] | None, StoreError]:
        async with self._lock:
            record = self._records.get(key)
            if record is None:
                return Ok(None)
            if record.expired(datetime.now()):
                del self._records[key]
                return Ok(None)
            return Ok(record.to_record())

    async def set_pending(self, key: str, ttl: timedelta | None) -> Result[bool, StoreError]:
        async with self._lock:
            now = datetime.now()
            self._sweep(now)
            if key in self._records:
                return Ok(False)

            self._records[key] = _StoredRecord(
                key=key,
                state=RecordState.PENDING,
                value=None,
                created_at=now,
                expires_at=now + ttl if ttl else None,
            )
            return Ok(True)

    async def set_completed(
        self, key: str, value: T, ttl: timedelta | None
    ) -> Result[None, StoreError]:
        async with self._lock:
            existing = self._records.get(key)
            if existing is None:
                return Error(StoreError(f"no pending record for key: {key}"))
            existing.state = RecordState.COMPLETED
            existing.value = value
            existing.expires_at = datetime.now() + ttl if ttl else None
            return Ok(None)

    async def delete(self, key: str) -> Result[bool, StoreError]:
        async with self._lock:
            return Ok(self._records.pop(key, None) is not None)


__all__ = (
    "StoreError",
    "Store",
    "StoreAny",
    "MemoryStore",
)
