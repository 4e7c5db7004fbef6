"""
Idempotency builder and executor.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from kungfu import LazyCoroResult, Result, Ok, Error

from storefront.idempotency._types import (
    IdempotencyResult,
    IdempotencyError,
    IdempotencyErrorKind,
    IdempotencyRecord,
)
from storefront.idempotency._store import StoreAny, StoreError, MemoryStore
from storefront.idempotency._policy import Policy

logger = logging.getLogger(__name__)

type KeyFn[K] = Callable[[K], str]


def _store_failure(err: StoreError) -> IdempotencyError:
    return IdempotencyError(IdempotencyErrorKind.STORE_ERROR, err.message, err.cause)


# ═══════════════════════════════════════════════════════════════════════════════
# Idempotent Builder
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class Idempotent[K, T, E]:
    _operation: Callable[[K], LazyCoroResult[T, E]]
    _key_fn: KeyFn[K] | None = None
    _store: StoreAny | None = None
    _policy: Policy = Policy()

    def key(self, fn: KeyFn[K]) -> Idempotent[K, T, E]:
        return replace(self, _key_fn=fn)

    def store(self, s: StoreAny) -> Idempotent[K, T, E]:
        return replace(self, _store=s)

    def policy(self, p: Policy) -> Idempotent[K, T, E]:
        return replace(self, _policy=p)

    def build(self) -> IdempotentExecutor[K, T, E]:
        if self._key_fn is None:
            raise ValueError("key() is required")
        return IdempotentExecutor(
            operation=self._operation,
            key_fn=self._key_fn,
            store=self._store if self._store is not None else MemoryStore(),
            policy=self._policy,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Idempotent Executor
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class IdempotentExecutor[K, T, E]:
    """
    Runs the operation at most once per key while its record lives.

    A completed record is replayed with from_cache=True. A failed run deletes
    its record so the same input can be retried.
    """

    operation: Callable[[K], LazyCoroResult[T, E]]
    key_fn: KeyFn[K]
    store: StoreAny
    policy: Policy

    def run(self, input_val: K) -> LazyCoroResult[IdempotencyResult[T], IdempotencyError[E]]:
        key = self.key_fn(input_val)

        async def execute() -> Result[IdempotencyResult[T], IdempotencyError[E]]:
            match await self.store.get(key):
                case Error(err):
                    return Error(_store_failure(err))
                case Ok(None):
                    return await self._execute(key, input_val)
                case Ok(record):
                    return await self._existing(key, record)

        return LazyCoroResult(execute)

    async def invalidate(self, input_val: K) -> bool:
        match await self.store.delete(self.key_fn(input_val)):
            case Ok(deleted):
                return deleted
            case Error(err):
                logger.warning("idempotency invalidate failed: %s", err.message)
                return False

    # ───────────────────────────────────────────────────────────────────────────

    async def _existing(
        self, key: str, record: IdempotencyRecord[T]
    ) -> Result[IdempotencyResult[T], IdempotencyError[E]]:
        if record.is_completed:
            logger.info("idempotency replay for %s", key)
            return Ok(IdempotencyResult(record.value, from_cache=True, key=key))

        return Error(IdempotencyError(IdempotencyErrorKind.CONFLICT, f"{key} is already running"))

    async def _execute(
        self, key: str, input_val: K
    ) -> Result[IdempotencyResult[T], IdempotencyError[E]]:
        match await self.store.set_pending(key, self.policy.result_ttl):
            case Error(err):
                return Error(_store_failure(err))
            case Ok(False):
                return await self._raced(key)
            case Ok(True):
                pass

        try:
            outcome = await self.operation(input_val)
        except Exception as exc:
            await self.store.delete(key)
            logger.exception("idempotent operation %s raised", key)
            return Error(IdempotencyError(IdempotencyErrorKind.EXECUTION, str(exc), exc))

        match outcome:
            case Ok(value):
                match await self.store.set_completed(key, value, self.policy.result_ttl):
                    case Error(err):
                        return Error(_store_failure(err))
                    case Ok(_):
                        return Ok(IdempotencyResult(value, from_cache=False, key=key))
            case Error(err):
                await self.store.delete(key)
                return Error(
                    IdempotencyError(IdempotencyErrorKind.EXECUTION, "operation returned Error", err)
                )

    async def _raced(self, key: str) -> Result[IdempotencyResult[T], IdempotencyError[E]]:
        match await self.store.get(key):
            case Ok(record) if record is not None:
                return await self._existing(key, record)
            case _:
                return Error(IdempotencyError(IdempotencyErrorKind.CONFLICT, f"race on {key}"))


def idempotent[K, T, E](
    operation: Callable[[K], LazyCoroResult[T, E]],
) -> Idempotent[K, T, E]:
    """
    Wrap an operation so repeated inputs replay the first result.

    Example:
        submit = (
            I.idempotent(lambda committing: service.create_order(committing.intent))
            .key(lambda committing: f"order:{committing.attempt}")
            .policy(I.Policy().with_ttl(hours=1))
            .build()
        )
        result = await submit.run(committing)
    """
    return Idempotent(_operation=operation)


__all__ = (
    "Idempotent",
    "IdempotentExecutor",
    "idempotent",
)
