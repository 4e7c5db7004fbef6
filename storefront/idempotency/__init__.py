"""
Idempotency — replay the result of an identical submission instead of running it twice.

Usage:
    from storefront import idempotency as I

    submit = (
        I.idempotent(lambda committing: create_order(committing.intent))
        .key(lambda committing: f"order:{committing.attempt}")
        .store(I.MemoryStore())
        .policy(I.Policy().with_ttl(hours=1))
        .build()
    )

    match await submit.run(committing):
        case Ok(I.IdempotencyResult(value=order, from_cache=replayed)):
            ...
        case Error(I.IdempotencyError(kind=I.IdempotencyErrorKind.CONFLICT)):
            ...
"""

from storefront.idempotency._types import (
    RecordState,
    IdempotencyRecord,
    IdempotencyResult,
    IdempotencyErrorKind,
    IdempotencyError,
)
from storefront.idempotency._policy import Policy
from storefront.idempotency._store import StoreError, Store, StoreAny, MemoryStore
from storefront.idempotency._builder import Idempotent, IdempotentExecutor, idempotent

__all__ = (
    # Types
    "RecordState",
    "IdempotencyRecord",
    "IdempotencyResult",
    "IdempotencyErrorKind",
    "IdempotencyError",
    # Policy
    "Policy",
    # Store
    "StoreError",
    "Store",
    "StoreAny",
    "MemoryStore",
    # Builder
    "Idempotent",
    "IdempotentExecutor",
    "idempotent",
)
