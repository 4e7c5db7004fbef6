"""
Saga — steps with compensation.

    from storefront import saga as S

    chain = S.step(local, compensate=undo).then(lambda _: S.step(remote_call))
    result = await S.run_chain(chain)
"""

from __future__ import annotations

from storefront.saga._types import (
    Compensator,
    SagaStep,
    SagaResult,
    SagaError,
    Then,
)
from storefront.saga._step import step
from storefront.saga._run import run_chain

__all__ = (
    "Compensator",
    "SagaStep",
    "SagaResult",
    "SagaError",
    "Then",
    "step",
    "run_chain",
)
