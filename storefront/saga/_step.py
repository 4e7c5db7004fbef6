"""
Saga step creation.
"""

from __future__ import annotations

from kungfu import LazyCoroResult

from storefront.saga._types import SagaStep, Compensator


def step[T, E](
    action: LazyCoroResult[T, E],
    compensate: Compensator[T] | None = None,
) -> SagaStep[T, E]:
    """
    Create a compensated step.

    Example:
        S.step(
            action=L.pure(store.snapshot(customer)),
            compensate=lambda snapshot: restore(snapshot),
        )
    """
    return SagaStep(action=action, compensate=compensate)


__all__ = ("step",)
