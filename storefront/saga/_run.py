"""
Saga execution with automatic rollback.
"""

from __future__ import annotations

import logging

from kungfu import Result, Ok, Error

from storefront.saga._types import (
    SagaStep,
    SagaResult,
    SagaError,
    Then,
    Compensator,
)

logger = logging.getLogger(__name__)

type RecordedCompensator[T] = tuple[T, Compensator[T]]


async def run_step[T, E](
    step: SagaStep[T, E],
    compensators: list[RecordedCompensator[T]],
) -> Result[T, E]:
    """Execute single step, recording compensator on success."""
    result = await step.action
    match result:
        case Ok(value):
            if step.compensate is not None:
                compensators.append((value, step.compensate))
            return Ok(value)
        case Error(e):
            return Error(e)


async def run_compensators[T](
    compensators: list[RecordedCompensator[T]],
) -> tuple[int, int]:
    """Run compensators in reverse. Returns (run, failed)."""
    comp_run = 0
    comp_failed = 0

    for value, comp in reversed(compensators):
        try:
            await comp(value)
            comp_run += 1
        except Exception:
            logger.exception("compensator failed during rollback")
            comp_failed += 1

    return comp_run, comp_failed


async def run_chain[T, U, E, E2](
    chain: Then[T, U, E, E2],
) -> Result[SagaResult[U], SagaError[E | E2]]:
    """
    Execute two chained steps.

    If the second step fails, the first step's compensator runs.

    Example:
        result = await S.run_chain(
            S.step(local_change, compensate=undo_local).then(lambda _: S.step(remote_call))
        )
        match result:
            case Error(e):
                print(f"rolled back: {e.rollback_complete}")
    """
    compensators_t: list[RecordedCompensator[T]] = []
    compensators_u: list[RecordedCompensator[U]] = []

    match await run_step(chain.inner, compensators_t):
        case Error(e):
            return Error(SagaError(e, step_failed=1, compensators_run=0, compensators_failed=0))
        case Ok(value):
            pass

    match await run_step(chain.f(value), compensators_u):
        case Ok(final_value):
            return Ok(SagaResult(value=final_value, steps_executed=2))
        case Error(e2):
            comp_run1, comp_failed1 = await run_compensators(compensators_u)
            comp_run2, comp_failed2 = await run_compensators(compensators_t)
            logger.warning(
                "saga rolled back after step 2 (%d compensators, %d failed)",
                comp_run1 + comp_run2 + comp_failed1 + comp_failed2,
                comp_failed1 + comp_failed2,
            )
            return Error(SagaError(
                error=e2,
                step_failed=2,
                compensators_run=comp_run1 + comp_run2,
                compensators_failed=comp_failed1 + comp_failed2,
            ))


__all__ = ("run_chain",)
