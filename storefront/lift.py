"""
Lift — helpers for lifting values and remote calls into LazyCoroResult.

Re-exports from combinators.lift with storefront-specific additions.
"""

from __future__ import annotations

from collections.abc import Callable, Awaitable

from kungfu import LazyCoroResult

from combinators.lift import (
    pure,
    fail,
    from_result,
    catching_async,
)

from storefront.errors import TransportError


# ═══════════════════════════════════════════════════════════════════════════════
# Storefront-specific helpers
# ═══════════════════════════════════════════════════════════════════════════════

def transport[T](fn: Callable[[], Awaitable[T]]) -> LazyCoroResult[T, TransportError]:
    """
    Run a remote call, turning any exception into TransportError.

    Example:
        order = await transport(lambda: api.create_order(lines))
    """
    return catching_async(fn, on_error=TransportError.from_exception)


__all__ = (
    # From combinators.lift
    "pure",
    "fail",
    "from_result",
    "catching_async",
    # Storefront additions
    "transport",
)
