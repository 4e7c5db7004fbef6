"""
Core types for storefront.

Re-exports from kungfu/combinators + identifier aliases shared by every layer.
"""

from __future__ import annotations

from kungfu import Result, Ok, Error, Option, Some, Nothing, LazyCoroResult
from combinators import LCR

# ═══════════════════════════════════════════════════════════════════════════════
# Lazy Computation Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Lazy[T, E] = LazyCoroResult[T, E]
"""Lazy async computation that may fail."""

type Fallible[T, E] = Result[T, E]
"""Already computed outcome of a synchronous operation."""

# ═══════════════════════════════════════════════════════════════════════════════
# Identifiers
# ═══════════════════════════════════════════════════════════════════════════════

# Marketplace ids travel as decimal strings; they are never added or compared numerically.
type ItemId = str
type SkuId = str
type LineId = str
type CustomerId = str
type OrderNumber = str

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "Option",
    "Some",
    "Nothing",
    "LazyCoroResult",
    # Re-exports from combinators
    "LCR",
    # Aliases
    "Lazy",
    "Fallible",
    "ItemId",
    "SkuId",
    "LineId",
    "CustomerId",
    "OrderNumber",
)
