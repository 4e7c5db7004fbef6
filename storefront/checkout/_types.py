"""
Checkout types — line requests, verdicts and the reconciliation result.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum

from storefront._types import ItemId, SkuId

# ═══════════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class LineRequest:
    """A SKU and the quantity asked of the stock/price oracle."""

    sku_id: SkuId
    quantity: int


@dataclass(frozen=True, slots=True)
class OrderIntent:
    """The exact lines confirmed by the last clean reconciliation."""

    lines: tuple[LineRequest, ...]

    @property
    def sku_ids(self) -> tuple[SkuId, ...]:
        return tuple(line.sku_id for line in self.lines)


# ═══════════════════════════════════════════════════════════════════════════════
# Verdicts
# ═══════════════════════════════════════════════════════════════════════════════


class Verdict(Enum):
    AVAILABLE = "available"
    INSUFFICIENT = "insufficient"
    UNAVAILABLE = "unavailable"


def classify(requested: int, available_quantity: int | None, is_available: bool = False) -> Verdict:
    """
    Verdict for one line.

    is_available means the oracle confirmed the full quantity. Otherwise a
    missing or zero available quantity is unavailable, a quantity covering
    the request is available, and anything strictly lower is insufficient.
    """
    if is_available:
        return Verdict.AVAILABLE
    if not available_quantity or available_quantity <= 0:
        return Verdict.UNAVAILABLE
    if available_quantity >= requested:
        return Verdict.AVAILABLE
    return Verdict.INSUFFICIENT


# ═══════════════════════════════════════════════════════════════════════════════
# Reconciliation Result
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class QuoteLine:
    """Oracle answer for one requested line."""

    sku_id: SkuId
    requested: int
    available_quantity: int | None
    is_available: bool = False
    unit_price: Decimal = Decimal(0)
    promotion_price: Decimal | None = None
    subtotal: Decimal = Decimal(0)
    item_id: ItemId = ""
    title: str = ""
    reason: str | None = None

    @property
    def verdict(self) -> Verdict:
        return classify(self.requested, self.available_quantity, self.is_available)


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    """
    Verdict per requested line plus the shipping fee for the quote.

    Recomputed on every validation pass; never persisted.
    """

    lines: tuple[QuoteLine, ...]
    shipping_fee: Decimal = Decimal(0)

    def _bucket(self, verdict: Verdict) -> tuple[QuoteLine, ...]:
        return tuple(line for line in self.lines if line.verdict is verdict)

    @property
    def available(self) -> tuple[QuoteLine, ...]:
        return self._bucket(Verdict.AVAILABLE)

    @property
    def insufficient(self) -> tuple[QuoteLine, ...]:
        return self._bucket(Verdict.INSUFFICIENT)

    @property
    def unavailable(self) -> tuple[QuoteLine, ...]:
        return self._bucket(Verdict.UNAVAILABLE)

    @property
    def total(self) -> Decimal:
        """Subtotal of available lines plus shipping."""
        return sum((line.subtotal for line in self.available), Decimal(0)) + self.shipping_fee

    @property
    def can_commit(self) -> bool:
        return bool(self.available) and not self.insufficient and not self.unavailable

    def line(self, sku_id: SkuId) -> QuoteLine | None:
        return next((line for line in self.lines if line.sku_id == sku_id), None)

    def without(self, sku_ids: Iterable[SkuId]) -> ReconciliationResult:
        dropped = set(sku_ids)
        return replace(self, lines=tuple(line for line in self.lines if line.sku_id not in dropped))


def headline(result: ReconciliationResult) -> str:
    """One-line summary for the review screen."""
    parts: list[str] = []
    if result.insufficient:
        parts.append(f"{len(result.insufficient)} item(s) have insufficient stock")
    if result.unavailable:
        parts.append(f"{len(result.unavailable)} item(s) unavailable")
    return ", ".join(parts) if parts else "All items available"


__all__ = (
    "LineRequest",
    "OrderIntent",
    "Verdict",
    "classify",
    "QuoteLine",
    "ReconciliationResult",
    "headline",
)
