"""
Checkout states. Each variant carries only the data valid in that state.

    Idle ──checkout──▶ Validating ──ok──▶ Reviewing ──begin_commit──▶ Committing
     ▲                    │  ▲                │                          │
     └──────error─────────┘  └──revalidate────┘◀────────abort────────────┘
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from storefront._types import SkuId
from storefront.checkout._types import LineRequest, OrderIntent, ReconciliationResult


@dataclass(frozen=True, slots=True)
class Idle:
    notice: str | None = None


@dataclass(frozen=True, slots=True)
class Validating:
    request: tuple[LineRequest, ...]


@dataclass(frozen=True, slots=True)
class Reviewing:
    """
    The latest reconciliation plus locally pending quantity adjustments.

    Adjustments apply to insufficient lines only and are sent on the next
    re-validation; a zero adjustment drops the line from that request.

    attempt is set once an order submission has been tried from this review,
    so retrying it reaches the same order.
    """

    result: ReconciliationResult
    adjustments: tuple[tuple[SkuId, int], ...] = ()
    notice: str | None = None
    attempt: str | None = None

    def adjusted(self, sku_id: SkuId) -> int | None:
        return dict(self.adjustments).get(sku_id)

    def with_adjustment(self, sku_id: SkuId, quantity: int) -> Reviewing:
        pending = dict(self.adjustments)
        pending[sku_id] = quantity
        return replace(self, adjustments=tuple(pending.items()), notice=None)


@dataclass(frozen=True, slots=True)
class Committing:
    intent: OrderIntent
    result: ReconciliationResult
    attempt: str


type CheckoutState = Idle | Validating | Reviewing | Committing


def revalidation_payload(reviewing: Reviewing) -> tuple[LineRequest, ...]:
    """Available lines as requested, plus insufficient lines still carrying a quantity."""
    payload = [LineRequest(line.sku_id, line.requested) for line in reviewing.result.available]
    for line in reviewing.result.insufficient:
        quantity = reviewing.adjusted(line.sku_id)
        if quantity is None:
            quantity = line.requested
        if quantity > 0:
            payload.append(LineRequest(line.sku_id, quantity))
    return tuple(payload)


__all__ = (
    "Idle",
    "Validating",
    "Reviewing",
    "Committing",
    "CheckoutState",
    "revalidation_payload",
)
