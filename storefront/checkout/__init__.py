"""
Checkout — reconcile selected cart lines against live stock and price.

Usage:
    from storefront import checkout as CO

    reconciler = CO.CheckoutReconciler(OptimisticCart(store, customer, remote_cart), oracle)

    match await reconciler.checkout(line_ids):
        case Ok(CO.Reviewing(result=result)) if result.can_commit:
            ...
        case Ok(CO.Reviewing(result=result)):
            print(CO.headline(result))
        case Error(e):
            print(e.message)

A line is available, insufficient or unavailable:

    CO.classify(requested=3, available_quantity=2)   # Verdict.INSUFFICIENT
    CO.classify(requested=3, available_quantity=0)   # Verdict.UNAVAILABLE
"""

from storefront.checkout._types import (
    LineRequest,
    OrderIntent,
    Verdict,
    classify,
    QuoteLine,
    ReconciliationResult,
    headline,
)
from storefront.checkout._state import (
    Idle,
    Validating,
    Reviewing,
    Committing,
    CheckoutState,
    revalidation_payload,
)
from storefront.checkout._reconciler import (
    PricingOracle,
    CheckoutReconciler,
)

__all__ = (
    # Types
    "LineRequest",
    "OrderIntent",
    "Verdict",
    "classify",
    "QuoteLine",
    "ReconciliationResult",
    "headline",
    # States
    "Idle",
    "Validating",
    "Reviewing",
    "Committing",
    "CheckoutState",
    "revalidation_payload",
    # Reconciler
    "PricingOracle",
    "CheckoutReconciler",
)
