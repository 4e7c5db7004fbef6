"""
Checkout reconciler — validates selected cart lines against live stock and price.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from dataclasses import replace
from typing import Protocol

from kungfu import Result, Ok, Error, LazyCoroResult

from storefront import lift as L
from storefront._types import CustomerId, LineId, SkuId
from storefront.cart import CartLine, CartStore, OptimisticCart
from storefront.errors import NotFoundError, StorefrontError, ValidationError
from storefront.checkout._types import LineRequest, OrderIntent, ReconciliationResult, Verdict
from storefront.checkout._state import (
    CheckoutState,
    Committing,
    Idle,
    Reviewing,
    Validating,
    revalidation_payload,
)

logger = logging.getLogger(__name__)


class PricingOracle(Protocol):
    """Remote service quoting stock and price for a set of lines."""

    def render_order(
        self, lines: tuple[LineRequest, ...]
    ) -> LazyCoroResult[ReconciliationResult, StorefrontError]: ...


class CheckoutReconciler:
    """
    Drives one customer's checkout through Idle, Validating, Reviewing and Committing.

    Cart writes made during review go through the optimistic cart, so the
    remote cart follows every adjustment and every dropped line.

    Example:
        reconciler = CheckoutReconciler(OptimisticCart(store, "c1", session), session)
        await reconciler.checkout(["1", "2"])
        reconciler.use_max("sku-b")
        await reconciler.revalidate()
    """

    def __init__(self, cart: OptimisticCart, oracle: PricingOracle) -> None:
        self._cart = cart
        self._oracle = oracle
        self._state: CheckoutState = Idle()

    @property
    def state(self) -> CheckoutState:
        return self._state

    @property
    def cart(self) -> OptimisticCart:
        return self._cart

    @property
    def store(self) -> CartStore:
        return self._cart.store

    @property
    def customer(self) -> CustomerId:
        return self._cart.customer

    # ───────────────────────────────────────────────────────────────────────────
    # Validation
    # ───────────────────────────────────────────────────────────────────────────

    async def checkout(self, line_ids: Iterable[LineId]) -> Result[Reviewing, StorefrontError]:
        match self._state:
            case Idle() | Reviewing() as stable:
                pass
            case Validating():
                return Error(ValidationError("validation already in progress"))
            case Committing():
                return Error(ValidationError("order submission in progress"))

        request: list[LineRequest] = []
        for line_id in dict.fromkeys(line_ids):
            match self.store.get(self.customer, line_id):
                case Ok(line):
                    request.append(LineRequest(line.sku_id, line.quantity))
                case Error(e):
                    return Error(e)

        if not request:
            return Error(ValidationError("select at least one cart line"))

        return await self._validate(tuple(request), fallback=stable)

    async def revalidate(self) -> Result[Reviewing, StorefrontError]:
        """Write adjustments back to the cart and validate the remaining lines again."""
        match self._reviewing():
            case Ok(reviewing):
                pass
            case Error(e):
                return Error(e)

        payload = revalidation_payload(reviewing)
        if not payload:
            return Error(ValidationError("no lines left to validate"))

        self._state = Validating(payload)
        for sku_id, quantity in reviewing.adjustments:
            line = self.store.find_sku(self.customer, sku_id)
            if quantity == 0 or line is None or line.quantity == quantity:
                continue
            match await self._cart.set_quantity(line.line_id, quantity):
                case Ok(_):
                    pass
                case Error(e):
                    logger.warning("checkout %s: adjustment of %s not saved: %s", self.customer, sku_id, e.message)
                    self._state = replace(reviewing, notice=e.message)
                    return Error(e)

        return await self._validate(payload, fallback=reviewing)

    async def _validate(
        self,
        request: tuple[LineRequest, ...],
        fallback: Idle | Reviewing,
    ) -> Result[Reviewing, StorefrontError]:
        self._state = Validating(request)
        logger.debug("validating %d line(s) for %s", len(request), self.customer)

        outcome = await L.transport(lambda: self._oracle.render_order(request)).then(L.from_result)
        match outcome:
            case Ok(result):
                self._state = Reviewing(result)
                logger.info(
                    "checkout %s: %d available, %d insufficient, %d unavailable",
                    self.customer,
                    len(result.available),
                    len(result.insufficient),
                    len(result.unavailable),
                )
                return Ok(self._state)
            case Error(e):
                logger.warning("checkout validation failed for %s: %s", self.customer, e.message)
                self._state = replace(fallback, notice=e.message)
                return Error(e)

    # ───────────────────────────────────────────────────────────────────────────
    # Review
    # ───────────────────────────────────────────────────────────────────────────

    def _reviewing(self) -> Result[Reviewing, ValidationError]:
        if isinstance(self._state, Reviewing):
            return Ok(self._state)
        return Error(ValidationError("no reconciliation under review"))

    def adjust(self, sku_id: SkuId, quantity: int) -> Result[Reviewing, StorefrontError]:
        """Stage a quantity for an insufficient line, clamped to [0, available]."""
        match self._reviewing():
            case Ok(reviewing):
                pass
            case Error(e):
                return Error(e)

        line = reviewing.result.line(sku_id)
        if line is None:
            return Error(NotFoundError("quote line", sku_id))
        if line.verdict is not Verdict.INSUFFICIENT:
            return Error(ValidationError(f"sku {sku_id} is not short on stock"))

        clamped = max(0, min(quantity, line.available_quantity or 0))
        self._state = reviewing.with_adjustment(sku_id, clamped)
        return Ok(self._state)

    def use_max(self, sku_id: SkuId) -> Result[Reviewing, StorefrontError]:
        match self._reviewing():
            case Ok(reviewing):
                line = reviewing.result.line(sku_id)
                if line is None:
                    return Error(NotFoundError("quote line", sku_id))
                return self.adjust(sku_id, line.available_quantity or 0)
            case Error(e):
                return Error(e)

    async def drop_unavailable(self) -> Result[tuple[CartLine, ...], StorefrontError]:
        """Remove unavailable lines from the cart, local and remote, and from the review."""
        match self._reviewing():
            case Ok(reviewing):
                pass
            case Error(e):
                return Error(e)

        sku_ids = {line.sku_id for line in reviewing.result.unavailable}
        match await self._cart.remove_skus(sku_ids):
            case Ok(removed):
                pass
            case Error(e):
                logger.warning("checkout %s: dropping unavailable lines failed: %s", self.customer, e.message)
                self._state = replace(reviewing, notice=e.message)
                return Error(e)

        self._state = Reviewing(
            reviewing.result.without(sku_ids),
            tuple((sku, qty) for sku, qty in reviewing.adjustments if sku not in sku_ids),
        )
        logger.info("checkout %s: dropped %d unavailable line(s)", self.customer, len(removed))
        return Ok(removed)

    def reset(self) -> Result[Idle, ValidationError]:
        match self._state:
            case Validating() | Committing():
                return Error(ValidationError("checkout is busy"))
            case _:
                self._state = Idle()
                return Ok(self._state)

    # ───────────────────────────────────────────────────────────────────────────
    # Commit hand-off
    # ───────────────────────────────────────────────────────────────────────────

    def begin_commit(self) -> Result[Committing, ValidationError]:
        """
        Freeze the available lines as an order intent.

        The first submission from a review gets a fresh attempt token; retries
        after abort_commit reuse it.
        """
        match self._reviewing():
            case Ok(reviewing):
                pass
            case Error(e):
                return Error(e)

        if reviewing.adjustments:
            return Error(ValidationError("re-validate adjusted quantities before ordering"))
        if not reviewing.result.can_commit:
            return Error(ValidationError("every line must be available before ordering"))

        intent = OrderIntent(
            tuple(LineRequest(line.sku_id, line.requested) for line in reviewing.result.available)
        )
        attempt = reviewing.attempt or uuid.uuid4().hex
        self._state = Committing(intent, reviewing.result, attempt)
        return Ok(self._state)

    def complete_commit(self) -> Result[Idle, ValidationError]:
        if not isinstance(self._state, Committing):
            return Error(ValidationError("no order submission in progress"))
        self._state = Idle()
        return Ok(self._state)

    def abort_commit(self, notice: str | None = None) -> Result[Reviewing, ValidationError]:
        """Return to the review the failed submission started from."""
        if not isinstance(self._state, Committing):
            return Error(ValidationError("no order submission in progress"))
        self._state = Reviewing(self._state.result, notice=notice, attempt=self._state.attempt)
        return Ok(self._state)


__all__ = (
    "PricingOracle",
    "CheckoutReconciler",
)
