"""
Order committer — submits the last clean reconciliation as an order.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from kungfu import Result, Ok, Error

from storefront import idempotency as I
from storefront.checkout import CheckoutReconciler, Committing
from storefront.config import Settings
from storefront.errors import StorefrontError, TransportError, ValidationError
from storefront.orders._types import PlacedOrder
from storefront.orders._service import OrderService

logger = logging.getLogger(__name__)


def _storefront_error(err: I.IdempotencyError) -> StorefrontError:
    match err:
        case I.IdempotencyError(kind=I.IdempotencyErrorKind.EXECUTION, original_error=Exception() as exc):
            return TransportError.from_exception(exc)
        case I.IdempotencyError(kind=I.IdempotencyErrorKind.EXECUTION, original_error=original) if original is not None:
            return original
        case I.IdempotencyError(kind=I.IdempotencyErrorKind.CONFLICT):
            return ValidationError("this order is already being submitted")
        case _:
            return TransportError(err.message)


class OrderCommitter:
    """
    Places the order for a reconciler sitting in Reviewing with a clean result.

    Each checkout attempt is submitted at most once: retrying a failed commit
    from the same review returns the order a lost response already created,
    while a new checkout of the same lines places a new order.

    Example:
        committer = OrderCommitter(reconciler, orders)
        match await committer.commit():
            case Ok(order):
                print(order.number)
            case Error(e):
                print(e.message)    # reconciler is back in Reviewing
    """

    def __init__(
        self,
        reconciler: CheckoutReconciler,
        service: OrderService,
        store: I.StoreAny | None = None,
        ttl: timedelta = timedelta(hours=1),
    ) -> None:
        customer = reconciler.customer
        self._reconciler = reconciler
        self._submit = (
            I.idempotent(lambda committing: service.create_order(committing.intent))
            .key(lambda committing: f"order:{customer}:{committing.attempt}")
            .store(store if store is not None else I.MemoryStore[PlacedOrder]())
            .policy(I.Policy().with_ttl(delta=ttl))
            .build()
        )

    @classmethod
    def from_settings(
        cls,
        reconciler: CheckoutReconciler,
        service: OrderService,
        settings: Settings,
        store: I.StoreAny | None = None,
    ) -> OrderCommitter:
        return cls(reconciler, service, store, ttl=settings.order_ttl)

    async def commit(self) -> Result[PlacedOrder, StorefrontError]:
        match self._reconciler.begin_commit():
            case Ok(committing):
                pass
            case Error(e):
                return Error(e)

        match await self._submit.run(committing):
            case Ok(submitted):
                order = submitted.value
                await self._clear(committing)
                self._reconciler.complete_commit()
                logger.info(
                    "order %s placed for %s (%d line(s)%s)",
                    order.number,
                    self._reconciler.customer,
                    len(committing.intent.lines),
                    ", replayed" if submitted.from_cache else "",
                )
                return Ok(order)
            case Error(err):
                error = _storefront_error(err)
                logger.warning("order submission failed for %s: %s", self._reconciler.customer, error.message)
                self._reconciler.abort_commit(error.message)
                return Error(error)

    async def _clear(self, committing: Committing) -> None:
        match await self._reconciler.cart.remove_skus(committing.intent.sku_ids):
            case Ok(_):
                pass
            case Error(e):
                # the order stands; the lines that could not be removed stay in the cart
                logger.warning(
                    "order placed for %s but clearing the cart failed: %s",
                    self._reconciler.customer,
                    e.message,
                )


__all__ = ("OrderCommitter",)
