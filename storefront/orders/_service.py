"""
Order service protocol and an in-process implementation.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Protocol

from kungfu import LazyCoroResult

from storefront import lift as L
from storefront._types import CustomerId, SkuId
from storefront.checkout import OrderIntent
from storefront.errors import StorefrontError, ValidationError
from storefront.orders._types import OrderStatus, PlacedOrder, OrderQuery, OrderPage, paginate

logger = logging.getLogger(__name__)


class OrderService(Protocol):
    def create_order(self, intent: OrderIntent) -> LazyCoroResult[PlacedOrder, StorefrontError]: ...

    def list_orders(self, query: OrderQuery) -> LazyCoroResult[OrderPage, StorefrontError]: ...


class MemoryOrderService:
    """
    Keeps orders in a list, numbering them SO000001 upwards.

    Totals are priced from the given SKU price table when every SKU is known.
    """

    def __init__(self, customer: CustomerId = "", prices: Mapping[SkuId, Decimal] | None = None) -> None:
        self.customer = customer
        self.orders: list[PlacedOrder] = []
        self._prices = dict(prices or {})
        self._numbers = itertools.count(1)

    def _total(self, intent: OrderIntent) -> Decimal | None:
        if not all(line.sku_id in self._prices for line in intent.lines):
            return None
        return sum((self._prices[line.sku_id] * line.quantity for line in intent.lines), Decimal(0))

    def create_order(self, intent: OrderIntent) -> LazyCoroResult[PlacedOrder, StorefrontError]:
        if not intent.lines:
            return L.fail(ValidationError("an order needs at least one line"))

        order = PlacedOrder(
            number=f"SO{next(self._numbers):06d}",
            status=OrderStatus.PENDING,
            lines=intent.lines,
            total=self._total(intent),
        )
        self.orders.append(order)
        logger.debug("memory order %s created with %d line(s)", order.number, len(order.lines))
        return L.pure(order)

    def list_orders(self, query: OrderQuery) -> LazyCoroResult[OrderPage, StorefrontError]:
        return L.pure(paginate(self.orders, query))


__all__ = (
    "OrderService",
    "MemoryOrderService",
)
