"""
Orders — commit a reconciled checkout and browse placed orders.

Usage:
    from storefront import orders as O

    committer = O.OrderCommitter(reconciler, client.session(token))
    placed = await committer.commit()

    page = O.paginate(history, O.OrderQuery(page=2, status=O.OrderStatus.SHIPPING))
"""

from storefront.orders._types import (
    OrderStatus,
    SortField,
    PlacedOrder,
    OrderQuery,
    OrderPage,
    paginate,
)
from storefront.orders._service import OrderService, MemoryOrderService
from storefront.orders._committer import OrderCommitter

__all__ = (
    # Model
    "OrderStatus",
    "SortField",
    "PlacedOrder",
    "OrderQuery",
    "OrderPage",
    "paginate",
    # Service
    "OrderService",
    "MemoryOrderService",
    # Committer
    "OrderCommitter",
)
