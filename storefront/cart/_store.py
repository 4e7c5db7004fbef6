"""
Cart store — synchronous, single owner per customer.

Lines are keyed by (customer, SKU): adding a SKU already in the cart sums
quantities. Last writer wins.
"""

from __future__ import annotations

import itertools
import logging

from kungfu import Result, Ok, Error

from storefront._types import CustomerId, ItemId, LineId, SkuId
from storefront.errors import NotFoundError, ValidationError
from storefront.cart._types import CartLine, CartSnapshot

logger = logging.getLogger(__name__)


class CartStore:
    """
    In-memory cart lines per customer.

    Example:
        store = CartStore()
        line = store.add("c1", item_id="10", sku_id="77", quantity=2).unwrap()
        store.increment_quantity("c1", line.line_id, -5)   # clamps to 1
    """

    def __init__(self) -> None:
        self._carts: dict[CustomerId, dict[LineId, CartLine]] = {}
        self._ids = itertools.count(1)

    def _cart(self, customer: CustomerId) -> dict[LineId, CartLine]:
        return self._carts.setdefault(customer, {})

    # ───────────────────────────────────────────────────────────────────────────
    # Reads
    # ───────────────────────────────────────────────────────────────────────────

    def lines(self, customer: CustomerId) -> tuple[CartLine, ...]:
        return tuple(self._carts.get(customer, {}).values())

    def get(self, customer: CustomerId, line_id: LineId) -> Result[CartLine, NotFoundError]:
        line = self._carts.get(customer, {}).get(line_id)
        if line is None:
            return Error(NotFoundError("cart line", line_id))
        return Ok(line)

    def find_sku(self, customer: CustomerId, sku_id: SkuId) -> CartLine | None:
        return next((line for line in self.lines(customer) if line.sku_id == sku_id), None)

    def total_quantity(self, customer: CustomerId) -> int:
        return sum(line.quantity for line in self.lines(customer))

    # ───────────────────────────────────────────────────────────────────────────
    # Mutations
    # ───────────────────────────────────────────────────────────────────────────

    def add(
        self,
        customer: CustomerId,
        item_id: ItemId,
        sku_id: SkuId,
        quantity: int,
    ) -> Result[CartLine, ValidationError]:
        """Merge into the customer's line for sku_id, or open a new line."""
        if quantity < 1:
            return Error(ValidationError("quantity must be at least 1"))

        cart = self._cart(customer)
        existing = self.find_sku(customer, sku_id)
        if existing is not None:
            line = existing.with_quantity(existing.quantity + quantity)
        else:
            line = CartLine(str(next(self._ids)), customer, item_id, sku_id, quantity)

        cart[line.line_id] = line
        logger.debug("cart %s: sku %s now x%d", customer, sku_id, line.quantity)
        return Ok(line)

    def set_quantity(
        self,
        customer: CustomerId,
        line_id: LineId,
        quantity: int,
    ) -> Result[CartLine, NotFoundError | ValidationError]:
        if quantity < 1:
            return Error(ValidationError("quantity must be at least 1"))

        match self.get(customer, line_id):
            case Ok(line):
                updated = self._cart(customer)[line_id] = line.with_quantity(quantity)
                return Ok(updated)
            case Error(e):
                return Error(e)

    def increment_quantity(
        self,
        customer: CustomerId,
        line_id: LineId,
        delta: int,
    ) -> Result[CartLine, NotFoundError]:
        """Add delta; the result never drops below 1 (removal is explicit)."""
        match self.get(customer, line_id):
            case Ok(line):
                quantity = max(1, line.quantity + delta)
                updated = self._cart(customer)[line_id] = line.with_quantity(quantity)
                return Ok(updated)
            case Error(e):
                return Error(e)

    def remove(self, customer: CustomerId, line_id: LineId) -> Result[CartLine, NotFoundError]:
        line = self._carts.get(customer, {}).pop(line_id, None)
        if line is None:
            return Error(NotFoundError("cart line", line_id))
        logger.debug("cart %s: removed line %s", customer, line_id)
        return Ok(line)

    # ───────────────────────────────────────────────────────────────────────────
    # Snapshots — optimistic rollback
    # ───────────────────────────────────────────────────────────────────────────

    def snapshot(self, customer: CustomerId) -> CartSnapshot:
        return self.lines(customer)

    def restore(self, customer: CustomerId, snapshot: CartSnapshot) -> None:
        self._carts[customer] = {line.line_id: line for line in snapshot}


__all__ = ("CartStore",)
