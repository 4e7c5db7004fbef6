"""
Optimistic cart — local change first, remote call second, rollback on failure.

Each mutation is a two-step saga:

    step 1: mutate the local CartStore     (compensate: restore snapshot)
    step 2: tell the remote cart service   (no compensation)

If step 2 fails the snapshot comes back, so the display never drifts from
server truth.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Protocol

from kungfu import LazyCoroResult, Result, Ok, Error

from storefront import saga as S
from storefront import lift as L
from storefront._types import CustomerId, ItemId, LineId, SkuId
from storefront.errors import StorefrontError
from storefront.cart._types import CartLine
from storefront.cart._store import CartStore

logger = logging.getLogger(__name__)


class CartService(Protocol):
    """Remote cart of the authenticated customer."""

    def add_item(self, item_id: ItemId, sku_id: SkuId, quantity: int) -> LazyCoroResult[None, StorefrontError]:
        ...

    def update_quantity(self, sku_id: SkuId, quantity: int) -> LazyCoroResult[None, StorefrontError]:
        ...

    def remove_item(self, sku_id: SkuId) -> LazyCoroResult[None, StorefrontError]:
        ...


class OptimisticCart:
    """
    Cart of one customer, mirrored to a remote service.

    Example:
        cart = OptimisticCart(store, "c1", client.session(token))
        match await cart.set_quantity(line_id, 3):
            case Error(e):
                show(e.message)   # local state already rolled back
    """

    def __init__(self, store: CartStore, customer: CustomerId, service: CartService) -> None:
        self._store = store
        self._customer = customer
        self._service = service

    @property
    def store(self) -> CartStore:
        return self._store

    @property
    def customer(self) -> CustomerId:
        return self._customer

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return self._store.lines(self._customer)

    async def _sync(
        self,
        action: str,
        mutate: Callable[[], Result[CartLine, StorefrontError]],
        remote: Callable[[CartLine], LazyCoroResult[None, StorefrontError]],
    ) -> Result[CartLine, StorefrontError]:
        store, customer = self._store, self._customer
        snapshot = store.snapshot(customer)

        async def restore(_: CartLine) -> None:
            store.restore(customer, snapshot)

        chain = S.step(L.from_result(mutate()), compensate=restore).then(
            lambda line: S.step(
                L.transport(lambda: remote(line)).then(L.from_result).map(lambda _: line)
            )
        )

        match await S.run_chain(chain):
            case Ok(done):
                return Ok(done.value)
            case Error(failure):
                if failure.step_failed == 2:
                    logger.warning(
                        "cart %s: %s rolled back: %s", customer, action, failure.error.message
                    )
                return Error(failure.error)

    async def add(self, item_id: ItemId, sku_id: SkuId, quantity: int) -> Result[CartLine, StorefrontError]:
        return await self._sync(
            "add",
            lambda: self._store.add(self._customer, item_id, sku_id, quantity),
            lambda _: self._service.add_item(item_id, sku_id, quantity),
        )

    async def set_quantity(self, line_id: LineId, quantity: int) -> Result[CartLine, StorefrontError]:
        return await self._sync(
            "set quantity",
            lambda: self._store.set_quantity(self._customer, line_id, quantity),
            lambda line: self._service.update_quantity(line.sku_id, line.quantity),
        )

    async def increment_quantity(self, line_id: LineId, delta: int) -> Result[CartLine, StorefrontError]:
        return await self._sync(
            "increment",
            lambda: self._store.increment_quantity(self._customer, line_id, delta),
            lambda line: self._service.update_quantity(line.sku_id, line.quantity),
        )

    async def remove(self, line_id: LineId) -> Result[CartLine, StorefrontError]:
        return await self._sync(
            "remove",
            lambda: self._store.remove(self._customer, line_id),
            lambda line: self._service.remove_item(line.sku_id),
        )

    async def remove_skus(self, sku_ids: Iterable[SkuId]) -> Result[tuple[CartLine, ...], StorefrontError]:
        """
        Remove every line carrying one of sku_ids, one remote call per line.

        Stops at the first failed call; lines removed before it stay removed.
        """
        wanted = set(sku_ids)
        removed: list[CartLine] = []
        for line in self.lines:
            if line.sku_id not in wanted:
                continue
            match await self.remove(line.line_id):
                case Ok(gone):
                    removed.append(gone)
                case Error(e):
                    return Error(e)
        return Ok(tuple(removed))


__all__ = ("CartService", "OptimisticCart")
