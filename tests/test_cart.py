from decimal import Decimal

from kungfu import Ok, Error

from storefront import cart as Cart
from storefront.errors import NotFoundError, TransportError, ValidationError


# ═══════════════════════════════════════════════════════════════════════════════
# CartStore
# ═══════════════════════════════════════════════════════════════════════════════


def test_adding_same_sku_sums_quantities(store):
    first = store.add("c1", "10", "77", 2).unwrap()
    second = store.add("c1", "10", "77", 3).unwrap()

    assert second.line_id == first.line_id
    assert second.quantity == 5
    assert len(store.lines("c1")) == 1


def test_add_rejects_non_positive_quantity(store):
    assert store.add("c1", "10", "77", 0) == Error(ValidationError("quantity must be at least 1"))
    assert store.lines("c1") == ()


def test_carts_are_per_customer(store):
    store.add("c1", "10", "77", 1)
    store.add("c2", "10", "77", 4)

    assert [line.quantity for line in store.lines("c1")] == [1]
    assert [line.quantity for line in store.lines("c2")] == [4]
    assert store.lines("nobody") == ()


def test_set_quantity(store):
    line = store.add("c1", "10", "77", 1).unwrap()

    assert store.set_quantity("c1", line.line_id, 4).unwrap().quantity == 4
    assert store.set_quantity("c1", line.line_id, 0) == Error(ValidationError("quantity must be at least 1"))
    assert store.set_quantity("c1", "missing", 2) == Error(NotFoundError("cart line", "missing"))
    assert store.get("c1", line.line_id).unwrap().quantity == 4


def test_increment_never_drops_below_one(store):
    line = store.add("c1", "10", "77", 2).unwrap()

    assert store.increment_quantity("c1", line.line_id, 3).unwrap().quantity == 5
    assert store.increment_quantity("c1", line.line_id, -10).unwrap().quantity == 1
    assert store.total_quantity("c1") == 1


def test_remove(store):
    line = store.add("c1", "10", "77", 2).unwrap()

    assert store.remove("c1", line.line_id) == Ok(line)
    assert store.remove("c1", line.line_id) == Error(NotFoundError("cart line", line.line_id))


def test_snapshot_and_restore(store):
    line = store.add("c1", "10", "a", 1).unwrap()
    snapshot = store.snapshot("c1")

    store.set_quantity("c1", line.line_id, 9)
    store.add("c1", "10", "b", 1)
    store.restore("c1", snapshot)

    assert store.lines("c1") == (line,)


def test_cart_total():
    lines = (
        Cart.CartLine("1", "c1", "10", "a", 2),
        Cart.CartLine("2", "c1", "10", "b", 1),
        Cart.CartLine("3", "c1", "10", "unpriced", 5),
    )

    assert Cart.cart_total(lines, {"a": Decimal("1.50"), "b": Decimal("4")}) == Decimal("7.00")


# ═══════════════════════════════════════════════════════════════════════════════
# MemoryCartRepository
# ═══════════════════════════════════════════════════════════════════════════════


async def test_memory_repository_addresses_lines_by_sku(store):
    repo = Cart.MemoryCartRepository(store)

    await repo.add("c1", "10", "77", 1)
    updated = await repo.set_quantity("c1", "77", 6)

    assert updated.unwrap().quantity == 6
    assert (await repo.lines("c1")).unwrap() == store.lines("c1")
    assert await repo.set_quantity("c1", "nope", 1) == Error(NotFoundError("cart line", "nope"))

    removed = await repo.remove("c1", "77")
    assert removed.unwrap().sku_id == "77"
    assert (await repo.lines("c1")).unwrap() == ()


# ═══════════════════════════════════════════════════════════════════════════════
# OptimisticCart
# ═══════════════════════════════════════════════════════════════════════════════


async def test_optimistic_add_reaches_remote(store, cart_service):
    cart = Cart.OptimisticCart(store, "c1", cart_service)

    result = await cart.add("10", "77", 2)

    assert result.unwrap().quantity == 2
    assert cart_service.calls == [("add", "10", "77", "2")]
    assert [line.sku_id for line in cart.lines] == ["77"]


async def test_optimistic_set_quantity_sends_new_quantity(store, cart_service):
    line = store.add("c1", "10", "77", 1).unwrap()
    cart = Cart.OptimisticCart(store, "c1", cart_service)

    await cart.set_quantity(line.line_id, 4)
    await cart.increment_quantity(line.line_id, -1)

    assert cart_service.calls == [("update", "77", "4"), ("update", "77", "3")]


async def test_remote_failure_rolls_back(store, cart_service, transport_down):
    line = store.add("c1", "10", "77", 2).unwrap()
    cart = Cart.OptimisticCart(store, "c1", cart_service)
    cart_service.failure = transport_down

    assert await cart.set_quantity(line.line_id, 5) == Error(transport_down)
    assert await cart.remove(line.line_id) == Error(transport_down)
    assert await cart.add("10", "88", 1) == Error(transport_down)

    assert store.lines("c1") == (line,)


async def test_remote_exception_becomes_transport_error(store):
    class Broken:
        def add_item(self, item_id, sku_id, quantity):
            raise ConnectionError("connection reset")

    cart = Cart.OptimisticCart(store, "c1", Broken())

    assert await cart.add("10", "77", 1) == Error(TransportError("connection reset"))
    assert store.lines("c1") == ()


async def test_local_rejection_never_calls_remote(store, cart_service):
    cart = Cart.OptimisticCart(store, "c1", cart_service)

    result = await cart.set_quantity("missing", 2)

    assert result == Error(NotFoundError("cart line", "missing"))
    assert cart_service.calls == []


async def test_remove_skus_removes_locally_and_remotely(store, cart, cart_service):
    store.add("c1", "10", "a", 1)
    store.add("c1", "10", "b", 1)
    store.add("c1", "11", "c", 1)

    removed = (await cart.remove_skus(["a", "c", "zzz"])).unwrap()

    assert sorted(line.sku_id for line in removed) == ["a", "c"]
    assert [line.sku_id for line in store.lines("c1")] == ["b"]
    assert sorted(cart_service.calls) == [("remove", "a"), ("remove", "c")]


async def test_remove_skus_stops_at_first_remote_failure(store, cart, cart_service, transport_down):
    a = store.add("c1", "10", "a", 1).unwrap()
    store.add("c1", "10", "b", 1)
    cart_service.failure = transport_down

    assert await cart.remove_skus(["a", "b"]) == Error(transport_down)
    assert store.find_sku("c1", "a") == a
    assert len(cart_service.calls) == 1
