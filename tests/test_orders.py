from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from kungfu import Error

from storefront import idempotency as I
from storefront import lift as L
from storefront import orders as O
from storefront.checkout import CheckoutReconciler, Idle, LineRequest, OrderIntent, Reviewing
from storefront.config import Settings
from storefront.errors import TransportError, ValidationError

from conftest import FakeOracle


@pytest.fixture
def oracle() -> FakeOracle:
    return FakeOracle(stock={"a": 5, "b": 5})


@pytest.fixture
def reconciler(cart, oracle) -> CheckoutReconciler:
    return CheckoutReconciler(cart, oracle)


@pytest.fixture
def service() -> O.MemoryOrderService:
    return O.MemoryOrderService("c1", prices={"a": Decimal("10"), "b": Decimal("2.5")})


async def reviewed(reconciler: CheckoutReconciler, store) -> None:
    a = store.add("c1", "10", "a", 2).unwrap()
    b = store.add("c1", "11", "b", 1).unwrap()
    store.add("c1", "12", "untouched", 1)
    (await reconciler.checkout([a.line_id, b.line_id])).unwrap()


class FailingOrders:
    def __init__(self, error) -> None:
        self.error = error
        self.calls = 0

    def create_order(self, intent):
        self.calls += 1
        return L.fail(self.error)


# ═══════════════════════════════════════════════════════════════════════════════
# OrderCommitter
# ═══════════════════════════════════════════════════════════════════════════════


async def test_commit_places_order_and_clears_ordered_lines(reconciler, store, service, cart_service):
    await reviewed(reconciler, store)
    committer = O.OrderCommitter(reconciler, service)

    order = (await committer.commit()).unwrap()

    assert order.number == "SO000001"
    assert order.status is O.OrderStatus.PENDING
    assert order.lines == (LineRequest("a", 2), LineRequest("b", 1))
    assert order.total == Decimal("22.5")
    assert [line.sku_id for line in store.lines("c1")] == ["untouched"]
    assert sorted(cart_service.calls) == [("remove", "a"), ("remove", "b")]
    assert reconciler.state == Idle()


async def test_failed_submission_returns_to_review(reconciler, store, transport_down):
    await reviewed(reconciler, store)
    committer = O.OrderCommitter(reconciler, FailingOrders(transport_down))

    assert await committer.commit() == Error(transport_down)

    state = reconciler.state
    assert isinstance(state, Reviewing)
    assert state.notice == "service unavailable"
    assert len(store.lines("c1")) == 3


async def test_failed_submission_can_be_retried(reconciler, store, transport_down):
    await reviewed(reconciler, store)
    orders = FailingOrders(transport_down)
    committer = O.OrderCommitter(reconciler, orders)

    await committer.commit()
    await committer.commit()

    assert orders.calls == 2


async def test_raising_service_becomes_transport_error(reconciler, store):
    class Exploding:
        def create_order(self, intent):
            raise ConnectionError("connection refused")

    await reviewed(reconciler, store)
    committer = O.OrderCommitter(reconciler, Exploding())

    assert await committer.commit() == Error(TransportError("connection refused"))
    assert isinstance(reconciler.state, Reviewing)


async def test_separate_checkouts_of_same_lines_place_two_orders(reconciler, store, service):
    committer = O.OrderCommitter(reconciler, service)

    await reviewed(reconciler, store)
    first = (await committer.commit()).unwrap()
    await reviewed(reconciler, store)
    second = (await committer.commit()).unwrap()

    assert (first.number, second.number) == ("SO000001", "SO000002")
    assert second.lines == first.lines
    assert len(service.orders) == 2
    assert [line.sku_id for line in store.lines("c1")] == ["untouched"]


async def test_retry_after_lost_response_replays_the_order(reconciler, store, service):
    memory = I.MemoryStore[O.PlacedOrder]()
    committer = O.OrderCommitter(reconciler, service, memory)
    await reviewed(reconciler, store)

    attempt = reconciler.begin_commit().unwrap().attempt
    reconciler.abort_commit("no response")
    placed_earlier = (await service.create_order(OrderIntent((LineRequest("a", 2), LineRequest("b", 1))))).unwrap()
    await memory.set_pending(f"order:c1:{attempt}", None)
    await memory.set_completed(f"order:c1:{attempt}", placed_earlier, None)

    order = (await committer.commit()).unwrap()

    assert order == placed_earlier
    assert len(service.orders) == 1
    assert reconciler.state == Idle()


async def test_cart_clear_failure_keeps_the_order(reconciler, store, service, cart_service, transport_down):
    await reviewed(reconciler, store)
    cart_service.failure = transport_down

    order = (await O.OrderCommitter(reconciler, service).commit()).unwrap()

    assert order.number == "SO000001"
    assert reconciler.state == Idle()
    assert len(store.lines("c1")) == 3


async def test_order_ttl_from_settings(reconciler, store, service):
    memory = I.MemoryStore[O.PlacedOrder]()
    settings = Settings().with_order_ttl(delta=timedelta(minutes=10))
    committer = O.OrderCommitter.from_settings(reconciler, service, settings, memory)
    await reviewed(reconciler, store)
    attempt = reconciler.begin_commit().unwrap().attempt
    reconciler.abort_commit()

    await committer.commit()

    record = (await memory.get(f"order:c1:{attempt}")).unwrap()
    assert timedelta(minutes=10) <= record.expires_at - record.created_at < timedelta(minutes=11)


async def test_different_lines_place_a_new_order(reconciler, store, service):
    committer = O.OrderCommitter(reconciler, service)

    await reviewed(reconciler, store)
    await committer.commit()
    line = store.add("c1", "10", "a", 1).unwrap()
    await reconciler.checkout([line.line_id])
    second = (await committer.commit()).unwrap()

    assert second.number == "SO000002"
    assert len(service.orders) == 2


async def test_commit_outside_review_is_rejected(reconciler, service):
    committer = O.OrderCommitter(reconciler, service)

    assert await committer.commit() == Error(ValidationError("no reconciliation under review"))
    assert service.orders == []


async def test_commit_with_shortfall_is_rejected(reconciler, store, oracle, service):
    oracle.stock["b"] = 0
    await reviewed(reconciler, store)
    committer = O.OrderCommitter(reconciler, service)

    assert await committer.commit() == Error(ValidationError("every line must be available before ordering"))
    assert service.orders == []


# ═══════════════════════════════════════════════════════════════════════════════
# MemoryOrderService
# ═══════════════════════════════════════════════════════════════════════════════


async def test_memory_service_rejects_empty_order(service):
    assert await service.create_order(OrderIntent(())) == Error(ValidationError("an order needs at least one line"))


async def test_memory_service_total_unknown_for_unpriced_sku(service):
    order = (await service.create_order(OrderIntent((LineRequest("a", 1), LineRequest("mystery", 1))))).unwrap()

    assert order.total is None


async def test_memory_service_lists_orders(service):
    for quantity in (1, 2, 3):
        await service.create_order(OrderIntent((LineRequest("a", quantity),)))

    page = (await service.list_orders(O.OrderQuery(per_page=2, sort_by=O.SortField.TOTAL))).unwrap()

    assert [order.total for order in page.orders] == [Decimal("30"), Decimal("20")]
    assert page.total == 3
    assert page.has_next


# ═══════════════════════════════════════════════════════════════════════════════
# Pagination
# ═══════════════════════════════════════════════════════════════════════════════


def placed(number: str, status: O.OrderStatus, total: str | None, age_minutes: int) -> O.PlacedOrder:
    return O.PlacedOrder(
        number=number,
        status=status,
        lines=(),
        total=Decimal(total) if total is not None else None,
        updated_at=datetime(2026, 1, 1, 12, 0) - timedelta(minutes=age_minutes),
    )


HISTORY = (
    placed("1", O.OrderStatus.PENDING, "5", 30),
    placed("2", O.OrderStatus.SHIPPING, "50", 20),
    placed("3", O.OrderStatus.SHIPPING, None, 10),
    placed("4", O.OrderStatus.COMPLETED, "20", 0),
)


def test_newest_first_by_default():
    page = O.paginate(HISTORY, O.OrderQuery())

    assert [o.number for o in page.orders] == ["4", "3", "2", "1"]
    assert page.total_pages == 1
    assert not page.has_next
    assert not page.has_prev


def test_filter_by_status():
    page = O.paginate(HISTORY, O.OrderQuery(status=O.OrderStatus.SHIPPING))

    assert [o.number for o in page.orders] == ["3", "2"]
    assert page.total == 2


def test_sort_by_total_ascending_treats_unknown_as_zero():
    page = O.paginate(HISTORY, O.OrderQuery(sort_by=O.SortField.TOTAL, descending=False))

    assert [o.number for o in page.orders] == ["3", "1", "4", "2"]


def test_second_page():
    page = O.paginate(HISTORY, O.OrderQuery(page=2, per_page=3))

    assert [o.number for o in page.orders] == ["1"]
    assert page.total_pages == 2
    assert page.has_prev
    assert not page.has_next


def test_page_numbers_are_clamped():
    page = O.paginate(HISTORY, O.OrderQuery(page=0, per_page=0))

    assert page.page == 1
    assert page.per_page == 1
    assert [o.number for o in page.orders] == ["4"]
    assert page.total_pages == 4


def test_empty_history_still_has_one_page():
    page = O.paginate((), O.OrderQuery())

    assert page.orders == ()
    assert page.total_pages == 1
