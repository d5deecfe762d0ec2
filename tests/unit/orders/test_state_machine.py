"""Order lifecycle against the real repositories.

Covers:
- Model-level FSM helpers (can_transition_to).
- Every allowed transition, the idempotent replays and the illegal one.
- History recording on every transition.
- Stock restoration on cancellation.
"""

from __future__ import annotations

import pytest

from modules.orders.constants import VALID_TRANSITIONS, OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import InvalidOrderStatus
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


@pytest.fixture()
def order(service, customer_user, laptop):
    dto = CreateOrderDTO(
        user_id=customer_user.id,
        items=[CreateOrderItemDTO(product_id=laptop.id, quantity=2)],
    )
    return service.create_order(dto)


def _history(order):
    return list(
        OrderStatusHistory.objects.filter(order=order).values_list(
            "old_status", "new_status"
        )
    )


class TestTransitionTable:
    def test_cancelled_allows_no_transition(self):
        assert VALID_TRANSITIONS[OrderStatus.CANCELLED] == set()

    @pytest.mark.parametrize(
        ("current", "target", "allowed"),
        [
            (OrderStatus.CREATED, OrderStatus.PAID, True),
            (OrderStatus.CREATED, OrderStatus.CANCELLED, True),
            (OrderStatus.PAID, OrderStatus.CANCELLED, True),
            (OrderStatus.CANCELLED, OrderStatus.PAID, False),
            (OrderStatus.PAID, OrderStatus.CREATED, False),
            (OrderStatus.CANCELLED, OrderStatus.CREATED, False),
        ],
    )
    def test_can_transition_to(self, current, target, allowed):
        assert Order(status=current).can_transition_to(target) is allowed


class TestLifecycle:
    def test_new_order_is_created_with_history(self, order):
        assert order.status == OrderStatus.CREATED
        assert _history(order) == [(None, OrderStatus.CREATED)]

    def test_pay_then_cancel(self, service, order, laptop):
        service.pay_order(order.id)
        cancelled = service.cancel_order(order.id)

        assert cancelled.status == OrderStatus.CANCELLED
        assert _history(order) == [
            (None, "created"),
            ("created", "paid"),
            ("paid", "cancelled"),
        ]
        laptop.refresh_from_db()
        assert laptop.stock == 10

    def test_pay_replay_writes_no_history(self, service, order):
        first = service.pay_order(order.id)
        second = service.pay_order(order.id)

        assert first.status == second.status == OrderStatus.PAID
        assert len(_history(order)) == 2

    def test_cancel_replay_restores_stock_once(self, service, order, laptop):
        service.cancel_order(order.id)
        service.cancel_order(order.id)

        laptop.refresh_from_db()
        assert laptop.stock == 10
        assert len(_history(order)) == 2

    def test_pay_after_cancel_is_rejected_and_status_kept(self, service, order):
        service.cancel_order(order.id)

        with pytest.raises(InvalidOrderStatus):
            service.pay_order(order.id)

        order.refresh_from_db()
        assert order.status == OrderStatus.CANCELLED
