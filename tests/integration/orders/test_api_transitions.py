"""Integration tests for POST /api/v1/orders/{id}/pay/ and /cancel/."""

from __future__ import annotations

import uuid
from unittest.mock import patch

import pytest

from modules.core.models import OutboxEvent
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.django_repository import OrderDjangoRepository

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


@pytest.fixture()
def order(customer_client, laptop, mouse):
    response = customer_client.post(
        URL,
        {
            "items": [
                {"productId": str(laptop.id), "quantity": 2},
                {"productId": str(mouse.id), "quantity": 5},
            ]
        },
        format="json",
    )
    assert response.status_code == 201
    return response.json()


def _pay(client, order_id):
    return client.post(f"{URL}{order_id}/pay/")


def _cancel(client, order_id):
    return client.post(f"{URL}{order_id}/cancel/")


class TestPay:
    def test_pays_created_order(self, customer_client, order):
        response = _pay(customer_client, order["id"])

        assert response.status_code == 200
        assert response.json()["status"] == "paid"

    def test_pay_is_idempotent(self, customer_client, order):
        first = _pay(customer_client, order["id"]).json()
        second = _pay(customer_client, order["id"])

        assert second.status_code == 200
        assert second.json() == first
        assert OutboxEvent.objects.filter(event_type="OrderPaid").count() == 1
        assert (
            OrderStatusHistory.objects.filter(order_id=order["id"], new_status="paid").count()
            == 1
        )

    def test_cannot_pay_cancelled_order(self, customer_client, order):
        _cancel(customer_client, order["id"])

        response = _pay(customer_client, order["id"])

        assert response.status_code == 409
        assert response.json()["errors"][0] == {
            "code": "invalid_order_status",
            "detail": "Cannot pay a cancelled order.",
            "attr": None,
        }

    def test_admin_can_pay_any_order(self, admin_client, order):
        assert _pay(admin_client, order["id"]).json()["status"] == "paid"

    def test_other_customer_is_forbidden(self, other_customer_client, order):
        response = _pay(other_customer_client, order["id"])

        assert response.status_code == 403
        assert response.json()["errors"][0]["code"] == "order_access_denied"

    def test_unknown_order(self, customer_client):
        assert _pay(customer_client, uuid.uuid4()).status_code == 404

    def test_malformed_id(self, customer_client):
        assert _pay(customer_client, "42").status_code == 400


class TestCancel:
    def test_cancel_restores_stock(self, customer_client, order, laptop, mouse):
        response = _cancel(customer_client, order["id"])

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        laptop.refresh_from_db()
        mouse.refresh_from_db()
        assert laptop.stock == 10
        assert mouse.stock == 50

    def test_cancel_is_idempotent(self, customer_client, order, laptop):
        _cancel(customer_client, order["id"])
        second = _cancel(customer_client, order["id"])

        assert second.status_code == 200
        assert second.json()["status"] == "cancelled"
        laptop.refresh_from_db()
        assert laptop.stock == 10
        assert OutboxEvent.objects.filter(event_type="OrderCancelled").count() == 1

    def test_cancel_after_pay_restores_stock_and_flags_refund(
        self, customer_client, order, laptop
    ):
        _pay(customer_client, order["id"])

        response = _cancel(customer_client, order["id"])

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        laptop.refresh_from_db()
        assert laptop.stock == 10
        event = OutboxEvent.objects.get(event_type="OrderCancelled")
        assert event.payload["refund_required"] is True

    def test_history_records_every_transition(self, customer_client, order):
        _pay(customer_client, order["id"])
        _cancel(customer_client, order["id"])

        history = list(
            OrderStatusHistory.objects.filter(order_id=order["id"]).values_list(
                "old_status", "new_status"
            )
        )
        assert history == [(None, "created"), ("created", "paid"), ("paid", "cancelled")]

    def test_other_customer_is_forbidden(self, other_customer_client, order, laptop):
        response = _cancel(other_customer_client, order["id"])

        assert response.status_code == 403
        laptop.refresh_from_db()
        assert laptop.stock == 8

    def test_requires_authentication(self, api_client, order):
        assert _cancel(api_client, order["id"]).status_code == 401

    def test_failed_status_change_rolls_back_restored_stock(
        self, customer_client, order, laptop, mouse
    ):
        with patch.object(
            OrderDjangoRepository, "set_status", side_effect=RuntimeError("write failed")
        ):
            response = _cancel(customer_client, order["id"])

        assert response.status_code == 500
        laptop.refresh_from_db()
        mouse.refresh_from_db()
        assert laptop.stock == 8
        assert mouse.stock == 45
        assert Order.objects.get(id=order["id"]).status == "created"
        assert not OutboxEvent.objects.filter(event_type="OrderCancelled").exists()
        assert OrderStatusHistory.objects.filter(order_id=order["id"]).count() == 1
