"""Integration tests for POST /api/v1/orders/."""

from __future__ import annotations

import uuid

import pytest

from modules.core.models import OutboxEvent
from modules.orders.models import Order
from modules.products.models import Product

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


def _items(*lines):
    return {"items": [{"productId": str(p.id), "quantity": q} for p, q in lines]}


class TestCreateOrder:
    def test_creates_order_and_reserves_stock(self, customer_client, customer_user, laptop, mouse):
        response = customer_client.post(URL, _items((laptop, 2), (mouse, 3)), format="json")

        assert response.status_code == 201
        body = response.json()
        assert body["userId"] == str(customer_user.id)
        assert body["status"] == "created"
        assert body["total"] == 99999 * 2 + 2999 * 3
        assert body["items"] == [
            {"productId": str(laptop.id), "quantity": 2, "unitPrice": 99999},
            {"productId": str(mouse.id), "quantity": 3, "unitPrice": 2999},
        ]
        assert set(body) == {"id", "userId", "items", "total", "status", "createdAt"}

        laptop.refresh_from_db()
        mouse.refresh_from_db()
        assert laptop.stock == 8
        assert mouse.stock == 47

    def test_price_is_snapshotted(self, customer_client, laptop):
        response = customer_client.post(URL, _items((laptop, 1)), format="json")
        order_id = response.json()["id"]

        Product.objects.filter(id=laptop.id).update(price=1)

        detail = customer_client.get(f"{URL}{order_id}/").json()
        assert detail["items"][0]["unitPrice"] == 99999
        assert detail["total"] == 99999

    def test_writes_order_created_outbox_row(self, customer_client, laptop):
        response = customer_client.post(URL, _items((laptop, 1)), format="json")

        event = OutboxEvent.objects.get(aggregate_id=response.json()["id"])
        assert event.event_type == "OrderCreated"
        assert event.topic == "orders"
        assert event.payload["total"] == 99999

    def test_duplicate_lines_are_reserved_separately(self, customer_client, make_product):
        product = make_product(stock=5)

        response = customer_client.post(
            URL, _items((product, 3), (product, 2)), format="json"
        )

        assert response.status_code == 201
        assert len(response.json()["items"]) == 2
        product.refresh_from_db()
        assert product.stock == 0

    def test_insufficient_stock_leaves_nothing_behind(self, customer_client, make_product):
        plenty = make_product(name="Plenty", stock=10)
        scarce = make_product(name="Scarce", stock=5)

        response = customer_client.post(
            URL, _items((plenty, 2), (scarce, 1000)), format="json"
        )

        assert response.status_code == 400
        error = response.json()["errors"][0]
        assert error["code"] == "insufficient_stock"
        assert error["detail"] == (
            "Insufficient stock for product Scarce. Available: 5, Requested: 1000"
        )
        plenty.refresh_from_db()
        scarce.refresh_from_db()
        assert plenty.stock == 10
        assert scarce.stock == 5
        assert Order.objects.count() == 0
        assert OutboxEvent.objects.count() == 0

    def test_missing_products_are_listed(self, customer_client, laptop):
        ghost = uuid.uuid4()
        payload = _items((laptop, 1))
        payload["items"].append({"productId": str(ghost), "quantity": 1})

        response = customer_client.post(URL, payload, format="json")

        assert response.status_code == 404
        error = response.json()["errors"][0]
        assert error["code"] == "product_not_found"
        assert error["detail"] == f"Products not found: {ghost}"
        laptop.refresh_from_db()
        assert laptop.stock == 10


class TestCreateOrderValidation:
    def test_zero_quantity(self, customer_client, laptop):
        response = customer_client.post(URL, _items((laptop, 0)), format="json")

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "validation_error"
        assert body["errors"][0]["attr"] == "items.0.quantity"

    def test_empty_items(self, customer_client):
        response = customer_client.post(URL, {"items": []}, format="json")

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {
                "code": "empty",
                "detail": "Order must contain at least one item.",
                "attr": "items",
            }
        ]

    def test_malformed_product_id(self, customer_client):
        response = customer_client.post(
            URL, {"items": [{"productId": "not-a-uuid", "quantity": 1}]}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "items.0.productId"

    def test_missing_items(self, customer_client):
        response = customer_client.post(URL, {}, format="json")

        assert response.status_code == 400
        assert Order.objects.count() == 0


class TestCreateOrderAccess:
    def test_requires_authentication(self, api_client, laptop):
        response = api_client.post(URL, _items((laptop, 1)), format="json")
        assert response.status_code == 401
        assert response.json()["type"] == "client_error"

    def test_admins_cannot_place_orders(self, admin_client, laptop):
        response = admin_client.post(URL, _items((laptop, 1)), format="json")
        assert response.status_code == 403
        laptop.refresh_from_db()
        assert laptop.stock == 10
