"""Integration tests for GET /api/v1/orders/ and /api/v1/orders/{id}/."""

from __future__ import annotations

import uuid

import pytest

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


@pytest.fixture()
def place_order(laptop):
    def _place(client, quantity=1):
        response = client.post(
            URL,
            {"items": [{"productId": str(laptop.id), "quantity": quantity}]},
            format="json",
        )
        assert response.status_code == 201
        return response.json()

    return _place


class TestListOrders:
    def test_customers_see_only_their_orders(
        self, customer_client, other_customer_client, place_order
    ):
        mine = place_order(customer_client)
        place_order(other_customer_client)

        response = customer_client.get(URL)

        assert response.status_code == 200
        assert [order["id"] for order in response.json()] == [mine["id"]]

    def test_admins_see_every_order_newest_first(
        self, admin_client, customer_client, other_customer_client, place_order
    ):
        first = place_order(customer_client)
        second = place_order(other_customer_client)
        third = place_order(customer_client)

        response = admin_client.get(URL)

        assert [order["id"] for order in response.json()] == [
            third["id"],
            second["id"],
            first["id"],
        ]

    def test_empty_list(self, customer_client):
        response = customer_client.get(URL)
        assert response.status_code == 200
        assert response.json() == []

    def test_filter_by_status(self, customer_client, place_order):
        paid = place_order(customer_client)
        place_order(customer_client)
        customer_client.post(f"{URL}{paid['id']}/pay/")

        response = customer_client.get(URL, {"status": "paid"})

        assert [order["id"] for order in response.json()] == [paid["id"]]

    def test_filter_by_total(self, customer_client, place_order):
        place_order(customer_client, quantity=1)
        big = place_order(customer_client, quantity=3)

        response = customer_client.get(URL, {"min_total": 200000})

        assert [order["id"] for order in response.json()] == [big["id"]]

    def test_invalid_filter_is_rejected(self, customer_client):
        response = customer_client.get(URL, {"status": "shipped"})

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "validation_error"
        assert body["errors"][0]["attr"] == "status"

    def test_requires_authentication(self, api_client):
        assert api_client.get(URL).status_code == 401


class TestRetrieveOrder:
    def test_owner_can_read(self, customer_client, place_order):
        order = place_order(customer_client)

        response = customer_client.get(f"{URL}{order['id']}/")

        assert response.status_code == 200
        assert response.json() == order

    def test_admin_can_read_any(self, admin_client, customer_client, place_order):
        order = place_order(customer_client)
        assert admin_client.get(f"{URL}{order['id']}/").status_code == 200

    def test_foreign_order_is_not_found(
        self, customer_client, other_customer_client, place_order
    ):
        order = place_order(other_customer_client)

        response = customer_client.get(f"{URL}{order['id']}/")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "order_not_found"

    def test_unknown_order(self, customer_client):
        response = customer_client.get(f"{URL}{uuid.uuid4()}/")
        assert response.status_code == 404

    def test_malformed_id(self, customer_client):
        response = customer_client.get(f"{URL}not-a-uuid/")

        assert response.status_code == 400
        assert response.json()["errors"][0] == {
            "code": "invalid_order_id",
            "detail": "Invalid order ID format.",
            "attr": None,
        }
