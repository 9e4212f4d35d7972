"""Integration tests for Order API endpoints via TestClient."""

import pytest
from app import create_app
from fastapi.testclient import TestClient
from ordering.order.fulfillment import MarkProcessing, RecordShipment
from ordering.order.identifiers import ORDER_ID_PATTERN

USER = {"X-User-Id": "user-1"}
OTHER_USER = {"X-User-Id": "user-2"}


@pytest.fixture()
def client(settings, storefront):
    return TestClient(create_app(settings, storefront))


def _order_payload(*items, **overrides):
    payload = {
        "firstName": "Asha",
        "lastName": "Rao",
        "address": "12 MG Road",
        "city": "Bengaluru",
        "zipCode": "560001",
        "paymentMethod": "paypal",
        "cartItems": [{"id": product_id, "quantity": quantity} for product_id, quantity in items],
    }
    payload.update(overrides)
    return payload


def _create_order(client, *items, headers=USER):
    """Helper: POST /orders and return the response body."""
    response = client.post("/orders", json=_order_payload(*items), headers=headers)
    assert response.status_code == 201
    return response.json()


class TestCreateOrder:
    def test_create_order(self, client, make_product, stock_of):
        make_product("P", name="Smart Watch", price=100, stock=5)

        response = client.post("/orders", json=_order_payload(("P", 3)), headers=USER)

        assert response.status_code == 201
        data = response.json()
        assert ORDER_ID_PATTERN.match(data["orderId"])
        assert data["userId"] == "user-1"
        assert data["status"] == "confirmed"
        assert data["paymentStatus"] == "pending"
        assert data["paymentMethod"] == "paypal"
        assert data["totalAmount"] == 300
        assert data["formattedTotal"] == "₹300"
        assert data["customerName"] == "Asha Rao"
        assert data["shippingAddress"]["zipCode"] == "560001"
        assert data["shippingAddress"]["country"] == "United States"
        assert data["items"] == [
            {
                "productId": "P",
                "productName": "Smart Watch",
                "unitPrice": 100.0,
                "quantity": 3,
                "subtotal": 300.0,
            }
        ]
        assert stock_of("P") == 2

    def test_unknown_product_is_404_and_nothing_changes(self, client, make_product, stock_of):
        make_product("P", stock=5)

        response = client.post("/orders", json=_order_payload(("P", 3), ("Q", 1)), headers=USER)

        assert response.status_code == 404
        assert response.json()["message"] == "Product with ID Q not found"
        assert stock_of("P") == 5
        assert client.get("/orders", headers=USER).json()["count"] == 0

    def test_insufficient_stock(self, client, make_product):
        make_product("P", name="Lamp", stock=1)

        response = client.post("/orders", json=_order_payload(("P", 2)), headers=USER)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "insufficient_stock"
        assert body["message"] == "Insufficient stock for Lamp. Available: 1, Requested: 2"
        assert body["detail"] == {"product_id": "P", "available": 1, "requested": 2}

    def test_empty_items(self, client):
        response = client.post("/orders", json=_order_payload(), headers=USER)
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_argument"

    def test_short_address(self, client, make_product):
        make_product("P")
        response = client.post("/orders", json=_order_payload(("P", 1), address="1 Rd"), headers=USER)
        assert response.status_code == 400
        assert response.json()["message"] == "Address must be at least 5 characters long"

    def test_missing_first_name(self, client, make_product):
        make_product("P")
        payload = _order_payload(("P", 1))
        del payload["firstName"]
        response = client.post("/orders", json=payload, headers=USER)
        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"

    def test_requires_user(self, client):
        assert client.post("/orders", json=_order_payload(("P", 1))).status_code == 401


class TestListAndGetOrders:
    def test_list_newest_first(self, client, make_product):
        make_product("P", stock=10)
        first = _create_order(client, ("P", 1))
        second = _create_order(client, ("P", 1))
        _create_order(client, ("P", 1), headers=OTHER_USER)

        data = client.get("/orders", headers=USER).json()

        assert data["count"] == 2
        assert {order["id"] for order in data["orders"]} == {first["id"], second["id"]}
        created = [order["createdAt"] for order in data["orders"]]
        assert created == sorted(created, reverse=True)

    def test_get_by_either_id(self, client, make_product):
        make_product("P")
        order = _create_order(client, ("P", 1))

        assert client.get(f"/orders/{order['id']}", headers=USER).json()["orderId"] == order["orderId"]
        assert client.get(f"/orders/{order['orderId']}", headers=USER).json()["id"] == order["id"]

    def test_other_users_order_is_not_found(self, client, make_product):
        make_product("P")
        order = _create_order(client, ("P", 1))

        response = client.get(f"/orders/{order['id']}", headers=OTHER_USER)

        assert response.status_code == 404
        assert response.json()["message"] == "Order not found or access denied"

    def test_unknown_order(self, client):
        assert client.get("/orders/nope", headers=USER).status_code == 404


class TestCancelOrder:
    def test_cancel_returns_stock(self, client, make_product, stock_of):
        make_product("P", stock=5)
        order = _create_order(client, ("P", 3))

        response = client.patch(f"/orders/{order['id']}/cancel", json={"reason": "Ordered by mistake"}, headers=USER)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "cancelled"
        assert data["cancellationReason"] == "Ordered by mistake"
        assert data["cancelledAt"] is not None
        assert stock_of("P") == 5

    def test_cancel_without_body(self, client, make_product):
        make_product("P")
        order = _create_order(client, ("P", 1))
        response = client.patch(f"/orders/{order['orderId']}/cancel", headers=USER)
        assert response.status_code == 200
        assert response.json()["cancellationReason"] is None

    def test_cancel_twice(self, client, make_product):
        make_product("P")
        order = _create_order(client, ("P", 1))
        client.patch(f"/orders/{order['id']}/cancel", headers=USER)

        response = client.patch(f"/orders/{order['id']}/cancel", headers=USER)

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_state"
        assert response.json()["message"] == "Order is already cancelled"

    def test_cancel_shipped(self, client, storefront, make_product):
        make_product("P")
        order = _create_order(client, ("P", 1))
        storefront.process(MarkProcessing(order_id=order["id"]))
        storefront.process(RecordShipment(order_id=order["id"]))

        response = client.patch(f"/orders/{order['id']}/cancel", headers=USER)

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot cancel shipped or delivered orders"

    def test_other_user_cannot_cancel(self, client, make_product, stock_of):
        make_product("P", stock=5)
        order = _create_order(client, ("P", 2))

        response = client.patch(f"/orders/{order['id']}/cancel", headers=OTHER_USER)

        assert response.status_code == 404
        assert stock_of("P") == 3
