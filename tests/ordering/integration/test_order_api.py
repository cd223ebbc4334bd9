"""Integration tests for Order and Seller API endpoints via TestClient."""

import pytest

USER = {"X-User-Id": "user-001"}
SELLER = {"X-User-Id": "seller-001", "X-User-Role": "seller"}
ADMIN = {"X-User-Id": "admin-001", "X-User-Role": "admin"}
SHIPPING = {"street": "1 Main St", "city": "Pune", "country": "India"}


def _create_order(client, product_id, quantity=1, headers=USER, **extra):
    payload = {"items": [{"product_id": product_id, "quantity": quantity}], "shipping_address": SHIPPING}
    payload.update(extra)
    return client.post("/orders", json=payload, headers=headers)


class TestCreateOrderEndpoint:
    def test_create_order_freezes_price(self, client, list_product):
        product_id = list_product(price=50.0, stock=10)

        response = _create_order(client, product_id, 2, payment_method="gateway")
        assert response.status_code == 201
        body = response.json()
        assert body["total_amount"] == 100.0
        assert body["payment_status"] == "pending"
        assert body["status"] == "pending"
        assert body["billing_address"] is None

        client.patch(f"/products/{product_id}", json={"price": 75.0}, headers=SELLER)

        body = client.get(f"/orders/{body['order_id']}", headers=USER).json()
        assert body["total_amount"] == 100.0
        assert body["items"][0]["unit_price"] == 50.0

    def test_insufficient_stock(self, client, list_product):
        response = _create_order(client, list_product(stock=1), 2)
        assert response.status_code == 400

    def test_partial_address(self, client, list_product):
        response = client.post(
            "/orders",
            json={"items": [{"product_id": list_product(), "quantity": 1}], "shipping_address": {"city": "Pune"}},
            headers=USER,
        )
        assert response.status_code == 400
        assert "shipping_address" in response.json()["error"]

    def test_empty_items(self, client):
        response = client.post("/orders", json={"items": []}, headers=USER)
        assert response.status_code == 400


class TestOrderReadEndpoints:
    def test_history_paginated(self, client, list_product):
        product_id = list_product(stock=10)
        for _ in range(3):
            _create_order(client, product_id)

        body = client.get("/orders", params={"page": 1, "per_page": 2}, headers=USER).json()
        assert body["total"] == 3
        assert len(body["items"]) == 2

    def test_invalid_page_size(self, client):
        assert client.get("/orders", params={"per_page": 500}, headers=USER).status_code == 400

    def test_other_customer_gets_not_found(self, client, list_product):
        order_id = _create_order(client, list_product()).json()["order_id"]
        response = client.get(f"/orders/{order_id}", headers={"X-User-Id": "user-002"})
        assert response.status_code == 404

    def test_seller_orders(self, client, list_product):
        order_id = _create_order(client, list_product()).json()["order_id"]

        response = client.get("/sellers/seller-001/orders", headers=SELLER)
        assert response.status_code == 200
        assert [o["order_id"] for o in response.json()] == [order_id]

        assert client.get("/sellers/seller-002/orders", headers=SELLER).status_code == 403


class TestOrderStatusEndpoints:
    def test_seller_updates_status(self, client, list_product):
        order_id = _create_order(client, list_product()).json()["order_id"]

        response = client.patch(f"/orders/{order_id}/status", json={"status": "delivered"}, headers=SELLER)
        assert response.status_code == 200
        assert response.json()["status"] == "delivered"

    @pytest.mark.parametrize(
        "headers,status_code",
        [(USER, 403), ({"X-User-Id": "seller-002", "X-User-Role": "seller"}, 403), (ADMIN, 200)],
    )
    def test_status_authorization(self, client, list_product, headers, status_code):
        order_id = _create_order(client, list_product()).json()["order_id"]
        response = client.patch(f"/orders/{order_id}/status", json={"status": "shipped"}, headers=headers)
        assert response.status_code == status_code

    def test_cancel_restores_stock(self, client, list_product):
        product_id = list_product(stock=5)
        order_id = _create_order(client, product_id, 3).json()["order_id"]
        assert client.get(f"/products/{product_id}").json()["stock"] == 2

        client.patch(f"/orders/{order_id}/status", json={"status": "cancelled"}, headers=SELLER)
        assert client.get(f"/products/{product_id}").json()["stock"] == 5

        response = client.patch(f"/orders/{order_id}/status", json={"status": "shipped"}, headers=SELLER)
        assert response.status_code == 400

    def test_invalid_status(self, client, list_product):
        order_id = _create_order(client, list_product()).json()["order_id"]
        response = client.patch(f"/orders/{order_id}/status", json={"status": "lost"}, headers=SELLER)
        assert response.status_code == 400

    def test_admin_deletes(self, client, list_product):
        order_id = _create_order(client, list_product()).json()["order_id"]

        assert client.delete(f"/orders/{order_id}", headers=SELLER).status_code == 403
        assert client.delete(f"/orders/{order_id}", headers=ADMIN).status_code == 200
        assert client.get(f"/orders/{order_id}", headers=USER).status_code == 404


class TestOrderPaymentEndpoint:
    def test_retry_payment_after_gateway_outage(self, client, gateway, list_product):
        gateway.configure(should_fail_intent=True)
        body = _create_order(client, list_product(), payment_method="gateway").json()
        assert body["payment_intent_id"] is None

        gateway.configure()
        response = client.post(f"/orders/{body['order_id']}/payment", headers=USER)
        assert response.status_code == 200
        assert response.json()["payment_intent_id"].startswith("fake_order_")

    def test_existing_intent_returned(self, client, list_product):
        body = _create_order(client, list_product(), payment_method="gateway").json()
        response = client.post(f"/orders/{body['order_id']}/payment", headers=USER)
        assert response.json()["payment_intent_id"] == body["payment_intent_id"]
