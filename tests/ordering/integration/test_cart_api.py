"""Integration tests for Cart and Wishlist API endpoints via TestClient."""

USER = {"X-User-Id": "user-001"}
OTHER = {"X-User-Id": "user-002"}
SHIPPING = {"street": "1 Main St", "city": "Pune", "country": "India"}


def _add_item(client, product_id, quantity=1, headers=USER):
    return client.post("/carts/user-001/items", json={"product_id": product_id, "quantity": quantity}, headers=headers)


class TestCartEndpoints:
    def test_add_and_merge(self, client, list_product):
        product_id = list_product(price=100.0, stock=5)

        response = _add_item(client, product_id, 2)
        assert response.status_code == 200
        body = response.json()
        assert body["items"][0]["total_price"] == 200.0
        assert body["total_amount"] == 200.0

        body = _add_item(client, product_id, 1).json()
        assert body["items"][0]["quantity"] == 3
        assert body["total_amount"] == 300.0

    def test_update_beyond_stock_is_bad_request(self, client, list_product):
        product_id = list_product(stock=5)
        _add_item(client, product_id, 3)

        response = client.put(f"/carts/user-001/items/{product_id}", json={"quantity": 10}, headers=USER)
        assert response.status_code == 400
        assert "stock" in response.json()["error"]

        assert client.get("/carts/user-001", headers=USER).json()["items"][0]["quantity"] == 3

    def test_zero_quantity_is_bad_request(self, client, list_product):
        response = _add_item(client, list_product(), 0)
        assert response.status_code == 400

    def test_unknown_product_not_found(self, client):
        response = _add_item(client, "missing")
        assert response.status_code == 404
        assert "product" in response.json()["error"]

    def test_removing_absent_line_not_found(self, client, list_product):
        _add_item(client, list_product(name="Kept"))

        response = client.delete("/carts/user-001/items/not-in-cart", headers=USER)
        assert response.status_code == 404
        assert "product" in response.json()["error"]

    def test_someone_elses_cart_forbidden(self, client, list_product):
        product_id = list_product()
        response = _add_item(client, product_id, headers=OTHER)
        assert response.status_code == 403
        assert "cart" in response.json()["error"]
        assert client.get("/carts/user-001", headers=OTHER).status_code == 403

    def test_remove_and_clear(self, client, list_product):
        first = list_product(name="First")
        second = list_product(name="Second")
        _add_item(client, first)
        _add_item(client, second)

        response = client.delete(f"/carts/user-001/items/{first}", headers=USER)
        assert [line["product_id"] for line in response.json()["items"]] == [second]

        assert client.delete("/carts/user-001", headers=USER).status_code == 200
        body = client.get("/carts/user-001", headers=USER).json()
        assert body["items"] == []
        assert body["cart_id"] is None

    def test_remove_missing_line(self, client, list_product):
        _add_item(client, list_product())
        assert client.delete("/carts/user-001/items/missing", headers=USER).status_code == 404

    def test_checkout(self, client, list_product):
        product_id = list_product(price=20.0, stock=5)
        _add_item(client, product_id, 2)

        response = client.post(
            "/carts/user-001/checkout",
            json={"shipping_address": SHIPPING, "payment_method": "gateway"},
            headers=USER,
        )
        assert response.status_code == 201
        body = response.json()
        assert body["total_amount"] == 40.0
        assert body["payment_intent_id"]
        assert client.get("/carts/user-001", headers=USER).json()["items"] == []

    def test_checkout_empty_cart(self, client):
        response = client.post("/carts/user-001/checkout", json={}, headers=USER)
        assert response.status_code == 400


class TestWishlistEndpoints:
    def test_add_view_remove(self, client, list_product):
        product_id = list_product(name="Lamp", price=25.0)

        response = client.post("/wishlists/user-001/items", json={"product_id": product_id}, headers=USER)
        assert response.status_code == 201

        entries = client.get("/wishlists/user-001", headers=USER).json()
        assert entries[0]["name"] == "Lamp"

        response = client.delete(f"/wishlists/user-001/items/{product_id}", headers=USER)
        assert response.status_code == 200
        assert client.get("/wishlists/user-001", headers=USER).json() == []

    def test_duplicate_conflicts(self, client, list_product):
        product_id = list_product()
        client.post("/wishlists/user-001/items", json={"product_id": product_id}, headers=USER)
        response = client.post("/wishlists/user-001/items", json={"product_id": product_id}, headers=USER)
        assert response.status_code == 409
