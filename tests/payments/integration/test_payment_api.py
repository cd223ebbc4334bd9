"""Integration tests for the payment verification and gateway control endpoints."""

USER = {"X-User-Id": "user-001", "X-User-Email": "user-001@example.com"}


def _order_with_intent(client, product_id):
    response = client.post(
        "/orders",
        json={"items": [{"product_id": product_id, "quantity": 2}], "payment_method": "gateway"},
        headers=USER,
    )
    assert response.status_code == 201
    return response.json()


def _verify(client, intent_id, signature="test-signature"):
    return client.post(
        "/payments/verify",
        json={
            "razorpay_order_id": intent_id,
            "razorpay_payment_id": "pay_001",
            "razorpay_signature": signature,
        },
    )


class TestVerifyPayment:
    def test_success_completes_and_ships(self, client, email, list_product):
        order = _order_with_intent(client, list_product())

        response = _verify(client, order["payment_intent_id"])
        assert response.status_code == 200
        assert response.json() == {"order_id": order["order_id"], "payment_status": "completed", "status": "shipped"}
        assert email.sent_emails[-1]["subject"] == "Payment Confirmation"
        assert email.sent_emails[-1]["to"] == "user-001@example.com"

    def test_bad_signature_cancels_and_restores_stock(self, client, list_product):
        product_id = list_product(stock=5)
        order = _order_with_intent(client, product_id)

        response = _verify(client, order["payment_intent_id"], signature="forged")
        assert response.status_code == 200
        assert response.json()["payment_status"] == "failed"
        assert response.json()["status"] == "cancelled"
        assert client.get(f"/products/{product_id}").json()["stock"] == 5

    def test_second_verification_conflicts(self, client, list_product):
        order = _order_with_intent(client, list_product())
        _verify(client, order["payment_intent_id"])
        assert _verify(client, order["payment_intent_id"]).status_code == 409

    def test_unknown_intent(self, client):
        assert _verify(client, "fake_order_unknown").status_code == 404

    def test_missing_fields(self, client):
        response = client.post("/payments/verify", json={"razorpay_order_id": "x"})
        assert response.status_code == 400


class TestConfigureGateway:
    def test_toggle_fake_gateway(self, client, gateway, list_product):
        response = client.post("/payments/gateway/configure", json={"should_succeed": False})
        assert response.status_code == 200
        assert response.json()["should_succeed"] is False

        order = _order_with_intent(client, list_product())
        assert _verify(client, order["payment_intent_id"]).json()["payment_status"] == "failed"

    def test_unavailable_in_production(self, _commerce_domain, gateway, image_store, notifier):
        from fastapi.testclient import TestClient

        from commerce.api.app import create_app
        from commerce.config import Settings

        app = create_app(
            _commerce_domain,
            Settings(_env_file=None, environment="production"),
            gateway=gateway,
            image_store=image_store,
            notifier=notifier,
        )
        response = TestClient(app).post("/payments/gateway/configure", json={"should_succeed": False})
        assert response.status_code == 403
