"""Tests for the payment gateway adapters and gateway selection."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import requests

from commerce.config import Settings
from commerce.payments.gateway import (
    FakeGateway,
    GatewayError,
    PaymentProof,
    RazorpayGateway,
    build_gateway,
)


def _order(total=123.45):
    return SimpleNamespace(id="order-001", user_id="user-001", total_amount=total)


class TestFakeGateway:
    def test_intent_ids_are_unique(self):
        gateway = FakeGateway()
        assert gateway.create_intent(_order()) != gateway.create_intent(_order())

    def test_records_calls(self):
        gateway = FakeGateway(currency="USD")
        gateway.create_intent(_order(10.0))
        assert gateway.calls[0]["amount"] == 10.0
        assert gateway.calls[0]["currency"] == "USD"

    def test_configured_outage(self):
        gateway = FakeGateway()
        gateway.configure(should_fail_intent=True)
        with pytest.raises(GatewayError):
            gateway.create_intent(_order())

    def test_verify_checks_signature(self):
        gateway = FakeGateway()
        assert gateway.verify("intent", PaymentProof(payment_id="pay", signature="test-signature"))
        assert not gateway.verify("intent", PaymentProof(payment_id="pay", signature="forged"))

    def test_reset(self):
        gateway = FakeGateway()
        gateway.create_intent(_order())
        gateway.configure(should_succeed=False, should_fail_intent=True)
        gateway.reset()
        assert gateway.should_succeed is True
        assert gateway.calls == []


class TestRazorpayGateway:
    def _gateway(self, session=None):
        return RazorpayGateway(
            key_id="rzp_test",
            key_secret="secret",
            api_url="https://api.razorpay.test/v1/",
            session=session or MagicMock(),
        )

    def test_create_intent_posts_amount_in_paise(self):
        session = MagicMock()
        session.post.return_value.json.return_value = {"id": "order_rzp_1"}
        gateway = self._gateway(session)

        assert gateway.create_intent(_order(123.45)) == "order_rzp_1"

        args, kwargs = session.post.call_args
        assert args[0] == "https://api.razorpay.test/v1/orders"
        assert kwargs["json"]["amount"] == 12345
        assert kwargs["json"]["currency"] == "INR"
        assert kwargs["json"]["notes"]["order_id"] == "order-001"
        assert len(kwargs["json"]["receipt"]) <= 40
        assert kwargs["auth"] == ("rzp_test", "secret")

    def test_http_failure_is_gateway_error(self):
        session = MagicMock()
        session.post.return_value.raise_for_status.side_effect = requests.HTTPError("502")
        with pytest.raises(GatewayError):
            self._gateway(session).create_intent(_order())

    def test_verify_signature(self):
        gateway = self._gateway()
        signature = gateway.signature_for("order_rzp_1", "pay_1")
        assert gateway.verify("order_rzp_1", PaymentProof(payment_id="pay_1", signature=signature))
        assert not gateway.verify("order_rzp_1", PaymentProof(payment_id="pay_2", signature=signature))
        assert not gateway.verify("order_rzp_1", PaymentProof(payment_id="pay_1", signature=""))


class TestBuildGateway:
    def test_fake_by_default(self):
        assert isinstance(build_gateway(Settings(_env_file=None)), FakeGateway)

    def test_razorpay(self):
        settings = Settings(_env_file=None, payment_gateway="razorpay", razorpay_key_id="k", razorpay_key_secret="s")
        assert isinstance(build_gateway(settings), RazorpayGateway)

    def test_unknown(self):
        with pytest.raises(ValueError):
            build_gateway(Settings(_env_file=None, payment_gateway="paypal"))
