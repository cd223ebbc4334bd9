"""Configurable fake payment gateway for development and testing.

No external calls. ``configure`` switches intent creation and verification
between success and failure at runtime, which the
``/payments/gateway/configure`` route exposes outside production.
"""

from uuid import uuid4

from commerce.payments.gateway.port import GatewayError, PaymentGateway, PaymentProof

VALID_SIGNATURE = "test-signature"


class FakeGateway(PaymentGateway):
    def __init__(self, currency: str = "INR") -> None:
        self.currency = currency
        self.should_succeed: bool = True
        self.should_fail_intent: bool = False
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool = True, should_fail_intent: bool = False) -> None:
        self.should_succeed = should_succeed
        self.should_fail_intent = should_fail_intent

    def create_intent(self, order) -> str:
        self.calls.append(
            {
                "method": "create_intent",
                "order_id": str(order.id),
                "amount": order.total_amount,
                "currency": self.currency,
                "user_id": str(order.user_id),
            }
        )
        if self.should_fail_intent:
            raise GatewayError("Gateway unavailable")
        return f"fake_order_{uuid4().hex[:12]}"

    def verify(self, intent_id: str, proof: PaymentProof) -> bool:
        self.calls.append({"method": "verify", "intent_id": intent_id, "payment_id": proof.payment_id})
        return self.should_succeed and proof.signature == VALID_SIGNATURE

    def reset(self) -> None:
        self.calls.clear()
        self.should_succeed = True
        self.should_fail_intent = False
