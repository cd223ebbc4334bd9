"""Razorpay adapter over the Orders REST API.

Amounts are sent in the smallest currency unit (paise for INR). A payment
is verified by recomputing the HMAC-SHA256 of ``"<order_id>|<payment_id>"``
with the key secret and comparing it to the signature the client returned.
"""

import hashlib
import hmac
import time

import requests

from commerce.payments.gateway.port import GatewayError, PaymentGateway, PaymentProof


class RazorpayGateway(PaymentGateway):
    def __init__(
        self, key_id: str, key_secret: str, api_url: str, currency: str = "INR", timeout: float = 10.0, session=None
    ) -> None:
        self.currency = currency
        self.key_id = key_id
        self.key_secret = key_secret
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def create_intent(self, order) -> str:
        user_id = str(order.user_id)
        payload = {
            "amount": int(round(order.total_amount * 100)),
            "currency": self.currency,
            "receipt": f"order_rcptid_{user_id}_{int(time.time() * 1000)}"[:40],
            "notes": {"order_id": str(order.id), "user_id": user_id},
        }
        try:
            response = self.session.post(
                f"{self.api_url}/orders",
                json=payload,
                auth=(self.key_id, self.key_secret),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise GatewayError(f"Error creating Razorpay order: {exc}") from exc
        return response.json()["id"]

    def signature_for(self, intent_id: str, payment_id: str) -> str:
        message = f"{intent_id}|{payment_id}".encode()
        return hmac.new(self.key_secret.encode(), message, hashlib.sha256).hexdigest()

    def verify(self, intent_id: str, proof: PaymentProof) -> bool:
        expected = self.signature_for(intent_id, proof.payment_id)
        return hmac.compare_digest(expected, proof.signature or "")
