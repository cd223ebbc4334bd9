"""Payment gateway selection."""

from commerce.payments.gateway.fake_adapter import FakeGateway
from commerce.payments.gateway.port import GatewayError, PaymentGateway, PaymentProof
from commerce.payments.gateway.razorpay_adapter import RazorpayGateway

__all__ = ["FakeGateway", "GatewayError", "PaymentGateway", "PaymentProof", "RazorpayGateway", "build_gateway"]


def build_gateway(settings) -> PaymentGateway:
    """Return the gateway named by ``settings.payment_gateway``."""
    if settings.payment_gateway == "fake":
        return FakeGateway(currency=settings.payment_currency)
    if settings.payment_gateway == "razorpay":
        return RazorpayGateway(
            key_id=settings.razorpay_key_id,
            key_secret=settings.razorpay_key_secret,
            api_url=settings.razorpay_api_url,
            currency=settings.payment_currency,
            timeout=settings.request_timeout_seconds,
        )
    raise ValueError(f"Unknown payment gateway: {settings.payment_gateway}")
