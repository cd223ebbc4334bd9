"""FastAPI routes for payment verification and fake-gateway control."""

from fastapi import APIRouter, Depends
from protean.exceptions import ValidationError

from commerce.api.dependencies import get_services
from commerce.container import Services
from commerce.exceptions import ForbiddenError
from commerce.payments.api.schemas import (
    ConfigureGatewayRequest,
    GatewayConfigResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from commerce.payments.gateway import FakeGateway

payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/verify", response_model=VerifyPaymentResponse)
def verify_payment(body: VerifyPaymentRequest, services: Services = Depends(get_services)) -> VerifyPaymentResponse:
    """Check the gateway signature and settle the order it belongs to."""
    order = services.checkout.confirm_payment(body.payment_intent_id, body.payment_id, body.signature)
    return VerifyPaymentResponse(order_id=str(order.id), payment_status=order.payment_status, status=order.status)


@payment_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(
    body: ConfigureGatewayRequest, services: Services = Depends(get_services)
) -> GatewayConfigResponse:
    """Toggle FakeGateway behaviour for manual testing. Not available in production."""
    if services.settings.is_production:
        raise ForbiddenError({"gateway": ["Gateway configuration not available in production"]})

    gateway = services.gateway
    if not isinstance(gateway, FakeGateway):
        raise ValidationError({"gateway": ["Gateway configuration only available for FakeGateway"]})

    gateway.configure(should_succeed=body.should_succeed, should_fail_intent=body.should_fail_intent)
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        should_fail_intent=gateway.should_fail_intent,
    )
