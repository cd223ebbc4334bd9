"""Pydantic schemas for the payments API."""

from pydantic import BaseModel, Field


class VerifyPaymentRequest(BaseModel):
    """Proof returned by the gateway's checkout after the customer pays."""

    payment_intent_id: str = Field(validation_alias="razorpay_order_id")
    payment_id: str = Field(validation_alias="razorpay_payment_id")
    signature: str = Field(validation_alias="razorpay_signature")

    model_config = {"populate_by_name": True}


class VerifyPaymentResponse(BaseModel):
    order_id: str
    payment_status: str
    status: str


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    should_fail_intent: bool = False


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    should_fail_intent: bool
