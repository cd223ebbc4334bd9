"""Pydantic request/response schemas for carts, orders and wishlists.

External contracts only; the Protean commands behind them stay internal.
"""

from datetime import datetime

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    """All fields optional here. Street, city and country become required
    as soon as any field is given."""

    street: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None


class LineRequest(BaseModel):
    product_id: str
    quantity: int


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = 1


class UpdateCartQuantityRequest(BaseModel):
    quantity: int


class CartLineSchema(BaseModel):
    product_id: str
    name: str | None = None
    price: float
    quantity: int
    total_price: float


class CartResponse(BaseModel):
    cart_id: str | None = None
    user_id: str
    items: list[CartLineSchema] = []
    total_amount: float = 0.0


class CheckoutRequest(BaseModel):
    shipping_address: AddressSchema | None = None
    billing_address: AddressSchema | None = None
    payment_method: str | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    items: list[LineRequest]
    shipping_address: AddressSchema | None = None
    billing_address: AddressSchema | None = None
    payment_method: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-001", "quantity": 2}],
                    "shipping_address": {
                        "street": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "KA",
                        "postal_code": "560001",
                        "country": "IN",
                    },
                    "payment_method": "gateway",
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str


class OrderItemSchema(BaseModel):
    product_id: str
    product_name: str | None = None
    seller_id: str | None = None
    quantity: int
    unit_price: float


class OrderResponse(BaseModel):
    order_id: str
    user_id: str
    items: list[OrderItemSchema]
    shipping_address: AddressSchema | None = None
    billing_address: AddressSchema | None = None
    payment_method: str | None = None
    payment_intent_id: str | None = None
    total_amount: float
    payment_status: str
    status: str
    created_at: datetime | None = None

    @classmethod
    def of(cls, order) -> "OrderResponse":
        def address(value):
            return AddressSchema(**value.to_dict()) if value else None

        return cls(
            order_id=str(order.id),
            user_id=str(order.user_id),
            items=[
                OrderItemSchema(
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    seller_id=str(item.seller_id) if item.seller_id else None,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
                for item in order.items
            ],
            shipping_address=address(order.shipping_address),
            billing_address=address(order.billing_address),
            payment_method=order.payment_method,
            payment_intent_id=order.payment_intent_id,
            total_amount=order.total_amount,
            payment_status=order.payment_status,
            status=order.status,
            created_at=order.created_at,
        )


class OrderPageResponse(BaseModel):
    items: list[OrderResponse]
    page: int
    per_page: int
    total: int


class PaymentIntentResponse(BaseModel):
    order_id: str
    payment_intent_id: str | None = None


# ---------------------------------------------------------------------------
# Wishlist
# ---------------------------------------------------------------------------
class AddToWishlistRequest(BaseModel):
    product_id: str


class WishlistEntrySchema(BaseModel):
    product_id: str
    name: str
    price: float
    added_at: datetime | None = None


class StatusResponse(BaseModel):
    status: str = "ok"
