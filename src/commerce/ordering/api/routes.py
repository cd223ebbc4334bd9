"""FastAPI routes for carts, orders, seller reporting and wishlists."""

from fastapi import APIRouter, Depends, Query

from commerce.api.dependencies import get_principal, get_services
from commerce.container import Services
from commerce.ordering.api.schemas import (
    AddToCartRequest,
    AddToWishlistRequest,
    CartResponse,
    CheckoutRequest,
    CreateOrderRequest,
    OrderPageResponse,
    OrderResponse,
    PaymentIntentResponse,
    StatusResponse,
    UpdateCartQuantityRequest,
    UpdateOrderStatusRequest,
    WishlistEntrySchema,
)
from commerce.ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from commerce.ordering.cart.view import view_cart
from commerce.ordering.order.order import PaymentStatus
from commerce.ordering.order.queries import (
    DEFAULT_PAGE_SIZE,
    load_order,
    order_details,
    order_history,
    seller_orders,
)
from commerce.ordering.order.status import DeleteOrder, UpdateOrderStatus
from commerce.ordering.wishlist.management import AddToWishlist, RemoveFromWishlist, view_wishlist
from commerce.principal import Principal, ensure_owner


def _address(schema):
    return schema.model_dump() if schema else None


def _cart(services, user_id, principal) -> CartResponse:
    return CartResponse(**services.manager.query(view_cart, user_id, principal.user_id).to_dict())


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.get("/{user_id}", response_model=CartResponse)
async def get_cart(
    user_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> CartResponse:
    return _cart(services, user_id, principal)


@cart_router.post("/{user_id}/items", response_model=CartResponse)
async def add_cart_item(
    user_id: str,
    body: AddToCartRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> CartResponse:
    command = AddToCart(
        user_id=user_id,
        actor_id=principal.user_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    services.manager.execute(command)
    return _cart(services, user_id, principal)


@cart_router.put("/{user_id}/items/{product_id}", response_model=CartResponse)
async def update_cart_item_quantity(
    user_id: str,
    product_id: str,
    body: UpdateCartQuantityRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> CartResponse:
    command = UpdateCartQuantity(
        user_id=user_id,
        actor_id=principal.user_id,
        product_id=product_id,
        quantity=body.quantity,
    )
    services.manager.execute(command)
    return _cart(services, user_id, principal)


@cart_router.delete("/{user_id}/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(
    user_id: str,
    product_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> CartResponse:
    services.manager.execute(RemoveFromCart(user_id=user_id, actor_id=principal.user_id, product_id=product_id))
    return _cart(services, user_id, principal)


@cart_router.delete("/{user_id}", response_model=StatusResponse)
async def clear_cart(
    user_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> StatusResponse:
    services.manager.execute(ClearCart(user_id=user_id, actor_id=principal.user_id))
    return StatusResponse()


@cart_router.post("/{user_id}/checkout", status_code=201, response_model=OrderResponse)
def checkout_cart(
    user_id: str,
    body: CheckoutRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> OrderResponse:
    ensure_owner(principal.user_id, user_id, "cart")
    order = services.checkout.checkout_cart(
        principal,
        shipping_address=_address(body.shipping_address),
        billing_address=_address(body.billing_address),
        payment_method=body.payment_method,
    )
    return OrderResponse.of(order)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
def create_order(
    body: CreateOrderRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> OrderResponse:
    order = services.checkout.place_order(
        principal,
        items=[line.model_dump() for line in body.items],
        shipping_address=_address(body.shipping_address),
        billing_address=_address(body.billing_address),
        payment_method=body.payment_method,
    )
    return OrderResponse.of(order)


@order_router.get("", response_model=OrderPageResponse)
async def list_orders(
    page: int = Query(default=1),
    per_page: int = Query(default=DEFAULT_PAGE_SIZE),
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> OrderPageResponse:
    result = services.manager.query(order_history, principal.user_id, principal.user_id, page, per_page)
    return OrderPageResponse(
        items=[OrderResponse.of(order) for order in result["items"]],
        page=result["page"],
        per_page=result["per_page"],
        total=result["total"],
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> OrderResponse:
    return OrderResponse.of(services.manager.query(order_details, order_id, principal))


@order_router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> OrderResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        actor_id=principal.user_id,
        actor_role=principal.role,
    )
    services.manager.execute(command)
    return OrderResponse.of(services.manager.query(load_order, order_id))


@order_router.delete("/{order_id}", response_model=StatusResponse)
async def delete_order(
    order_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> StatusResponse:
    services.manager.execute(DeleteOrder(order_id=order_id, actor_id=principal.user_id, actor_role=principal.role))
    return StatusResponse()


@order_router.post("/{order_id}/payment", response_model=PaymentIntentResponse)
def start_order_payment(
    order_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> PaymentIntentResponse:
    """Create a gateway intent for a pending order that does not have one yet."""
    order = services.manager.query(order_details, order_id, principal)
    intent_id = order.payment_intent_id
    if not intent_id and order.payment_status == PaymentStatus.PENDING.value:
        intent_id = services.checkout.start_payment(order)
    return PaymentIntentResponse(order_id=order_id, payment_intent_id=intent_id)


# ---------------------------------------------------------------------------
# Seller Router
# ---------------------------------------------------------------------------
seller_router = APIRouter(prefix="/sellers", tags=["sellers"])


@seller_router.get("/{seller_id}/orders", response_model=list[OrderResponse])
async def list_seller_orders(
    seller_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> list[OrderResponse]:
    return [OrderResponse.of(order) for order in services.manager.query(seller_orders, seller_id, principal)]


# ---------------------------------------------------------------------------
# Wishlist Router
# ---------------------------------------------------------------------------
wishlist_router = APIRouter(prefix="/wishlists", tags=["wishlists"])


@wishlist_router.get("/{user_id}", response_model=list[WishlistEntrySchema])
async def get_wishlist(
    user_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> list[WishlistEntrySchema]:
    entries = services.manager.query(view_wishlist, user_id, principal.user_id)
    return [WishlistEntrySchema(**entry) for entry in entries]


@wishlist_router.post("/{user_id}/items", status_code=201, response_model=StatusResponse)
async def add_wishlist_item(
    user_id: str,
    body: AddToWishlistRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> StatusResponse:
    services.manager.execute(AddToWishlist(user_id=user_id, actor_id=principal.user_id, product_id=body.product_id))
    return StatusResponse()


@wishlist_router.delete("/{user_id}/items/{product_id}", response_model=StatusResponse)
async def remove_wishlist_item(
    user_id: str,
    product_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> StatusResponse:
    services.manager.execute(RemoveFromWishlist(user_id=user_id, actor_id=principal.user_id, product_id=product_id))
    return StatusResponse()
