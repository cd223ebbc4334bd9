"""Order creation: place an order directly or check out the live cart.

Prices are always re-read from the catalogue, never copied from the cart.
Requested quantities for the same product are combined, stock is checked
and reserved, and the order is written, all in one unit of work.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from commerce.domain import commerce, logger
from commerce.ordering.cart.cart import Cart, ensure_positive_quantity
from commerce.ordering.order.order import Address, Order
from commerce.ordering.order.reservation import reserve_stock
from commerce.principal import ensure_owner

ADDRESS_FIELDS = ("street", "city", "state", "postal_code", "country")


def _loads(value):
    return json.loads(value) if isinstance(value, str) else value


def build_address(data, field_name="address"):
    """Address value object from a dict, or None when no sub-field is given.

    Any provided sub-field makes the whole block mandatory: street, city
    and country must then be present.
    """
    data = _loads(data)
    if not data:
        return None
    if not isinstance(data, dict):
        raise ValidationError({field_name: ["Address must be an object"]})

    values = {key: data.get(key) for key in ADDRESS_FIELDS if data.get(key) not in (None, "")}
    if not values:
        return None

    missing = [key for key in ("street", "city", "country") if key not in values]
    if missing:
        raise ValidationError({field_name: [f"Missing required address fields: {', '.join(missing)}"]})
    return Address(**values)


def combine_line_requests(items):
    """Validate ``[{product_id, quantity}, ...]`` and sum quantities per product."""
    items = _loads(items)
    if not items:
        raise ValidationError({"items": ["Order must contain at least one item"]})

    quantities = {}
    for line in items:
        product_id = line.get("product_id") if isinstance(line, dict) else None
        if not product_id:
            raise ValidationError({"items": ["Each item needs a product_id"]})
        quantity = line.get("quantity")
        ensure_positive_quantity(quantity)
        quantities[str(product_id)] = quantities.get(str(product_id), 0) + quantity
    return quantities


def place_order(user_id, quantities, shipping_address, billing_address, payment_method, contact_email=None):
    snapshots = reserve_stock(quantities)
    order = Order.create(
        user_id=user_id,
        lines=[(snapshots[product_id], quantity) for product_id, quantity in quantities.items()],
        shipping_address=shipping_address,
        billing_address=billing_address,
        payment_method=payment_method,
        contact_email=contact_email,
    )
    order.mark_stock_reserved()
    current_domain.repository_for(Order).add(order)

    logger.info(
        "order_placed",
        order_id=str(order.id),
        user_id=str(user_id),
        total_amount=order.total_amount,
    )
    return order


@commerce.command(part_of="Order")
class CreateOrder:
    user_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    shipping_address = Text()  # JSON: address dict
    billing_address = Text()  # JSON: address dict
    payment_method = String(max_length=50)
    contact_email = String(max_length=254)


@commerce.command(part_of="Order")
class CheckoutCart:
    user_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    shipping_address = Text()
    billing_address = Text()
    payment_method = String(max_length=50)
    contact_email = String(max_length=254)


@commerce.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        ensure_owner(command.actor_id, command.user_id, "order")
        quantities = combine_line_requests(command.items)
        shipping = build_address(command.shipping_address, "shipping_address")
        billing = build_address(command.billing_address, "billing_address")

        order = place_order(
            command.user_id, quantities, shipping, billing, command.payment_method, contact_email=command.contact_email
        )
        return str(order.id)

    @handle(CheckoutCart)
    def checkout_cart(self, command):
        ensure_owner(command.actor_id, command.user_id, "cart")
        shipping = build_address(command.shipping_address, "shipping_address")
        billing = build_address(command.billing_address, "billing_address")

        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.live_cart_for(command.user_id)
        if cart is None or not cart.items:
            raise ValidationError({"cart": ["Cart is empty"]})

        quantities = {str(item.product_id): item.quantity for item in cart.items}
        order = place_order(
            command.user_id, quantities, shipping, billing, command.payment_method, contact_email=command.contact_email
        )

        cart.clear()
        cart_repo.add(cart)
        return str(order.id)
