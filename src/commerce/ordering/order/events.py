"""Domain events for the Order aggregate."""

from protean.fields import Float, Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="Order")
class OrderPlaced:
    """An order was created with prices captured from the catalogue."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    item_count = Integer(required=True)
    total_amount = Float(required=True)
    payment_method = String(max_length=50)


@commerce.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True, max_length=20)
    new_status = String(required=True, max_length=20)


@commerce.event(part_of="Order")
class OrderStockReleased:
    """Stock reserved at order creation went back to the catalogue."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_count = Integer(required=True)


@commerce.event(part_of="Order")
class PaymentIntentAttached:
    __version__ = 1

    order_id = Identifier(required=True)
    payment_intent_id = String(required=True, max_length=255)


@commerce.event(part_of="Order")
class PaymentCompleted:
    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    amount = Float(required=True)


@commerce.event(part_of="Order")
class PaymentFailed:
    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)


@commerce.event(part_of="Order")
class OrderDeleted:
    __version__ = 1

    order_id = Identifier(required=True)
