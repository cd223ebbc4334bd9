"""Order aggregate: a priced, frozen snapshot of what the customer bought.

Unit prices, sellers and the total are captured from the catalogue when the
order is created and never recalculated. Stock for every line is reserved
in the same unit of work and released at most once, when the order is
cancelled.

Payment status and fulfillment status are separate. Only a payment result
from the gateway moves payment status, and a successful payment advances a
pending order to ``shipped``.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from commerce.domain import commerce
from commerce.exceptions import ConflictError
from commerce.ordering.order.events import (
    OrderDeleted,
    OrderPlaced,
    OrderStatusChanged,
    OrderStockReleased,
    PaymentCompleted,
    PaymentFailed,
    PaymentIntentAttached,
)


class PaymentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class OrderStatus(Enum):
    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


@commerce.value_object(part_of="Order")
class Address:
    """Shipping or billing address as given at order time."""

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(max_length=20)
    country = String(required=True, max_length=100)


@commerce.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    seller_id = Identifier()
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def line_total(self):
        return round(self.unit_price * self.quantity, 2)


@commerce.aggregate
class Order:
    user_id = Identifier(required=True)
    contact_email = String(max_length=254)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(Address)
    billing_address = ValueObject(Address)
    payment_method = String(max_length=50)
    payment_intent_id = String(max_length=255)
    total_amount = Float(required=True, min_value=0.0)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    stock_reserved = Boolean(default=False)
    is_deleted = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def order_must_have_items(self):
        if not self.items:
            raise ValidationError({"items": ["Order must contain at least one item"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls, user_id, lines, shipping_address=None, billing_address=None, payment_method=None, contact_email=None
    ):
        """Build an order from ``(ProductSnapshot, quantity)`` pairs.

        Prices and sellers are taken from the snapshots. Stock is not touched
        here; the caller reserves it in the same unit of work and then calls
        ``mark_stock_reserved``.
        """
        if not lines:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        items = [
            OrderItem(
                product_id=product.product_id,
                product_name=product.name,
                seller_id=product.seller_id,
                quantity=quantity,
                unit_price=product.price,
            )
            for product, quantity in lines
        ]
        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            contact_email=contact_email,
            items=items,
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment_method=payment_method,
            total_amount=round(sum(item.line_total for item in items), 2),
            payment_status=PaymentStatus.PENDING.value,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                item_count=len(items),
                total_amount=order.total_amount,
                payment_method=payment_method,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def contains_seller(self, seller_id):
        return any(str(item.seller_id) == str(seller_id) for item in self.items)

    def reserved_quantities(self):
        """Quantity per product held by this order, for stock release."""
        quantities = {}
        for item in self.items:
            key = str(item.product_id)
            quantities[key] = quantities.get(key, 0) + item.quantity
        return quantities

    # -------------------------------------------------------------------
    # Stock reservation
    # -------------------------------------------------------------------
    def mark_stock_reserved(self):
        self.stock_reserved = True

    def mark_stock_released(self):
        if not self.stock_reserved:
            return False

        self.stock_reserved = False
        self.updated_at = datetime.now(UTC)
        self.raise_(OrderStockReleased(order_id=str(self.id), item_count=len(self.items)))
        return True

    # -------------------------------------------------------------------
    # Fulfillment
    # -------------------------------------------------------------------
    def change_status(self, new_status):
        """Move fulfillment status. Returns True if the order just became cancelled."""
        try:
            target = OrderStatus(new_status)
        except ValueError:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError({"status": [f"Invalid status '{new_status}'. Allowed: {allowed}"]}) from None

        current = OrderStatus(self.status)
        if current == OrderStatus.CANCELLED and target != OrderStatus.CANCELLED:
            raise ValidationError({"status": ["A cancelled order cannot change status"]})
        if current == target:
            return False

        self.status = target.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
            )
        )
        return target == OrderStatus.CANCELLED

    def soft_delete(self):
        if self.is_deleted:
            raise ObjectNotFoundError({"order": [f"Order {self.id} not found"]})

        self.is_deleted = True
        self.updated_at = datetime.now(UTC)
        self.raise_(OrderDeleted(order_id=str(self.id)))

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def attach_payment_intent(self, intent_id):
        if self.payment_intent_id and self.payment_intent_id != intent_id:
            raise ConflictError({"payment_intent_id": ["A payment intent is already attached to this order"]})

        self.payment_intent_id = intent_id
        self.updated_at = datetime.now(UTC)
        self.raise_(PaymentIntentAttached(order_id=str(self.id), payment_intent_id=intent_id))

    def record_payment_result(self, succeeded):
        """Settle the payment. Returns True if the order was cancelled by a failure."""
        if PaymentStatus(self.payment_status) != PaymentStatus.PENDING:
            raise ConflictError({"payment_status": [f"Payment already {self.payment_status}"]})

        if succeeded:
            if OrderStatus(self.status) == OrderStatus.CANCELLED:
                raise ConflictError({"status": ["Order was cancelled before payment completed"]})

            with atomic_change(self):
                self.payment_status = PaymentStatus.COMPLETED.value
                cancelled = False
                # Fulfillment only moves forward; later stages set by the seller stay
                if OrderStatus(self.status) == OrderStatus.PENDING:
                    cancelled = self.change_status(OrderStatus.SHIPPED.value)
            self.raise_(
                PaymentCompleted(
                    order_id=str(self.id),
                    user_id=str(self.user_id),
                    amount=self.total_amount,
                )
            )
            return cancelled

        with atomic_change(self):
            self.payment_status = PaymentStatus.FAILED.value
            cancelled = self.change_status(OrderStatus.CANCELLED.value)
        self.raise_(PaymentFailed(order_id=str(self.id), user_id=str(self.user_id)))
        return cancelled


@commerce.repository(part_of=Order)
class OrderRepository:
    def find_by_payment_intent(self, intent_id) -> Order:
        orders = self._dao.query.filter(payment_intent_id=intent_id, is_deleted=False).all().items
        if not orders:
            raise ObjectNotFoundError({"order": [f"No order found for payment {intent_id}"]})
        return self.get(orders[0].id)

    def find_live(self, order_id) -> Order:
        """Load an order, treating soft-deleted orders as missing."""
        order = self.get(order_id)
        if order.is_deleted:
            raise ObjectNotFoundError({"order": [f"Order {order_id} not found"]})
        return order
