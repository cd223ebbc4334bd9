"""Checkout service: sequences order creation, payment and notification.

Each write is its own command through the consistency manager. Calls to the
payment gateway and the notification channels happen between those
commands, never while a unit of work is open, so a slow or failing external
service cannot hold or roll back a committed order.
"""

import json

import structlog

from commerce.notifications.templates.order_confirmation import OrderConfirmationTemplate
from commerce.notifications.templates.payment_confirmation import PaymentConfirmationTemplate
from commerce.notifications.templates.payment_failure import PaymentFailureTemplate
from commerce.ordering.order.creation import CheckoutCart, CreateOrder
from commerce.ordering.order.order import Order, PaymentStatus
from commerce.ordering.order.payment import AttachPaymentIntent, RecordPaymentResult
from commerce.ordering.order.queries import load_order
from commerce.payments.gateway import PaymentProof

# Orders paid on delivery never get a gateway intent
CASH_ON_DELIVERY = "cod"


class CheckoutService:
    def __init__(self, manager, gateway, notifier, currency="INR", logger=None) -> None:
        self.manager = manager
        self.gateway = gateway
        self.notifier = notifier
        self.currency = currency
        self.logger = logger or structlog.get_logger(__name__)

    def _load(self, order_id) -> Order:
        return self.manager.query(load_order, order_id)

    def place_order(self, principal, items, shipping_address=None, billing_address=None, payment_method=None):
        """Create an order from explicit line requests and start its payment."""
        order_id = self.manager.execute(
            CreateOrder(
                user_id=principal.user_id,
                actor_id=principal.user_id,
                items=json.dumps(items),
                shipping_address=json.dumps(shipping_address) if shipping_address else None,
                billing_address=json.dumps(billing_address) if billing_address else None,
                payment_method=payment_method,
                contact_email=principal.email,
            )
        )
        return self._after_order(order_id)

    def checkout_cart(self, principal, shipping_address=None, billing_address=None, payment_method=None):
        """Turn the principal's live cart into an order and start its payment."""
        order_id = self.manager.execute(
            CheckoutCart(
                user_id=principal.user_id,
                actor_id=principal.user_id,
                shipping_address=json.dumps(shipping_address) if shipping_address else None,
                billing_address=json.dumps(billing_address) if billing_address else None,
                payment_method=payment_method,
                contact_email=principal.email,
            )
        )
        return self._after_order(order_id)

    def _after_order(self, order_id):
        order = self._load(order_id)
        self.logger.info("order_committed", order_id=order_id, user_id=str(order.user_id))

        self.start_payment(order)
        self.notifier.send_template(
            order.user_id,
            OrderConfirmationTemplate,
            {
                "order_id": order_id,
                "total_amount": order.total_amount,
                "item_count": len(order.items),
                "currency": self.currency,
            },
            email=order.contact_email,
        )
        return self._load(order_id)

    def start_payment(self, order):
        """Ask the gateway for an intent and attach it. Returns the intent id, or None.

        A gateway failure leaves the order pending without an intent; the
        client can retry payment later.
        """
        if order.payment_method == CASH_ON_DELIVERY:
            return None

        try:
            intent_id = self.gateway.create_intent(order)
        except Exception:
            self.logger.exception("payment_intent_failed", order_id=str(order.id), user_id=str(order.user_id))
            return None

        self.manager.execute(AttachPaymentIntent(order_id=str(order.id), payment_intent_id=intent_id))
        self.logger.info("payment_intent_attached", order_id=str(order.id), payment_intent_id=intent_id)
        return intent_id

    def confirm_payment(self, intent_id, payment_id, signature):
        """Verify the client's payment proof and record the outcome on the order."""
        verified = self.gateway.verify(intent_id, PaymentProof(payment_id=payment_id, signature=signature))
        order_id = self.manager.execute(RecordPaymentResult(payment_intent_id=intent_id, succeeded=verified))
        order = self._load(order_id)

        self.logger.info(
            "payment_verified" if verified else "payment_rejected",
            order_id=order_id,
            user_id=str(order.user_id),
            payment_intent_id=intent_id,
        )

        context = {"order_id": order_id, "total_amount": order.total_amount, "currency": self.currency}
        if order.payment_status == PaymentStatus.COMPLETED.value:
            self.notifier.send_template(order.user_id, PaymentConfirmationTemplate, context, email=order.contact_email)
        else:
            self.notifier.send_template(order.user_id, PaymentFailureTemplate, context, email=order.contact_email)
        return order
