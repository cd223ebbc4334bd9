"""Order payment: attach the gateway's intent and record its outcome.

Recording a result is the only path that changes payment status. It is
driven by the payment verification flow, never by customers directly.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from commerce.domain import commerce, logger
from commerce.ordering.order.order import Order
from commerce.ordering.order.reservation import release_order_stock


@commerce.command(part_of="Order")
class AttachPaymentIntent:
    order_id = Identifier(required=True)
    payment_intent_id = String(required=True, max_length=255)


@commerce.command(part_of="Order")
class RecordPaymentResult:
    """Outcome of a payment, addressed by order id or by gateway intent id."""

    order_id = Identifier()
    payment_intent_id = String(max_length=255)
    succeeded = Boolean(required=True)


@commerce.command_handler(part_of=Order)
class OrderPaymentHandler:
    @handle(AttachPaymentIntent)
    def attach_payment_intent(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find_live(command.order_id)
        order.attach_payment_intent(command.payment_intent_id)
        repo.add(order)

    @handle(RecordPaymentResult)
    def record_payment_result(self, command):
        repo = current_domain.repository_for(Order)
        if command.order_id:
            order = repo.find_live(command.order_id)
        elif command.payment_intent_id:
            order = repo.find_by_payment_intent(command.payment_intent_id)
        else:
            raise ValidationError({"order_id": ["Either order_id or payment_intent_id is required"]})

        if order.record_payment_result(command.succeeded):
            release_order_stock(order)
        repo.add(order)

        logger.info(
            "payment_recorded",
            order_id=str(order.id),
            user_id=str(order.user_id),
            payment_status=order.payment_status,
        )
        return str(order.id)
