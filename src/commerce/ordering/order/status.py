"""Order fulfillment status and soft deletion."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from commerce.domain import commerce, logger
from commerce.exceptions import ForbiddenError
from commerce.ordering.order.order import Order, OrderStatus
from commerce.ordering.order.reservation import release_order_stock
from commerce.principal import MERCHANT_ROLES, Role


@commerce.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)


@commerce.command(part_of="Order")
class DeleteOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)


@commerce.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        if command.actor_role not in MERCHANT_ROLES:
            raise ForbiddenError({"role": ["Only sellers and admins can update order status"]})
        if command.status not in {s.value for s in OrderStatus}:
            raise ValidationError({"status": [f"Invalid status '{command.status}'"]})

        repo = current_domain.repository_for(Order)
        order = repo.find_live(command.order_id)
        if command.actor_role != Role.ADMIN.value and not order.contains_seller(command.actor_id):
            raise ForbiddenError({"order": ["Order has no items sold by this seller"]})

        if order.change_status(command.status):
            release_order_stock(order)
        repo.add(order)

        logger.info("order_status_changed", order_id=str(order.id), status=order.status)

    @handle(DeleteOrder)
    def delete_order(self, command):
        if command.actor_role != Role.ADMIN.value:
            raise ForbiddenError({"role": ["Only admins can delete orders"]})

        repo = current_domain.repository_for(Order)
        order = repo.find_live(command.order_id)
        order.soft_delete()
        repo.add(order)
