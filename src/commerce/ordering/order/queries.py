"""Order read paths: customer history, order details and seller reporting."""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from commerce.ordering.order.order import Order
from commerce.principal import MERCHANT_ROLES, Principal, Role, ensure_owner, ensure_role

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _live_orders(**filters):
    repo = current_domain.repository_for(Order)
    return repo._dao.query.filter(is_deleted=False, **filters).order_by("-created_at").all().items


def order_history(user_id, actor_id, page=1, per_page=DEFAULT_PAGE_SIZE):
    """One page of a user's orders, newest first. Deleted orders are left out."""
    ensure_owner(actor_id, user_id, "order")
    if page < 1 or not 1 <= per_page <= MAX_PAGE_SIZE:
        raise ValidationError({"page": [f"page must be >= 1 and per_page between 1 and {MAX_PAGE_SIZE}"]})

    orders = _live_orders(user_id=str(user_id))
    start = (page - 1) * per_page
    return {
        "items": orders[start : start + per_page],
        "page": page,
        "per_page": per_page,
        "total": len(orders),
    }


def order_details(order_id, principal: Principal) -> Order:
    """An order as seen by its owner. Anyone else gets not-found unless they are an admin."""
    order = current_domain.repository_for(Order).find_live(order_id)
    if not principal.is_admin and str(order.user_id) != str(principal.user_id):
        raise ObjectNotFoundError({"order": [f"Order {order_id} not found"]})
    return order


def seller_orders(seller_id, principal: Principal) -> list[Order]:
    """Orders that contain at least one item sold by ``seller_id``."""
    ensure_role(principal, MERCHANT_ROLES, "view seller orders")
    if principal.role != Role.ADMIN.value:
        ensure_owner(principal.user_id, seller_id, "seller orders")

    return [order for order in _live_orders() if order.contains_seller(seller_id)]


def load_order(order_id) -> Order:
    return current_domain.repository_for(Order).find_live(order_id)
