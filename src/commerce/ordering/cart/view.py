"""Read-side view of a user's cart.

Lines whose product is missing, inactive, deleted or short on stock are left
out of the view (storage is not touched), and the remaining lines are priced
from the catalogue as it stands now.
"""

from dataclasses import asdict, dataclass, field

from protean.utils.globals import current_domain

from commerce.catalogue.store import CatalogStore
from commerce.ordering.cart.cart import Cart, line_amount
from commerce.principal import ensure_owner


@dataclass(frozen=True)
class CartLine:
    product_id: str
    name: str
    price: float
    quantity: int
    total_price: float


@dataclass(frozen=True)
class CartView:
    user_id: str
    cart_id: str | None = None
    items: list[CartLine] = field(default_factory=list)
    total_amount: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


def view_cart(user_id, actor_id, store: CatalogStore | None = None) -> CartView:
    ensure_owner(actor_id, user_id, "cart")
    store = store or CatalogStore()

    cart = current_domain.repository_for(Cart).live_cart_for(user_id)
    if cart is None:
        return CartView(user_id=str(user_id))

    lines = []
    for item in cart.items:
        product = store.find(item.product_id)
        if product is None or not product.is_available or product.stock < item.quantity:
            continue
        lines.append(
            CartLine(
                product_id=product.product_id,
                name=product.name,
                price=product.price,
                quantity=item.quantity,
                total_price=line_amount(product.price, item.quantity),
            )
        )

    return CartView(
        user_id=str(user_id),
        cart_id=str(cart.id),
        items=lines,
        total_amount=round(sum(line.total_price for line in lines), 2),
    )
