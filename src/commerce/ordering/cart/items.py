"""Cart item management: commands and handler.

Each handler runs inside one unit of work. Stock and price are read from the
Catalog Store in the same unit of work that writes the cart, and every
remaining line is re-priced before the cart is saved.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from commerce.catalogue.store import CatalogStore
from commerce.domain import commerce, logger
from commerce.ordering.cart.cart import Cart
from commerce.principal import ensure_owner


@commerce.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@commerce.command(part_of="Cart")
class UpdateCartQuantity:
    user_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@commerce.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    product_id = Identifier(required=True)


@commerce.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)
    actor_id = Identifier(required=True)


def current_prices(cart, store):
    """Snapshots for every product still in the catalogue, keyed by product id."""
    snapshots = {}
    for item in cart.items:
        snapshot = store.find(item.product_id)
        if snapshot is not None:
            snapshots[snapshot.product_id] = snapshot
    return snapshots


def live_cart(user_id):
    cart = current_domain.repository_for(Cart).live_cart_for(user_id)
    if cart is None:
        raise ObjectNotFoundError({"cart": [f"No cart found for user {user_id}"]})
    return cart


@commerce.command_handler(part_of=Cart)
class CartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        ensure_owner(command.actor_id, command.user_id, "cart")
        store = CatalogStore()
        product = store.get_product(command.product_id)

        repo = current_domain.repository_for(Cart)
        cart = repo.cart_for(command.user_id)
        created = cart is None
        if created:
            cart = Cart.create(user_id=command.user_id)
        else:
            cart.reopen()

        cart.add_item(product, command.quantity, snapshots=current_prices(cart, store))
        if created:
            repo.claim(cart)
            logger.info("cart_created", user_id=str(command.user_id), cart_id=str(cart.id))
        repo.add(cart)
        return str(cart.id)

    @handle(UpdateCartQuantity)
    def update_quantity(self, command):
        ensure_owner(command.actor_id, command.user_id, "cart")
        cart = live_cart(command.user_id)
        store = CatalogStore()

        cart.require_line(command.product_id)
        product = store.get_product(command.product_id)
        cart.update_quantity(product, command.quantity, snapshots=current_prices(cart, store))
        current_domain.repository_for(Cart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        ensure_owner(command.actor_id, command.user_id, "cart")
        cart = live_cart(command.user_id)

        cart.remove_item(command.product_id, snapshots=current_prices(cart, CatalogStore()))
        current_domain.repository_for(Cart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        ensure_owner(command.actor_id, command.user_id, "cart")
        cart = live_cart(command.user_id)

        cart.clear()
        current_domain.repository_for(Cart).add(cart)
