"""Wishlist management: commands, handler and the owner's view."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from commerce.catalogue.store import CatalogStore
from commerce.domain import commerce
from commerce.ordering.wishlist.wishlist import Wishlist
from commerce.principal import ensure_owner


@commerce.command(part_of="Wishlist")
class AddToWishlist:
    user_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    product_id = Identifier(required=True)


@commerce.command(part_of="Wishlist")
class RemoveFromWishlist:
    user_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    product_id = Identifier(required=True)


@commerce.command_handler(part_of=Wishlist)
class WishlistHandler:
    @handle(AddToWishlist)
    def add_to_wishlist(self, command):
        ensure_owner(command.actor_id, command.user_id, "wishlist")
        CatalogStore().get_product(command.product_id)

        repo = current_domain.repository_for(Wishlist)
        wishlist = repo.for_user(command.user_id) or Wishlist.create(user_id=command.user_id)
        wishlist.add(command.product_id)
        repo.add(wishlist)

    @handle(RemoveFromWishlist)
    def remove_from_wishlist(self, command):
        ensure_owner(command.actor_id, command.user_id, "wishlist")

        repo = current_domain.repository_for(Wishlist)
        wishlist = repo.for_user(command.user_id)
        if wishlist is None:
            raise ObjectNotFoundError({"product": ["Product not in wishlist"]})
        wishlist.remove(command.product_id)
        repo.add(wishlist)


def view_wishlist(user_id, actor_id) -> list[dict]:
    """Products on the wishlist that are still in the catalogue, oldest first."""
    ensure_owner(actor_id, user_id, "wishlist")
    wishlist = current_domain.repository_for(Wishlist).for_user(user_id)
    if wishlist is None:
        return []

    store = CatalogStore()
    entries = []
    for entry in sorted(wishlist.entries, key=lambda e: e.added_at):
        product = store.find(entry.product_id)
        if product is None or product.is_deleted:
            continue
        entries.append(
            {
                "product_id": product.product_id,
                "name": product.name,
                "price": product.price,
                "added_at": entry.added_at,
            }
        )
    return entries
