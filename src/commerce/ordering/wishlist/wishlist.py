"""Wishlist aggregate: the set of products a user wants to come back to."""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier

from commerce.domain import commerce
from commerce.exceptions import ConflictError
from commerce.ordering.wishlist.events import WishlistItemAdded, WishlistItemRemoved


@commerce.entity(part_of="Wishlist")
class WishlistEntry:
    product_id = Identifier(required=True)
    added_at = DateTime()


@commerce.aggregate
class Wishlist:
    user_id = Identifier(required=True)
    entries = HasMany(WishlistEntry)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def products_are_unique(self):
        product_ids = [str(e.product_id) for e in self.entries]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"entries": ["A product can appear only once in the wishlist"]})

    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    def add(self, product_id):
        if any(str(e.product_id) == str(product_id) for e in self.entries):
            raise ConflictError({"product": ["Product already in wishlist"]})

        now = datetime.now(UTC)
        self.add_entries(WishlistEntry(product_id=product_id, added_at=now))
        self.updated_at = now
        self.raise_(WishlistItemAdded(wishlist_id=str(self.id), user_id=str(self.user_id), product_id=str(product_id)))

    def remove(self, product_id):
        entry = next((e for e in self.entries if str(e.product_id) == str(product_id)), None)
        if entry is None:
            raise ObjectNotFoundError({"product": ["Product not in wishlist"]})

        self.remove_entries(entry)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            WishlistItemRemoved(wishlist_id=str(self.id), user_id=str(self.user_id), product_id=str(product_id))
        )


@commerce.repository(part_of=Wishlist)
class WishlistRepository:
    def for_user(self, user_id) -> Wishlist | None:
        wishlists = self._dao.query.filter(user_id=str(user_id)).all().items
        return self.get(wishlists[0].id) if wishlists else None
