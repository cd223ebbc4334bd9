"""Application tests for wishlist commands and the wishlist view."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError

from commerce.catalogue.listing import DeleteProduct
from commerce.exceptions import ConflictError, ForbiddenError
from commerce.ordering.wishlist.management import AddToWishlist, RemoveFromWishlist, view_wishlist

USER = "user-001"


def _add(product_id, actor_id=USER):
    current_domain.process(
        AddToWishlist(user_id=USER, actor_id=actor_id, product_id=product_id), asynchronous=False
    )


def _remove(product_id):
    current_domain.process(RemoveFromWishlist(user_id=USER, actor_id=USER, product_id=product_id), asynchronous=False)


class TestWishlistCommands:
    def test_add_and_view(self, list_product):
        product_id = list_product(name="Lamp", price=25.0)
        _add(product_id)

        entries = view_wishlist(USER, USER)
        assert [e["product_id"] for e in entries] == [product_id]
        assert entries[0]["price"] == 25.0

    def test_view_in_insertion_order(self, list_product):
        first = list_product(name="First")
        second = list_product(name="Second")
        _add(first)
        _add(second)
        assert [e["product_id"] for e in view_wishlist(USER, USER)] == [first, second]

    def test_duplicate_conflicts(self, list_product):
        product_id = list_product()
        _add(product_id)
        with pytest.raises(ConflictError):
            _add(product_id)

    def test_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            _add("missing")

    def test_other_user_forbidden(self, list_product):
        with pytest.raises(ForbiddenError):
            _add(list_product(), actor_id="user-002")

    def test_remove(self, list_product):
        product_id = list_product()
        _add(product_id)
        _remove(product_id)
        assert view_wishlist(USER, USER) == []

    def test_remove_without_wishlist(self):
        with pytest.raises(ObjectNotFoundError):
            _remove("prod-001")

    def test_deleted_products_hidden(self, list_product):
        kept = list_product(name="Kept")
        gone = list_product(name="Gone")
        _add(kept)
        _add(gone)
        current_domain.process(
            DeleteProduct(actor_id="seller-001", actor_role="seller", product_id=gone), asynchronous=False
        )
        assert [e["product_id"] for e in view_wishlist(USER, USER)] == [kept]

    def test_empty_view(self):
        assert view_wishlist(USER, USER) == []
