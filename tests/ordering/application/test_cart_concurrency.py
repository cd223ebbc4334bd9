"""Application tests for concurrent writes to the same user's cart.

Each test replays an interleaving: the command under test reads the cart
before another writer commits, then tries to write on top of it.
"""

from unittest.mock import patch

import pytest
from protean import current_domain
from protean.exceptions import ExpectedVersionError
from sqlalchemy.exc import IntegrityError

from commerce.catalogue.store import CatalogStore
from commerce.ordering.cart.cart import Cart
from commerce.ordering.cart.items import AddToCart
from commerce.ordering.cart.view import view_cart
from commerce.ordering.consistency import is_duplicate_write

USER = "user-009"


def _add(product_id, quantity=1):
    return AddToCart(user_id=USER, actor_id=USER, product_id=product_id, quantity=quantity)


def _lines():
    return sorted((line.name, line.quantity) for line in view_cart(USER, USER).items)


def _reads_first(first_result):
    """Make the next ``cart_for`` return ``first_result`` once, then read for real."""
    repo_class = type(current_domain.repository_for(Cart))
    real = repo_class.cart_for
    reads = []

    def cart_for(repo, user_id):
        reads.append(user_id)
        return first_result if len(reads) == 1 else real(repo, user_id)

    return patch.object(repo_class, "cart_for", cart_for), reads


class TestFirstAdd:
    def test_both_first_adds_survive(self, services, list_product):
        first = list_product(name="A")
        second = list_product(name="B")

        services.manager.execute(_add(first))
        interleaved, reads = _reads_first(None)
        with interleaved:
            services.manager.execute(_add(second))

        assert len(reads) == 2
        assert _lines() == [("A", 1), ("B", 1)]

    def test_one_cart_record_per_user(self, services, list_product):
        first = list_product(name="A")
        second = list_product(name="B")

        services.manager.execute(_add(first))
        interleaved, _ = _reads_first(None)
        with interleaved:
            services.manager.execute(_add(second))

        carts = current_domain.repository_for(Cart)._dao.query.filter(user_id=USER).all().items
        assert len(carts) == 1

    def test_claim_rejects_a_second_new_cart(self, services, list_product):
        services.manager.execute(_add(list_product()))

        with pytest.raises(ExpectedVersionError):
            current_domain.repository_for(Cart).claim(Cart.create(user_id=USER))


class TestExistingCart:
    def test_stale_cart_write_is_rejected(self, services, list_product):
        first = list_product(name="A")
        second = list_product(name="B")
        third = list_product(name="C")
        repo = current_domain.repository_for(Cart)

        services.manager.execute(_add(first))
        stale = repo.live_cart_for(USER)
        services.manager.execute(_add(second))

        stale.add_item(CatalogStore().get_product(third), 1)
        with pytest.raises(ExpectedVersionError):
            repo.add(stale)

    def test_stale_add_is_retried_and_both_survive(self, services, list_product):
        first = list_product(name="A")
        second = list_product(name="B")
        third = list_product(name="C")

        services.manager.execute(_add(first))
        stale = current_domain.repository_for(Cart).live_cart_for(USER)
        services.manager.execute(_add(second))

        interleaved, reads = _reads_first(stale)
        with interleaved:
            services.manager.execute(_add(third))

        assert len(reads) == 2
        assert _lines() == [("A", 1), ("B", 1), ("C", 1)]


class TestDuplicateInsert:
    def test_wrapped_integrity_error_is_detected(self):
        try:
            try:
                raise IntegrityError("INSERT INTO cart", {}, Exception("duplicate key"))
            except IntegrityError as exc:
                raise RuntimeError("transaction failed") from exc
        except RuntimeError as wrapped:
            assert is_duplicate_write(wrapped)

    def test_other_errors_are_not_duplicates(self):
        assert not is_duplicate_write(RuntimeError("disk full"))

    def test_duplicate_insert_is_retried(self, services, list_product):
        product_id = list_product()
        real = services.manager.domain.process
        calls = []

        def process(command, asynchronous=True):
            calls.append(command)
            if len(calls) == 1:
                raise IntegrityError("INSERT INTO cart", {}, Exception("duplicate key"))
            return real(command, asynchronous=asynchronous)

        with patch.object(services.manager.domain, "process", process):
            services.manager.execute(_add(product_id))

        assert len(calls) == 2
        assert len(view_cart(USER, USER).items) == 1
