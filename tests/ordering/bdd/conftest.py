"""Shared BDD fixtures and step definitions for carts and orders."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then, when

from commerce.catalogue.listing import AddProduct, UpdateProduct
from commerce.catalogue.product import Product
from commerce.exceptions import InsufficientStockError

SELLER_ID = "seller-001"


@pytest.fixture()
def products():
    """Product ids by the name used in the feature file."""
    return {}


@pytest.fixture()
def error():
    """Container for the error a When step captured."""
    return {"exc": None}


def update_product(manager, product_id, **changes):
    manager.execute(UpdateProduct(actor_id=SELLER_ID, actor_role="seller", product_id=product_id, **changes))


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced at {price:f} with {stock:d} in stock'))
def listed_product(services, products, name, price, stock):
    products[name] = services.manager.execute(
        AddProduct(
            actor_id=SELLER_ID,
            actor_role="seller",
            seller_id=SELLER_ID,
            name=name,
            price=price,
            stock=stock,
        )
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the seller reprices "{name}" to {price:f}'))
def reprice(services, products, name, price):
    update_product(services.manager, products[name], price=price)


@when(parsers.cfparse('the seller deactivates "{name}"'))
def deactivate(services, products, name):
    update_product(services.manager, products[name], is_active=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the request fails with insufficient stock")
def fails_with_insufficient_stock(error):
    assert isinstance(error["exc"], InsufficientStockError)


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def product_stock(products, name, stock):
    assert current_domain.repository_for(Product).get(products[name]).stock == stock
