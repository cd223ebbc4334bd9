"""BDD tests for cart pricing and stock checks."""

from pytest_bdd import given, parsers, scenarios, then, when

from commerce.exceptions import InsufficientStockError
from commerce.ordering.cart.items import AddToCart, UpdateCartQuantity
from commerce.ordering.cart.view import view_cart

scenarios("features/cart_pricing.feature")


def _add(services, products, user, qty, name):
    services.manager.execute(AddToCart(user_id=user, actor_id=user, product_id=products[name], quantity=qty))


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('user "{user}" has {qty:d} of "{name}" in the cart'), target_fixture="cart_owner")
def cart_with_items(services, products, user, qty, name):
    _add(services, products, user, qty, name)
    return user


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('user "{user}" adds {qty:d} of "{name}" to the cart'), target_fixture="cart_owner")
def add_to_cart(services, products, user, qty, name):
    _add(services, products, user, qty, name)
    return user


@when(parsers.cfparse('user "{user}" sets the quantity of "{name}" to {qty:d}'))
def set_quantity(services, products, error, user, name, qty):
    try:
        services.manager.execute(
            UpdateCartQuantity(user_id=user, actor_id=user, product_id=products[name], quantity=qty)
        )
    except InsufficientStockError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart shows {count:d} line with quantity {qty:d} and line total {total:f}"))
def cart_line(cart_owner, count, qty, total):
    view = view_cart(cart_owner, cart_owner)
    assert len(view.items) == count
    assert view.items[0].quantity == qty
    assert view.items[0].total_price == total


@then(parsers.cfparse("the cart total is {total:f}"))
def cart_total(cart_owner, total):
    assert view_cart(cart_owner, cart_owner).total_amount == total


@then("the cart is empty")
def cart_is_empty(cart_owner):
    assert view_cart(cart_owner, cart_owner).items == []
