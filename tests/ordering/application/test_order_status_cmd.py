"""Application tests for order status changes, deletion and read paths."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from commerce.catalogue.product import Product
from commerce.exceptions import ForbiddenError
from commerce.ordering.order.creation import CreateOrder
from commerce.ordering.order.order import Order
from commerce.ordering.order.payment import AttachPaymentIntent, RecordPaymentResult
from commerce.ordering.order.queries import order_details, order_history, seller_orders
from commerce.ordering.order.status import DeleteOrder, UpdateOrderStatus
from commerce.principal import Principal

USER = "user-001"


def _place(product_id, quantity=1, user_id=USER):
    return current_domain.process(
        CreateOrder(
            user_id=user_id,
            actor_id=user_id,
            items=json.dumps([{"product_id": product_id, "quantity": quantity}]),
        ),
        asynchronous=False,
    )


def _set_status(order_id, status, actor_id="seller-001", actor_role="seller"):
    current_domain.process(
        UpdateOrderStatus(order_id=order_id, status=status, actor_id=actor_id, actor_role=actor_role),
        asynchronous=False,
    )


def _delete(order_id, actor_role="admin"):
    current_domain.process(
        DeleteOrder(order_id=order_id, actor_id="admin-001", actor_role=actor_role), asynchronous=False
    )


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


class TestUpdateOrderStatus:
    def test_seller_of_an_item_updates(self, list_product):
        order_id = _place(list_product())
        _set_status(order_id, "shipped")
        assert _order(order_id).status == "shipped"

    def test_seller_without_items_forbidden(self, list_product):
        order_id = _place(list_product())
        with pytest.raises(ForbiddenError):
            _set_status(order_id, "shipped", actor_id="seller-002")

    def test_customer_forbidden(self, list_product):
        order_id = _place(list_product())
        with pytest.raises(ForbiddenError):
            _set_status(order_id, "delivered", actor_id=USER, actor_role="customer")

    def test_admin_updates_any_order(self, list_product):
        order_id = _place(list_product())
        _set_status(order_id, "delivered", actor_id="admin-001", actor_role="admin")
        assert _order(order_id).status == "delivered"

    def test_invalid_status(self, list_product):
        order_id = _place(list_product())
        with pytest.raises(ValidationError):
            _set_status(order_id, "lost")

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            _set_status("missing", "shipped")

    def test_cancel_releases_stock_once(self, list_product):
        product_id = list_product(stock=5)
        order_id = _place(product_id, quantity=3)

        _set_status(order_id, "cancelled")
        _set_status(order_id, "cancelled")

        assert current_domain.repository_for(Product).get(product_id).stock == 5
        assert _order(order_id).stock_reserved is False

    def test_cancelled_order_cannot_move(self, list_product):
        order_id = _place(list_product())
        _set_status(order_id, "cancelled")
        with pytest.raises(ValidationError):
            _set_status(order_id, "shipped")

    def test_payment_after_delivery_keeps_delivered(self, list_product):
        order_id = _place(list_product())
        _set_status(order_id, "delivered")
        current_domain.process(
            AttachPaymentIntent(order_id=order_id, payment_intent_id="intent-late"), asynchronous=False
        )

        current_domain.process(
            RecordPaymentResult(payment_intent_id="intent-late", succeeded=True), asynchronous=False
        )

        order = _order(order_id)
        assert order.payment_status == "completed"
        assert order.status == "delivered"


class TestDeleteOrder:
    def test_admin_soft_deletes(self, list_product):
        order_id = _place(list_product())
        _delete(order_id)
        assert _order(order_id).is_deleted is True

    def test_non_admin_forbidden(self, list_product):
        order_id = _place(list_product())
        with pytest.raises(ForbiddenError):
            _delete(order_id, actor_role="seller")

    def test_deleted_order_is_not_found(self, list_product):
        order_id = _place(list_product())
        _delete(order_id)
        with pytest.raises(ObjectNotFoundError):
            _set_status(order_id, "shipped")
        with pytest.raises(ObjectNotFoundError):
            _delete(order_id)


class TestOrderQueries:
    def test_history_newest_first_and_paginated(self, list_product):
        product_id = list_product(stock=10)
        order_ids = [_place(product_id) for _ in range(3)]

        page = order_history(USER, USER, page=1, per_page=2)
        assert page["total"] == 3
        assert [str(o.id) for o in page["items"]] == [order_ids[2], order_ids[1]]

        page = order_history(USER, USER, page=2, per_page=2)
        assert [str(o.id) for o in page["items"]] == [order_ids[0]]

    def test_history_excludes_deleted(self, list_product):
        product_id = list_product(stock=10)
        kept = _place(product_id)
        _delete(_place(product_id))
        assert [str(o.id) for o in order_history(USER, USER)["items"]] == [kept]

    def test_history_of_someone_else_forbidden(self):
        with pytest.raises(ForbiddenError):
            order_history(USER, "user-002")

    @pytest.mark.parametrize("page,per_page", [(0, 10), (1, 0), (1, 101)])
    def test_invalid_paging(self, page, per_page):
        with pytest.raises(ValidationError):
            order_history(USER, USER, page=page, per_page=per_page)

    def test_details_hidden_from_other_customers(self, list_product):
        order_id = _place(list_product())
        assert str(order_details(order_id, Principal(user_id=USER)).id) == order_id
        with pytest.raises(ObjectNotFoundError):
            order_details(order_id, Principal(user_id="user-002"))
        assert order_details(order_id, Principal(user_id="admin-001", role="admin"))

    def test_seller_orders(self, list_product):
        mine = _place(list_product(seller_id="seller-001"))
        _place(list_product(seller_id="seller-002"))

        orders = seller_orders("seller-001", Principal(user_id="seller-001", role="seller"))
        assert [str(o.id) for o in orders] == [mine]

    def test_seller_orders_for_another_seller_forbidden(self):
        with pytest.raises(ForbiddenError):
            seller_orders("seller-002", Principal(user_id="seller-001", role="seller"))

    def test_customer_cannot_view_seller_orders(self):
        with pytest.raises(ForbiddenError):
            seller_orders("user-001", Principal(user_id="user-001"))
