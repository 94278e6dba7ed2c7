"""Application tests for staff-driven order status changes."""

import pytest
from ordering.cart.cart import Cart, CartOrigin
from ordering.cart.items import AddToCart
from ordering.order.lifecycle import ChangeOrderStatus
from ordering.order.order import Order, OrderStatus
from ordering.shared.errors import InvalidTransition
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from tests.ordering.builders import persist_order


def _change(order_id, status, **kwargs):
    return current_domain.process(
        ChangeOrderStatus(order_id=str(order_id), status=status, **kwargs),
        asynchronous=False,
    )


def _reload(order):
    return current_domain.repository_for(Order).get(order.id)


class TestChangeOrderStatus:
    def test_walks_happy_path(self):
        order = persist_order()
        for status in ("Confirmed", "Out_For_Delivery", "Delivered"):
            assert _change(order.id, status) == status
        assert _reload(order).status == OrderStatus.DELIVERED.value

    def test_invalid_transition_is_not_persisted(self):
        order = persist_order()
        _change(order.id, "Confirmed")
        _change(order.id, "Out_For_Delivery")
        _change(order.id, "Delivered")

        with pytest.raises(InvalidTransition):
            _change(order.id, "Confirmed")
        assert _reload(order).status == OrderStatus.DELIVERED.value

    def test_cancelled_is_terminal(self):
        order = persist_order()
        _change(order.id, "Cancelled")
        with pytest.raises(InvalidTransition):
            _change(order.id, "Confirmed")

    def test_unknown_status_value(self):
        order = persist_order()
        with pytest.raises(ValidationError):
            _change(order.id, "Cart")

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            _change("missing-order", "Confirmed")


class TestReopenAsCart:
    def test_cancelled_items_return_to_new_cart(self):
        order = persist_order(user_id="cust-009")

        _change(order.id, "Cancelled", reopen_as_cart=True, changed_by="admin-1")

        cart = current_domain.repository_for(Cart).for_user("cust-009")
        assert cart.origin == CartOrigin.ADMIN_DRAFTED.value
        assert cart.drafted_by == "admin-1"
        lines = {(str(i.product_id), i.quantity) for i in cart.items}
        assert lines == {("rose-red", 2), ("tulip-white", 1)}
        assert _reload(order).status == OrderStatus.CANCELLED.value

    def test_items_merge_into_existing_cart(self, catalogue):
        catalogue.stock("rose-red", 50.0)
        current_domain.process(
            AddToCart(user_id="cust-009", product_id="rose-red", quantity=1),
            asynchronous=False,
        )
        order = persist_order(user_id="cust-009")

        _change(order.id, "Cancelled", reopen_as_cart=True)

        cart = current_domain.repository_for(Cart).for_user("cust-009")
        roses = next(i for i in cart.items if str(i.product_id) == "rose-red")
        assert roses.quantity == 3
        assert len(cart.items) == 2

    def test_only_with_cancellation(self):
        order = persist_order()
        with pytest.raises(ValidationError):
            _change(order.id, "Confirmed", reopen_as_cart=True)
        assert _reload(order).status == OrderStatus.PENDING.value
