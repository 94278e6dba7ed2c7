"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.order.events import OrderItemPriceSet, OrderPlaced, OrderStatusChanged
from ordering.shared.errors import Conflict
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from tests.ordering.builders import make_order

_ORDER_EVENT_CLASSES = {
    "OrderPlaced": OrderPlaced,
    "OrderStatusChanged": OrderStatusChanged,
    "OrderItemPriceSet": OrderItemPriceSet,
}


@pytest.fixture()
def error():
    """Container for the exception an action raised, if any."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps: Order (plain aggregate, no persistence)
# ---------------------------------------------------------------------------
@given("a pending order", target_fixture="order")
def pending_order():
    order = make_order()
    order._events.clear()
    return order


@given(
    parsers.cfparse(
        "a pending order with {priced:d} stems at {price:f} and {market:d} market-priced stems"
    ),
    target_fixture="order",
)
def pending_order_with_market_line(priced, price, market):
    order = make_order(
        lines=[
            {"product_id": "rose-red", "quantity": priced, "price": price},
            {"product_id": "ranunculus", "quantity": market, "price": None},
        ]
    )
    order._events.clear()
    return order


@given("the order was confirmed", target_fixture="order")
def confirmed_order(order):
    order.confirm()
    order._events.clear()
    return order


@given("the order was dispatched", target_fixture="order")
def dispatched_order(order):
    order.dispatch()
    order._events.clear()
    return order


@given("the order was cancelled", target_fixture="order")
def cancelled_order(order):
    order.cancel()
    order._events.clear()
    return order


# ---------------------------------------------------------------------------
# Then steps: Order
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.status == status


@then(parsers.cfparse("the order total is {total:f}"))
def order_total_is(order, total):
    assert order.total == total


@then("the order action fails with a conflict")
def order_action_conflicts(error):
    assert isinstance(error["exc"], Conflict), f"Expected a conflict, got {error['exc']!r}"


@then("the order action fails with a validation error")
def order_action_invalid(error):
    assert isinstance(error["exc"], ValidationError), f"Expected a validation error, got {error['exc']!r}"


@then(parsers.cfparse("an {event_type} order event is raised"))
def order_event_raised(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in order._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in order._events]}"
