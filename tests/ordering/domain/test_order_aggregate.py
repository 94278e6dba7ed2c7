"""Tests for the Order aggregate — creation snapshot, totals and price finalization."""

import json

import pytest
from ordering.order.events import OrderItemPriceSet, OrderPlaced
from ordering.order.order import AddressSnapshot, Order, OrderItem, OrderStatus
from ordering.shared.errors import Conflict
from protean.exceptions import ObjectNotFoundError, ValidationError

from tests.ordering.builders import make_address, make_order

MARKET_LINES = [
    {"product_id": "rose-red", "quantity": 2, "price": 50.0},
    {"product_id": "ranunculus", "quantity": 1, "price": None},
]


class TestOrderCreation:
    def test_total_sums_resolved_lines(self):
        order = make_order()
        assert order.total == 130.0
        assert order.status == OrderStatus.PENDING.value
        assert len(order.items) == 2

    def test_market_line_is_excluded_from_total(self):
        order = make_order(lines=MARKET_LINES)
        assert order.total == 100.0
        market = [item for item in order.items if item.is_market_price]
        assert len(market) == 1
        assert market[0].price is None
        assert market[0].subtotal == 0.0
        assert order.has_market_items

    def test_snapshots_delivery_address(self):
        address = make_address(persist=False, company="Bloom Co", street2="Dock 4")
        order = make_order(address=address)
        assert isinstance(order.delivery_address, AddressSnapshot)
        assert order.delivery_address.company == "Bloom Co"
        assert order.delivery_address.street2 == "Dock 4"
        assert order.delivery_address.country == "US"
        assert str(order.delivery_address_id) == str(address.id)

    def test_billing_defaults_to_none(self):
        order = make_order()
        assert order.billing_address is None
        assert order.billing_address_id is None

    def test_separate_billing_address(self):
        billing = make_address(persist=False, street1="1 Invoice Way")
        order = make_order(billing_address=billing)
        assert order.billing_address.street1 == "1 Invoice Way"
        assert str(order.billing_address_id) == str(billing.id)

    def test_raises_order_placed(self):
        order = make_order(lines=MARKET_LINES)
        event = order._events[-1]
        assert isinstance(event, OrderPlaced)
        assert event.order_number == "PB-00001"
        assert event.total == 100.0
        assert event.item_count == 2
        assert event.has_market_items is True
        items = json.loads(event.items)
        assert items[1]["price"] is None

    def test_item_keeps_product_name(self):
        order = make_order(
            lines=[{"product_id": "rose-red", "product_name": "Red Rose", "quantity": 2, "price": 50.0}]
        )
        assert order.items[0].product_name == "Red Rose"
        assert json.loads(order._events[-1].items)[0]["product_name"] == "Red Rose"

    def test_email_is_required(self):
        with pytest.raises(ValidationError):
            make_order(email=None)

    def test_line_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            make_order(lines=[{"product_id": "rose-red", "quantity": 0, "price": 5.0}])

    def test_resolved_subtotal_rounds_half_up(self):
        order = make_order(lines=[{"product_id": "stock", "quantity": 3, "price": 3.335}])
        assert order.total == 10.01


class TestTotalInvariant:
    def test_total_must_match_items(self):
        address = make_address(persist=False)
        with pytest.raises(ValidationError) as exc:
            Order(
                order_number="PB-00009",
                user_id="cust-001",
                email="rosa@example.com",
                total=99.0,
                delivery_address_id=address.id,
                items=[OrderItem(product_id="rose-red", quantity=2, price=50.0)],
            )
        assert "total" in exc.value.messages


class TestSetItemPrice:
    def _market_order(self):
        order = make_order(lines=MARKET_LINES)
        order._events.clear()
        return order

    def test_finalizing_market_price_updates_total(self):
        order = self._market_order()
        market_item = next(i for i in order.items if i.is_market_price)

        new_total = order.set_item_price(market_item.id, 42.5)

        assert new_total == 142.5
        assert order.total == 142.5
        assert market_item.price == 42.5
        assert not order.has_market_items

    def test_repricing_a_resolved_line(self):
        order = make_order()
        rose = next(i for i in order.items if i.product_id == "rose-red")
        assert order.set_item_price(rose.id, 45.0) == 120.0

    def test_zero_keeps_line_market_priced(self):
        order = self._market_order()
        rose = next(i for i in order.items if i.product_id == "rose-red")
        assert order.set_item_price(rose.id, 0) == 0.0
        assert rose.price is None
        assert rose.is_market_price

    def test_raises_price_set_event(self):
        order = self._market_order()
        market_item = next(i for i in order.items if i.is_market_price)
        order.set_item_price(market_item.id, 10.0)
        event = order._events[-1]
        assert isinstance(event, OrderItemPriceSet)
        assert event.previous_price is None
        assert event.new_price == 10.0
        assert event.new_total == 110.0

    def test_negative_price_rejected(self):
        order = self._market_order()
        with pytest.raises(ValidationError):
            order.set_item_price(order.items[0].id, -1)

    def test_unknown_item(self):
        order = self._market_order()
        with pytest.raises(ObjectNotFoundError):
            order.set_item_price("missing-item", 10.0)

    def test_cancelled_order_is_a_conflict(self):
        order = self._market_order()
        order.cancel()
        with pytest.raises(Conflict):
            order.set_item_price(order.items[0].id, 10.0)

    def test_allowed_after_delivery(self):
        order = self._market_order()
        order.confirm()
        order.dispatch()
        order.deliver()
        market_item = next(i for i in order.items if i.is_market_price)
        assert order.set_item_price(market_item.id, 5.0) == 105.0


class TestOrderFactoryDefaults:
    def test_timestamps(self):
        order = make_order()
        assert order.created_at is not None
        assert order.created_at == order.updated_at