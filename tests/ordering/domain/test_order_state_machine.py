"""Tests for Order state machine — valid transitions and invalid transition guards."""

import pytest
from ordering.order.events import OrderStatusChanged
from ordering.order.order import OrderStatus
from ordering.shared.errors import Conflict, InvalidTransition
from protean.exceptions import ValidationError

from tests.ordering.builders import make_order


def _order_at_state(target_status):
    """Create an order and advance it to the desired state."""
    order = make_order()
    order._events.clear()

    path = {
        OrderStatus.PENDING: [],
        OrderStatus.CONFIRMED: ["confirm"],
        OrderStatus.OUT_FOR_DELIVERY: ["confirm", "dispatch"],
        OrderStatus.DELIVERED: ["confirm", "dispatch", "deliver"],
        OrderStatus.CANCELLED: ["cancel"],
    }[target_status]
    for step in path:
        getattr(order, step)()
    order._events.clear()
    return order


class TestValidTransitions:
    def test_happy_path(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.confirm()
        order.dispatch()
        order.deliver()
        assert order.status == OrderStatus.DELIVERED.value

    @pytest.mark.parametrize("start", [OrderStatus.PENDING, OrderStatus.CONFIRMED])
    def test_cancel_before_dispatch(self, start):
        order = _order_at_state(start)
        order.cancel()
        assert order.status == OrderStatus.CANCELLED.value

    def test_transition_raises_status_changed_event(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.confirm()
        event = order._events[-1]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "Pending"
        assert event.new_status == "Confirmed"
        assert event.order_number == "PB-00001"

    def test_transition_to_by_value(self):
        order = _order_at_state(OrderStatus.CONFIRMED)
        order.transition_to("Out_For_Delivery")
        assert order.status == OrderStatus.OUT_FOR_DELIVERY.value

    def test_transition_to_by_enum(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.transition_to(OrderStatus.CANCELLED)
        assert order.status == OrderStatus.CANCELLED.value


class TestInvalidTransitions:
    @pytest.mark.parametrize(
        "start, target",
        [
            (OrderStatus.PENDING, OrderStatus.OUT_FOR_DELIVERY),
            (OrderStatus.PENDING, OrderStatus.DELIVERED),
            (OrderStatus.PENDING, OrderStatus.PENDING),
            (OrderStatus.CONFIRMED, OrderStatus.DELIVERED),
            (OrderStatus.CONFIRMED, OrderStatus.PENDING),
            (OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED),
            (OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CONFIRMED),
            (OrderStatus.DELIVERED, OrderStatus.CONFIRMED),
        ],
    )
    def test_disallowed(self, start, target):
        order = _order_at_state(start)
        with pytest.raises(InvalidTransition) as exc:
            order.transition_to(target)
        assert exc.value.current == start.value
        assert exc.value.target == target.value
        assert order.status == start.value

    @pytest.mark.parametrize("terminal", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    @pytest.mark.parametrize("target", list(OrderStatus))
    def test_terminal_states_have_no_exits(self, terminal, target):
        order = _order_at_state(terminal)
        with pytest.raises(InvalidTransition):
            order.transition_to(target)

    def test_invalid_transition_is_a_conflict(self):
        order = _order_at_state(OrderStatus.DELIVERED)
        with pytest.raises(Conflict) as exc:
            order.confirm()
        assert exc.value.code == "CONFLICT"
        assert "Delivered" in exc.value.message

    def test_unknown_status_is_a_validation_error(self):
        order = _order_at_state(OrderStatus.PENDING)
        with pytest.raises(ValidationError):
            order.transition_to("Cart")

    def test_failed_transition_raises_no_event(self):
        order = _order_at_state(OrderStatus.CANCELLED)
        with pytest.raises(InvalidTransition):
            order.confirm()
        assert order._events == []
