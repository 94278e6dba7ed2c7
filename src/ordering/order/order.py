"""Order aggregate (CQRS) — the immutable result of a checkout.

An order is a snapshot: item prices are captured from the catalogue with the
buyer's multiplier applied at checkout, and the delivery and billing
addresses are copied in as value objects. Later catalogue or profile edits
never reach an existing order. The only things that change afterwards are the
status, driven by staff through the state machine below, and the price of
market-priced lines, which staff finalize once the day's price is known.

State Machine:
    PENDING → CONFIRMED → OUT_FOR_DELIVERY → DELIVERED
    CANCELLED (from PENDING, CONFIRMED)
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.numbering.format import parse_order_number
from ordering.order.events import OrderItemPriceSet, OrderPlaced, OrderStatusChanged
from ordering.shared.errors import Conflict, InvalidTransition
from ordering.shared.money import resolved_subtotal, round_money


class OrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    OUT_FOR_DELIVERY = "Out_For_Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED},
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


@ordering.value_object(part_of="Order")
class AddressSnapshot:
    """Postal and contact details as they were when the order was placed."""

    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)
    company = String(max_length=255)
    street1 = String(required=True, max_length=255)
    street2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip = String(required=True, max_length=20)
    country = String(required=True, max_length=100)
    email = String(max_length=254)
    phone = String(max_length=30)

    @classmethod
    def from_address(cls, address):
        return cls(**address.to_dict())


@ordering.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    variant_id = Identifier()
    product_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    price = Float(min_value=0.0)  # None until a market price is finalized

    @property
    def is_market_price(self):
        return self.price is None

    @property
    def subtotal(self):
        if self.price is None:
            return 0.0
        return round_money(self.price * self.quantity)


@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=20, unique=True)
    user_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    total = Float(default=0.0)
    email = String(required=True, max_length=254)
    phone = String(max_length=30)
    notes = Text()
    delivery_address_id = Identifier(required=True)
    billing_address_id = Identifier()
    delivery_address = ValueObject(AddressSnapshot)
    billing_address = ValueObject(AddressSnapshot)
    checkout_key = String(max_length=255)
    items = HasMany(OrderItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_match_resolved_items(self):
        expected = resolved_subtotal((item.price, item.quantity) for item in self.items)
        if round_money(self.total or 0) != expected:
            raise ValidationError({"total": [f"Order total {self.total} does not match item subtotal {expected}"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        order_number,
        user_id,
        lines,
        delivery_address,
        email,
        billing_address=None,
        phone=None,
        notes=None,
        checkout_key=None,
    ):
        """Create an order from priced cart lines.

        Args:
            lines: List of dicts with product_id, variant_id, product_name,
                   quantity and price (``None`` for market-priced lines).
            delivery_address: The resolved delivery Address aggregate.
            billing_address: A separate billing Address, or None to bill
                             to the delivery address.
        """
        now = datetime.now(UTC)
        items = [
            OrderItem(
                product_id=line["product_id"],
                variant_id=line.get("variant_id"),
                product_name=line.get("product_name"),
                quantity=line["quantity"],
                price=line.get("price"),
            )
            for line in lines
        ]
        total = resolved_subtotal((item.price, item.quantity) for item in items)

        order = cls(
            order_number=order_number,
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            total=total,
            email=email,
            phone=phone,
            notes=notes,
            delivery_address_id=delivery_address.id,
            delivery_address=AddressSnapshot.from_address(delivery_address),
            billing_address_id=billing_address.id if billing_address else None,
            billing_address=AddressSnapshot.from_address(billing_address) if billing_address else None,
            checkout_key=checkout_key,
            items=items,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                user_id=str(user_id),
                items=json.dumps(
                    [
                        {
                            "product_id": str(item.product_id),
                            "variant_id": str(item.variant_id) if item.variant_id else None,
                            "product_name": item.product_name,
                            "quantity": item.quantity,
                            "price": item.price,
                        }
                        for item in items
                    ]
                ),
                total=total,
                item_count=len(items),
                has_market_items=any(item.price is None for item in items),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def has_market_items(self):
        return any(item.is_market_price for item in self.items)

    def resolved_subtotal(self):
        return resolved_subtotal((item.price, item.quantity) for item in self.items)

    def item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ObjectNotFoundError(f"Item `{item_id}` not found in order {self.order_number}")
        return item

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransition(current.value, target_status.value)

    def _transition(self, target_status):
        self._assert_can_transition(target_status)
        previous = self.status
        now = datetime.now(UTC)
        self.status = target_status.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                new_status=target_status.value,
                changed_at=now,
            )
        )

    def confirm(self):
        self._transition(OrderStatus.CONFIRMED)

    def dispatch(self):
        """Hand the order to the driver."""
        self._transition(OrderStatus.OUT_FOR_DELIVERY)

    def deliver(self):
        self._transition(OrderStatus.DELIVERED)

    def cancel(self):
        self._transition(OrderStatus.CANCELLED)

    def transition_to(self, status):
        """Move to ``status`` given as an OrderStatus or its string value."""
        try:
            target = OrderStatus(status.value if isinstance(status, OrderStatus) else status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status {status}"]}) from None

        self._transition(target)

    # -------------------------------------------------------------------
    # Price finalization
    # -------------------------------------------------------------------
    def set_item_price(self, item_id, price):
        """Finalize the price of one line and recompute the total.

        A price of 0 leaves the line market-priced. Returns the new total.
        """
        if OrderStatus(self.status) == OrderStatus.CANCELLED:
            raise Conflict(f"Cannot change prices on cancelled order {self.order_number}")
        if price is None or price < 0:
            raise ValidationError({"price": ["Price must be zero or greater"]})

        item = self.item(item_id)
        previous_price = item.price
        new_price = round_money(price) if price > 0 else None

        with atomic_change(self):
            item.price = new_price
            self.total = self.resolved_subtotal()
            self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderItemPriceSet(
                order_id=str(self.id),
                item_id=str(item.id),
                previous_price=previous_price,
                new_price=new_price,
                new_total=self.total,
            )
        )
        return self.total


@ordering.repository(part_of=Order)
class OrderRepository:
    def find_by_number(self, order_number) -> Order | None:
        orders = self._dao.query.filter(order_number=order_number).all().items
        return orders[0] if orders else None

    def find_by_checkout_key(self, user_id, checkout_key) -> Order | None:
        orders = self._dao.query.filter(user_id=str(user_id), checkout_key=checkout_key).all().items
        return orders[0] if orders else None

    def find_for_user(self, order_id, user_id) -> Order | None:
        orders = self._dao.query.filter(id=str(order_id), user_id=str(user_id)).all().items
        return orders[0] if orders else None

    def for_user(self, user_id) -> list[Order]:
        """A user's orders, newest first."""
        orders = self._dao.query.filter(user_id=str(user_id)).all().items
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def list_all(self, status=None) -> list[Order]:
        query = self._dao.query
        if status:
            query = query.filter(status=status)
        return sorted(query.all().items, key=lambda o: o.created_at, reverse=True)

    def references_address(self, address_id) -> bool:
        """True when any order was delivered or billed to ``address_id``."""
        address_id = str(address_id)
        return bool(
            self._dao.query.filter(delivery_address_id=address_id).all().items
            or self._dao.query.filter(billing_address_id=address_id).all().items
        )

    def highest_number(self) -> int:
        """Numeric part of the highest stored order number, or 0.

        Compared as integers: PB-100000 is higher than PB-99999 even though
        it sorts lower as a string.
        """
        numbers = (parse_order_number(o.order_number) for o in self._dao.query.all().items)
        return max((n for n in numbers if n is not None), default=0)
