"""Cart aggregate (CQRS) — the mutable selection a customer checks out.

Each user has at most one cart. It is filled either by the customer
(``Self_Serve``) or by staff preparing an order on the customer's behalf
(``Admin_Drafted``); both kinds check out the same way. Items carry no price:
prices are looked up from the catalogue and snapshotted onto the order at
checkout. Checking out empties the cart but keeps the row.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from ordering.cart.events import (
    CartConverted,
    CartDrafted,
    CartItemAdded,
    CartItemQuantityUpdated,
    CartItemRemoved,
)
from ordering.domain import ordering

MAX_ITEM_QUANTITY = 999


class CartOrigin(Enum):
    SELF_SERVE = "Self_Serve"
    ADMIN_DRAFTED = "Admin_Drafted"


@ordering.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    variant_id = Identifier()
    quantity = Integer(required=True, min_value=1, max_value=MAX_ITEM_QUANTITY)
    added_at = DateTime()

    def matches(self, product_id, variant_id):
        return str(self.product_id) == str(product_id) and (
            str(self.variant_id) if self.variant_id else None
        ) == (str(variant_id) if variant_id else None)


@ordering.aggregate
class Cart:
    user_id = Identifier(required=True, unique=True)
    origin = String(choices=CartOrigin, default=CartOrigin.SELF_SERVE.value)
    drafted_by = Identifier()
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id, origin=CartOrigin.SELF_SERVE, drafted_by=None):
        now = datetime.now(UTC)
        return cls(
            user_id=user_id,
            origin=origin.value,
            drafted_by=drafted_by,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_empty(self):
        return not self.items

    def _item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ObjectNotFoundError(f"Item `{item_id}` not found in cart")
        return item

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, variant_id=None, quantity=1):
        """Add a product, or raise the quantity of the matching line."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        now = datetime.now(UTC)
        existing = next((i for i in self.items if i.matches(product_id, variant_id)), None)

        if existing:
            if existing.quantity + quantity > MAX_ITEM_QUANTITY:
                raise ValidationError({"quantity": [f"Quantity cannot exceed {MAX_ITEM_QUANTITY}"]})
            existing.quantity += quantity
            item = existing
        else:
            item = CartItem(
                product_id=product_id,
                variant_id=variant_id,
                quantity=quantity,
                added_at=now,
            )
            self.add_items(item)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                item_id=str(item.id),
                product_id=str(product_id),
                variant_id=str(variant_id) if variant_id else None,
                quantity=quantity,
            )
        )
        return item

    def update_item_quantity(self, item_id, new_quantity):
        """Set the quantity of a line. Zero removes it."""
        if new_quantity == 0:
            self.remove_item(item_id)
            return
        if new_quantity < 0 or new_quantity > MAX_ITEM_QUANTITY:
            raise ValidationError({"quantity": [f"Quantity must be between 0 and {MAX_ITEM_QUANTITY}"]})

        item = self._item(item_id)
        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, item_id):
        item = self._item(item_id)
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item_id),
            )
        )

    # -------------------------------------------------------------------
    # Staff drafting
    # -------------------------------------------------------------------
    def draft(self, items, drafted_by=None):
        """Merge staff-selected items into the cart and tag it as drafted.

        Args:
            items: List of dicts with product_id, variant_id and quantity.
        """
        if not items:
            raise ValidationError({"items": ["At least one item is required"]})

        now = datetime.now(UTC)
        for line in items:
            quantity = int(line.get("quantity", 1))
            if quantity < 1 or quantity > MAX_ITEM_QUANTITY:
                raise ValidationError({"quantity": [f"Quantity must be between 1 and {MAX_ITEM_QUANTITY}"]})

            existing = next((i for i in self.items if i.matches(line["product_id"], line.get("variant_id"))), None)
            if existing:
                existing.quantity = min(existing.quantity + quantity, MAX_ITEM_QUANTITY)
            else:
                self.add_items(
                    CartItem(
                        product_id=line["product_id"],
                        variant_id=line.get("variant_id"),
                        quantity=quantity,
                        added_at=now,
                    )
                )

        self.origin = CartOrigin.ADMIN_DRAFTED.value
        self.drafted_by = drafted_by
        self.updated_at = now

        self.raise_(
            CartDrafted(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                drafted_by=str(drafted_by) if drafted_by else None,
                items=json.dumps(self.item_lines()),
                drafted_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def item_lines(self):
        return [
            {
                "product_id": str(item.product_id),
                "variant_id": str(item.variant_id) if item.variant_id else None,
                "quantity": item.quantity,
            }
            for item in self.items
        ]

    def mark_converted(self, order_id):
        """Empty the cart after its items became an order."""
        if self.is_empty:
            raise ValidationError({"cart": ["Cannot convert an empty cart"]})

        items_snapshot = self.item_lines()
        for item in list(self.items):
            self.remove_items(item)

        now = datetime.now(UTC)
        self.origin = CartOrigin.SELF_SERVE.value
        self.drafted_by = None
        self.updated_at = now

        self.raise_(
            CartConverted(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                order_id=str(order_id),
                items=json.dumps(items_snapshot),
                converted_at=now,
            )
        )


@ordering.repository(part_of=Cart)
class CartRepository:
    def for_user(self, user_id) -> Cart | None:
        carts = self._dao.query.filter(user_id=str(user_id)).all().items
        return carts[0] if carts else None

    def get_or_create(self, user_id, origin=CartOrigin.SELF_SERVE, drafted_by=None) -> Cart:
        """The user's cart; a new, unsaved one if they have none yet."""
        cart = self.for_user(user_id)
        if cart is None:
            cart = Cart.create(user_id=user_id, origin=origin, drafted_by=drafted_by)
        return cart

    def drafted(self) -> list[Cart]:
        """Carts staff prepared for customers, newest first."""
        carts = self._dao.query.filter(origin=CartOrigin.ADMIN_DRAFTED.value).all().items
        return sorted(carts, key=lambda c: c.updated_at, reverse=True)
