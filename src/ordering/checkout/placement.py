"""Order placement — command and handler."""

import json

from protean import handle
from protean.fields import Boolean, Float, Identifier, String, Text

from ordering.checkout.converter import CartToOrderConverter
from ordering.domain import ordering
from ordering.order.order import Order
from ordering.shared.current_user import CurrentUser


@ordering.command(part_of="Order")
class PlaceOrder:
    """Check out the user's cart."""

    user_id = Identifier(required=True)
    user_approved = Boolean(default=False)
    price_multiplier = Float(default=1.0)
    email = String(required=True, max_length=254)
    phone = String(max_length=30)
    notes = Text()
    delivery_address_id = Identifier()
    delivery_address = Text()  # JSON: address dict
    save_delivery_address = Boolean(default=False)
    billing_address = Text()  # JSON: address dict
    idempotency_key = String(max_length=255)


def _load(value):
    if not value:
        return None
    return json.loads(value) if isinstance(value, str) else value


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        user = CurrentUser(
            id=command.user_id,
            approved=bool(command.user_approved),
            price_multiplier=command.price_multiplier,
        )
        order = CartToOrderConverter().convert(
            user,
            email=command.email,
            delivery_address_id=command.delivery_address_id,
            delivery_address=_load(command.delivery_address),
            save_delivery_address=bool(command.save_delivery_address),
            billing_address=_load(command.billing_address),
            phone=command.phone,
            notes=command.notes,
            checkout_key=command.idempotency_key,
        )
        return str(order.id)
