"""Domain events for the Cart aggregate."""

from protean.fields import DateTime, Identifier, Integer, Text

from ordering.domain import ordering


@ordering.event(part_of="Cart")
class CartItemAdded:
    """A product was added to the cart, or its quantity increased."""

    __version__ = 1

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    variant_id = Identifier()
    quantity = Integer(required=True)


@ordering.event(part_of="Cart")
class CartItemQuantityUpdated:
    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="Cart")
class CartItemRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.event(part_of="Cart")
class CartDrafted:
    """Staff prepared a cart on a customer's behalf."""

    __version__ = 1

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    drafted_by = Identifier()
    items = Text(required=True)  # JSON list of {product_id, variant_id, quantity}
    drafted_at = DateTime(required=True)


@ordering.event(part_of="Cart")
class CartConverted:
    """The cart was checked out; its items now live on the order."""

    __version__ = 1

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)
    items = Text(required=True)
    converted_at = DateTime(required=True)
