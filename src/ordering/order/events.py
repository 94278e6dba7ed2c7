"""Domain events for the Order aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A cart was checked out and turned into an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of {product_id, variant_id, quantity, price}
    total = Float(required=True)
    item_count = Integer(required=True)
    has_market_items = Boolean(default=False)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderItemPriceSet:
    """Staff finalized the price of an order line, usually a market-priced one."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_price = Float()
    new_price = Float()
    new_total = Float(required=True)
