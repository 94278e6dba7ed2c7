"""Finalizing order line prices — command and handler."""

import structlog
from protean import handle
from protean.fields import Float, Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class SetOrderItemPrice:
    """Set the price of one order line; 0 keeps it market-priced."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    price = Float(required=True, min_value=0.0)


@ordering.command_handler(part_of=Order)
class SetOrderItemPriceHandler:
    @handle(SetOrderItemPrice)
    def set_item_price(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        new_total = order.set_item_price(command.item_id, command.price)
        repo.add(order)

        logger.info(
            "Order item price set",
            order_id=str(order.id),
            item_id=str(command.item_id),
            price=command.price,
            order_total=new_total,
        )
        return new_total
