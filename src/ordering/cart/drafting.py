"""Staff-drafted carts — command and handler.

Staff can prepare a cart for a customer (for example after a phone order).
The customer, or staff acting for them, then checks it out like any other
cart.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart, CartOrigin
from ordering.catalogue import get_catalogue
from ordering.domain import ordering

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class DraftCartForCustomer:
    user_id = Identifier(required=True)
    drafted_by = Identifier()
    items = Text(required=True)  # JSON: list of {product_id, variant_id, quantity}


@ordering.command_handler(part_of=Cart)
class DraftCartHandler:
    @handle(DraftCartForCustomer)
    def draft_cart(self, command):
        items = json.loads(command.items) if isinstance(command.items, str) else command.items

        catalogue = get_catalogue()
        for line in items:
            catalogue.lookup(line["product_id"], line.get("variant_id"))

        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(
            command.user_id,
            origin=CartOrigin.ADMIN_DRAFTED,
            drafted_by=command.drafted_by,
        )
        cart.draft(items, drafted_by=command.drafted_by)
        repo.add(cart)

        logger.info(
            "Cart drafted for customer",
            cart_id=str(cart.id),
            user_id=str(command.user_id),
            drafted_by=str(command.drafted_by) if command.drafted_by else None,
            item_count=len(cart.items),
        )
        return str(cart.id)
