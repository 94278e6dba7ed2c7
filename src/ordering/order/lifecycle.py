"""Order status changes — command and handler.

Staff move orders through the state machine on the Order aggregate. A
cancellation can also put the order's items back into the customer's cart
so it can be corrected and checked out again; prices are quoted afresh at
that next checkout.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart, CartOrigin
from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    reopen_as_cart = Boolean(default=False)
    changed_by = Identifier()


@ordering.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(ChangeOrderStatus)
    def change_status(self, command):
        if command.reopen_as_cart and command.status != OrderStatus.CANCELLED.value:
            raise ValidationError({"reopen_as_cart": ["Only a cancelled order can be reopened as a cart"]})

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous_status = order.status
        order.transition_to(command.status)
        repo.add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            order_number=order.order_number,
            previous_status=previous_status,
            new_status=order.status,
        )

        if command.reopen_as_cart:
            self._reopen_as_cart(order, command.changed_by)

        return order.status

    def _reopen_as_cart(self, order, changed_by):
        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.get_or_create(order.user_id, origin=CartOrigin.ADMIN_DRAFTED, drafted_by=changed_by)
        cart.draft(
            [
                {
                    "product_id": str(item.product_id),
                    "variant_id": str(item.variant_id) if item.variant_id else None,
                    "quantity": item.quantity,
                }
                for item in order.items
            ],
            drafted_by=changed_by,
        )
        cart_repo.add(cart)
        logger.info("Cancelled order reopened as cart", order_id=str(order.id), cart_id=str(cart.id))
