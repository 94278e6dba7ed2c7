from protean.utils.globals import current_domain

from ordering.numbering.format import format_order_number
from ordering.numbering.port import SequenceSource
from ordering.order.order import Order
from ordering.shared.errors import Conflict


class OrderNumberGenerator:
    def __init__(self, source: SequenceSource) -> None:
        self.source = source

    def next(self) -> str:
        """Allocate the next order number.

        Raises ``Conflict`` if the number is already taken, which happens when
        the source was seeded behind the orders already stored.
        """
        order_number = format_order_number(self.source.next_value())
        if current_domain.repository_for(Order).find_by_number(order_number) is not None:
            raise Conflict(f"Order number {order_number} is already in use")
        return order_number
