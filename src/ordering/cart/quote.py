"""Live pricing of a cart for a particular buyer.

Used both to show the cart and to snapshot prices at checkout, so the figure
a customer sees is the one the order records.
"""

from dataclasses import dataclass, field

from ordering.catalogue import get_catalogue
from ordering.pricing.engine import PricingEngine
from ordering.shared.money import resolved_subtotal


@dataclass
class QuotedLine:
    item_id: str
    product_id: str
    variant_id: str | None
    name: str
    quantity: int
    price: float | None  # None for market-priced stems

    @property
    def is_market_price(self) -> bool:
        return self.price is None


@dataclass
class CartQuote:
    lines: list[QuotedLine] = field(default_factory=list)

    @property
    def subtotal(self) -> float:
        return resolved_subtotal((line.price, line.quantity) for line in self.lines)

    @property
    def has_market_items(self) -> bool:
        return any(line.is_market_price for line in self.lines)


def quote_cart(cart, multiplier, catalogue=None, engine=None) -> CartQuote:
    """Price every cart line from the live catalogue with ``multiplier`` applied."""
    catalogue = catalogue or get_catalogue()
    engine = engine or PricingEngine.from_config()
    engine.validate_multiplier(multiplier)

    quote = CartQuote()
    for item in cart.items:
        entry = catalogue.lookup(str(item.product_id), str(item.variant_id) if item.variant_id else None)
        quote.lines.append(
            QuotedLine(
                item_id=str(item.id),
                product_id=str(item.product_id),
                variant_id=str(item.variant_id) if item.variant_id else None,
                name=entry.name,
                quantity=item.quantity,
                price=engine.adjust_price(entry.price, multiplier),
            )
        )
    return quote
