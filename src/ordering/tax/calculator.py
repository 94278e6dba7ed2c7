"""Sales tax for orders.

The business delivers only inside California, so every order is taxed at
the California rate regardless of the address on it. Market-priced lines
are left out until staff finalize their price.
"""

from dataclasses import dataclass
from decimal import Decimal

from ordering.shared.money import quantize, to_decimal

CA_TAX_RATE = Decimal("0.0725")
CA_TAX_LABEL = "CA 7.25%"


@dataclass(frozen=True)
class TaxLine:
    tax: float
    is_california: bool
    tax_label: str
    rate: float
    subtotal: float


def compute_tax(subtotal) -> TaxLine:
    """Tax due on an already resolved subtotal."""
    subtotal = quantize(to_decimal(subtotal))
    return TaxLine(
        tax=float(quantize(subtotal * CA_TAX_RATE)),
        is_california=True,
        tax_label=CA_TAX_LABEL,
        rate=float(CA_TAX_RATE),
        subtotal=float(subtotal),
    )


def compute_order_tax(order) -> TaxLine:
    return compute_tax(order.resolved_subtotal())
