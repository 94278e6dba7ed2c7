"""Money arithmetic on top of float-valued fields.

Amounts are stored as floats rounded to cents; every calculation goes through
``Decimal`` so rounding is half-up and free of binary float artefacts.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def round_money(value) -> float:
    """Round half-up to cents and hand back a float for storage."""
    return float(quantize(value))


def resolved_subtotal(lines) -> float:
    """Sum ``price * quantity`` over ``(price, quantity)`` pairs with a resolved price.

    Unresolved (market) prices are ``None`` or zero and contribute nothing.
    """
    total = Decimal("0")
    for price, quantity in lines:
        if not price:
            continue
        total += to_decimal(price) * quantity
    return round_money(total)
