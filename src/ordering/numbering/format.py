"""Human-readable order numbers: ``PB-`` followed by a zero-padded integer."""

import re

ORDER_NUMBER_PREFIX = "PB-"
ORDER_NUMBER_WIDTH = 5

_ORDER_NUMBER_PATTERN = re.compile(r"PB-(\d+)")


def format_order_number(value: int) -> str:
    return f"{ORDER_NUMBER_PREFIX}{value:0{ORDER_NUMBER_WIDTH}d}"


def parse_order_number(order_number: str | None) -> int | None:
    """Return the numeric part of ``order_number``, or None if it has none."""
    if not order_number:
        return None
    match = _ORDER_NUMBER_PATTERN.search(order_number)
    return int(match.group(1)) if match else None
