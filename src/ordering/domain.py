"""Ordering bounded context — carts, checkout, orders and delivery addresses.

Handles the wholesale order pricing and lifecycle engine: per-customer price
multipliers, cart-to-order conversion, sequential order numbering, address
ownership rules, tax and the admin-driven order state machine.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")


def custom_setting(name, default=None):
    """Read a value from the ``[custom]`` table of the active domain config."""
    custom = ordering.config.get("custom") or {}
    return custom.get(name, default)
