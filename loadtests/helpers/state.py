"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
"""

from dataclasses import dataclass, field


@dataclass
class CustomerState:
    """Tracks state for a single simulated customer session."""

    headers: dict = field(default_factory=dict)
    cart_item_ids: list[str] = field(default_factory=list)
    address_ids: list[str] = field(default_factory=list)
    order_id: str | None = None


@dataclass
class FulfillmentState:
    """Tracks an order staff are moving through delivery."""

    order_id: str | None = None
    market_item_ids: list[str] = field(default_factory=list)
    current_status: str = "Pending"
