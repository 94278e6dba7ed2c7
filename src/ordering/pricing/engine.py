"""Customer-specific pricing.

Catalogue prices are multiplied by the buyer's price multiplier and rounded
half-up to cents. A missing or zero catalogue price is the market-price
sentinel: it is set by staff at fulfillment time and is never multiplied.
"""

from protean.exceptions import ValidationError

from ordering.domain import custom_setting
from ordering.shared.money import quantize, to_decimal

MIN_PRICE_MULTIPLIER = 0.5
MAX_PRICE_MULTIPLIER = 20.0
DEFAULT_PRICE_MULTIPLIER = 1.0

MARKET_PRICE = None


def is_market_price(price) -> bool:
    return price is None or to_decimal(price) == 0


class PricingEngine:
    def __init__(
        self,
        min_multiplier: float = MIN_PRICE_MULTIPLIER,
        max_multiplier: float = MAX_PRICE_MULTIPLIER,
    ) -> None:
        self.min_multiplier = min_multiplier
        self.max_multiplier = max_multiplier

    @classmethod
    def from_config(cls) -> "PricingEngine":
        """Build an engine with the multiplier bounds from ``domain.toml``."""
        return cls(
            min_multiplier=float(custom_setting("price_multiplier_min", MIN_PRICE_MULTIPLIER)),
            max_multiplier=float(custom_setting("price_multiplier_max", MAX_PRICE_MULTIPLIER)),
        )

    def validate_multiplier(self, multiplier) -> None:
        if multiplier is None or not (self.min_multiplier <= multiplier <= self.max_multiplier):
            raise ValidationError(
                {
                    "price_multiplier": [
                        f"Price multiplier must be between {self.min_multiplier} and {self.max_multiplier}"
                    ]
                }
            )

    def adjust_price(self, base_price, multiplier=DEFAULT_PRICE_MULTIPLIER) -> float | None:
        """Apply ``multiplier`` to ``base_price``.

        Returns ``None`` for market-priced input; otherwise the adjusted price
        rounded half-up to two decimals.
        """
        self.validate_multiplier(multiplier)
        if is_market_price(base_price):
            return MARKET_PRICE
        if to_decimal(base_price) < 0:
            raise ValidationError({"price": ["Price must be non-negative"]})

        return float(quantize(to_decimal(base_price) * to_decimal(multiplier)))


_default_engine = PricingEngine()


def adjust_price(base_price, multiplier=DEFAULT_PRICE_MULTIPLIER) -> float | None:
    """``PricingEngine.adjust_price`` with the default multiplier bounds."""
    return _default_engine.adjust_price(base_price, multiplier)
