"""Catalogue port (abstract interface).

The catalogue is owned by another part of the platform. Ordering only needs
to read the live price of a product or one of its variants, so it talks to
the catalogue through this narrow contract.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogueEntry:
    """Live catalogue data for one product/variant.

    ``price`` is ``None`` (or zero) for market-priced stems.
    """

    product_id: str
    variant_id: str | None
    name: str
    price: float | None


class Catalogue(ABC):
    @abstractmethod
    def lookup(self, product_id: str, variant_id: str | None = None) -> CatalogueEntry:
        """Return the entry for a product (or a specific variant of it).

        Raises ``ObjectNotFoundError`` when the product or variant is unknown.
        """
        ...
