"""In-memory catalogue for development and tests.

Products are stocked at runtime with ``stock()``, or loaded from a JSON
seed file with ``from_file()``. A product can be looked up
with a variant id (variant price) or without one (product price).
"""

import json
from pathlib import Path

from protean.exceptions import ObjectNotFoundError

from ordering.catalogue.port import Catalogue, CatalogueEntry


class InMemoryCatalogue(Catalogue):
    def __init__(self) -> None:
        self._entries: dict[tuple[str, str | None], CatalogueEntry] = {}

    @classmethod
    def from_file(cls, path) -> "InMemoryCatalogue":
        """Load entries from a JSON list of
        ``{"productId", "variantId"?, "name"?, "price"}`` objects."""
        catalogue = cls()
        for row in json.loads(Path(path).read_text()):
            catalogue.stock(
                row["productId"],
                row.get("price"),
                variant_id=row.get("variantId"),
                name=row.get("name"),
            )
        return catalogue

    def stock(self, product_id, price, variant_id=None, name=None) -> CatalogueEntry:
        entry = CatalogueEntry(
            product_id=str(product_id),
            variant_id=str(variant_id) if variant_id else None,
            name=name or str(product_id),
            price=price,
        )
        self._entries[(entry.product_id, entry.variant_id)] = entry
        return entry

    def lookup(self, product_id, variant_id=None) -> CatalogueEntry:
        key = (str(product_id), str(variant_id) if variant_id else None)
        try:
            return self._entries[key]
        except KeyError:
            label = f"{key[0]}/{key[1]}" if key[1] else key[0]
            raise ObjectNotFoundError(f"Product `{label}` not found in catalogue") from None

    def clear(self) -> None:
        self._entries.clear()
