"""Catalogue factory.

Provides get_catalogue() / set_catalogue() to swap implementations. The
application wires the real catalogue reader at startup; tests stock an
InMemoryCatalogue.
"""

from ordering.catalogue.fake_adapter import InMemoryCatalogue
from ordering.catalogue.port import Catalogue

_current_catalogue: Catalogue | None = None


def get_catalogue() -> Catalogue:
    """Return the active catalogue. Defaults to an empty InMemoryCatalogue."""
    global _current_catalogue
    if _current_catalogue is None:
        _current_catalogue = InMemoryCatalogue()
    return _current_catalogue


def set_catalogue(catalogue: Catalogue) -> None:
    global _current_catalogue
    _current_catalogue = catalogue


def reset_catalogue() -> None:
    global _current_catalogue
    _current_catalogue = None
