"""
Classic - The built-in tribes.

This module contains:
- Card and tribe definitions (two starter tribes)
- Power plugins for some of their cards
- The catalog factory used by the API and the CLI
"""

from ...engine_core.catalog import CardCatalog
from .cards import TRIBES, ASHEN_TRIBE, TIDAL_TRIBE, ASHEN, TIDAL
from .powers import POWERS


def create_classic_catalog() -> CardCatalog:
    """Catalog of the classic tribes with their powers bound."""
    return CardCatalog(TRIBES, powers=POWERS)


__all__ = [
    "create_classic_catalog",
    "TRIBES",
    "ASHEN_TRIBE",
    "TIDAL_TRIBE",
    "ASHEN",
    "TIDAL",
    "POWERS",
]
