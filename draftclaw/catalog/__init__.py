"""Card catalog package: static card data, ratings and the name index."""

from .catalog import CardCatalog
from .index import NameIndex
from .loader import load_card_ratings, load_cards, load_catalog, parse_card

__all__ = [
    "CardCatalog",
    "NameIndex",
    "load_cards",
    "load_catalog",
    "load_card_ratings",
    "parse_card",
]
