"""Load the static card data and ratings files."""

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..core.constants import NO_CARD_TEXT, RATING_REMAP
from ..core.types import CanonicalCard, CardKind, CardRarity, CardType, Influence
from ..utils.error_handler import CatalogError, ConfigurationError, ErrorContext, validate_required_fields
from ..utils.log import get_logger
from .catalog import CardCatalog

logger = get_logger(__name__)

REQUIRED_CARD_FIELDS = ["Name", "Cost", "Rarity", "Type"]

# "{F}{F}{T}" -> F, F, T
_INFLUENCE_GROUP = re.compile(r"\{(.)\}")
_INFLUENCE_BY_SYMBOL = {symbol.value: symbol for symbol in Influence}
_KIND_BY_NAME = {kind.value: kind for kind in CardKind}


def parse_influence(raw: Optional[str]) -> Tuple[Influence, ...]:
    """Parse an influence string; unknown symbols are ignored."""
    if not raw:
        return ()
    return tuple(
        _INFLUENCE_BY_SYMBOL[symbol]
        for symbol in _INFLUENCE_GROUP.findall(raw)
        if symbol in _INFLUENCE_BY_SYMBOL
    )


def parse_card_type(raw: Optional[str]) -> CardType:
    """Parse 'Fast Spell', 'Unit', ... into a CardType."""
    tokens = (raw or "").split()
    is_fast = "Fast" in tokens
    tokens = [token for token in tokens if token != "Fast"]
    kind = _KIND_BY_NAME.get(tokens[0], CardKind.NONE) if tokens else CardKind.NONE
    return CardType(kind=kind, is_fast=is_fast)


def parse_card(data: Dict[str, Any]) -> CanonicalCard:
    """Convert one card data entry into a CanonicalCard."""
    validate_required_fields(
        data,
        REQUIRED_CARD_FIELDS,
        ErrorContext(operation="parse card", module=__name__, function="parse_card"),
    )
    return CanonicalCard(
        name=str(data["Name"]).strip(),
        cost=int(data["Cost"]),
        influence=parse_influence(data.get("Influence")),
        rarity=CardRarity.from_string(data.get("Rarity")),
        card_type=parse_card_type(data.get("Type")),
        attack=int(data.get("Attack") or 0),
        health=int(data.get("Health") or 0),
        card_text=data.get("CardText") or NO_CARD_TEXT,
        set_name=data.get("SetName") or "",
        set_number=int(data.get("SetNumber") or 0),
        image_url=data.get("ImageUrl") or "",
        details_url=data.get("DetailsUrl") or "",
        deck_buildable=bool(data.get("DeckBuildable", True)),
    )


def load_cards(path: Union[str, Path]) -> List[CanonicalCard]:
    """Read the card data JSON array."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_cards = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Failed to read card data: {path}", details={"error": str(e)})

    if not isinstance(raw_cards, list):
        raise CatalogError("Card data must be a JSON array", details={"path": str(path)})

    cards = []
    for position, raw_card in enumerate(raw_cards):
        try:
            cards.append(parse_card(raw_card))
        except (ConfigurationError, TypeError, ValueError) as e:
            raise CatalogError(
                f"Invalid card entry at position {position}",
                details={"path": str(path), "error": str(e)},
            )

    logger.info("Card data loaded", path=str(path), count=len(cards))
    return cards


def load_catalog(path: Union[str, Path]) -> CardCatalog:
    return CardCatalog(load_cards(path))


def load_card_ratings(path: Union[str, Path]) -> Dict[str, str]:
    """
    Read the tab-separated ratings file.

    The first line is a header. Every other line is a rating followed by the
    names of the cards that carry it.

    Returns:
        Mapping of card name to rating
    """
    path = Path(path)
    ratings: Dict[str, str] = {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.read().splitlines()
    except OSError as e:
        raise CatalogError(f"Failed to read card ratings: {path}", details={"error": str(e)})

    for line in lines[1:]:
        cells = line.split("\t")
        if not cells or not cells[0]:
            continue
        rating = RATING_REMAP.get(cells[0], cells[0])
        for name in cells[1:]:
            if name:
                ratings[name] = rating

    logger.info(
        "Card ratings loaded",
        path=str(path),
        count=len(ratings),
        distinct_ratings=len(set(ratings.values())),
    )
    return ratings
