"""Display text for draft records."""

from typing import Dict, List, Optional, Sequence, Tuple

from ..catalog.catalog import CardCatalog
from ..core.constants import UNRATED


def selection_line(position: int, name: str, catalog: CardCatalog, ratings: Optional[Dict[str, str]] = None) -> str:
    """One numbered selection row, e.g. '1  [B+] [  Rare    ] 3FF    Torch'."""
    rating = (ratings or {}).get(name, UNRATED)
    card = catalog.get(name)
    card_text = card.to_text() if card else name
    return f"{position + 1:<2} [{rating:<2}] {card_text}"


def selection_text(names: Sequence[str], catalog: CardCatalog, ratings: Optional[Dict[str, str]] = None) -> str:
    return "".join(
        selection_line(position, name, catalog, ratings) + "\n"
        for position, name in enumerate(names)
    )


def parse_card_count(raw: str) -> str:
    """Keep only the digits of a recognized count cell ('2x' -> '2')."""
    return "".join(c for c in (raw or "") if c.isdecimal())


def decklist_lines(rows: Sequence[Tuple[str, str]], catalog: CardCatalog) -> List[str]:
    """
    Render resolved deck rows.

    Args:
        rows: (canonical name, recognized count) pairs
        catalog: Card catalog for cost and influence

    Returns:
        Lines like '2x 3FF Torch'
    """
    lines = []
    for name, raw_count in rows:
        card = catalog.get(name)
        if card is None:
            continue
        card_text = f"{card.cost}{card.influence_symbols} {card.name}"
        lines.append(f"{parse_card_count(raw_count)}x {card_text:<30}".rstrip())
    return lines


def boxed(text: str) -> str:
    """Wrap text in a chat code block."""
    return f"```\n{text.rstrip()}\n```"
