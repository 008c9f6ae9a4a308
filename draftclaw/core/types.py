from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional, Tuple

from ..utils.error_handler import InvalidPick
from .constants import NO_CARD_TEXT, PICKS_PER_PACK, TOTAL_PICKS


class Influence(Enum):
    FIRE = "F"
    TIME = "T"
    JUSTICE = "J"
    PRIMAL = "P"
    SHADOW = "S"


class CardRarity(IntEnum):
    """Card rarity; compares Legendary > Rare > Uncommon > Common > Promo > None."""

    NONE = 0
    PROMO = 1
    COMMON = 2
    UNCOMMON = 3
    RARE = 4
    LEGENDARY = 5

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_string(cls, value: Optional[str]) -> "CardRarity":
        if not value:
            return cls.NONE
        key = value.strip().upper()
        if len(key) == 1:
            return _RARITY_LETTERS.get(key, cls.NONE)
        return cls.__members__.get(key, cls.NONE)


_RARITY_LETTERS = {
    "L": CardRarity.LEGENDARY,
    "R": CardRarity.RARE,
    "U": CardRarity.UNCOMMON,
    "C": CardRarity.COMMON,
    "P": CardRarity.PROMO,
}


class CardKind(Enum):
    UNIT = "Unit"
    SPELL = "Spell"
    RELIC = "Relic"
    POWER = "Power"
    SITE = "Site"
    CURSE = "Curse"
    NONE = "None"


@dataclass(frozen=True)
class CardType:
    kind: CardKind = CardKind.NONE
    is_fast: bool = False

    def __str__(self) -> str:
        return f"Fast {self.kind.value}" if self.is_fast else self.kind.value


@dataclass(frozen=True)
class CanonicalCard:
    name: str
    cost: int
    influence: Tuple[Influence, ...]
    rarity: CardRarity
    card_type: CardType
    attack: int = 0
    health: int = 0
    card_text: str = NO_CARD_TEXT
    set_name: str = ""
    set_number: int = 0
    image_url: str = ""
    details_url: str = ""
    deck_buildable: bool = True

    @property
    def influence_symbols(self) -> str:
        """Influence as symbol letters, e.g. 'FFT'."""
        return "".join(symbol.value for symbol in self.influence)

    @property
    def has_stats(self) -> bool:
        return self.card_type.kind == CardKind.UNIT

    def to_text(self) -> str:
        """One-line display text used in selection listings."""
        text = f"[{self.rarity.label:^10}] {self.cost}{self.influence_symbols:<6} {self.name}"
        if self.has_stats:
            text += f" {self.attack}/{self.health}"
        return text


@dataclass(frozen=True)
class PickPosition:
    """Position of one pick in the 48-pick draft.

    Construction fails with InvalidPick for ids outside 1..48; the id is never
    clamped into range.
    """

    pick_id: int

    def __post_init__(self):
        if isinstance(self.pick_id, bool) or not isinstance(self.pick_id, int):
            raise InvalidPick(
                f"Pick id must be an integer, got {self.pick_id!r}",
                details={"pick_id": self.pick_id},
            )
        if not 1 <= self.pick_id <= TOTAL_PICKS:
            raise InvalidPick(
                f"Invalid draft pick id: {self.pick_id}",
                details={"pick_id": self.pick_id, "min": 1, "max": TOTAL_PICKS},
            )

    @property
    def pack_number(self) -> int:
        return (self.pick_id - 1) // PICKS_PER_PACK + 1

    @property
    def pick_in_pack(self) -> int:
        return (self.pick_id - 1) % PICKS_PER_PACK + 1

    @property
    def expected_option_count(self) -> int:
        """Cards left in the pack when this pick is made."""
        return PICKS_PER_PACK - (self.pick_id - 1) % PICKS_PER_PACK

    @property
    def label(self) -> str:
        return f"p{self.pack_number}p{self.pick_in_pack}"

    def next(self) -> "PickPosition":
        return PickPosition(self.pick_id + 1)

    def __str__(self) -> str:
        return self.label


@dataclass
class DraftRecord:
    game_id: str
    pick_id: int
    offered_cards: List[str] = field(default_factory=list)
    selected_index: Optional[int] = None
    image_reference: Optional[str] = None
    selection_text: str = ""
    decklist_text: List[str] = field(default_factory=list)

    @property
    def position(self) -> PickPosition:
        return PickPosition(self.pick_id)

    @property
    def record_id(self) -> str:
        return f"{self.game_id}_{self.pick_id}"

    @property
    def is_committed(self) -> bool:
        return self.selected_index is not None

    @property
    def selected_card(self) -> Optional[str]:
        """Name of the committed card, if any."""
        if self.selected_index is None or not 0 <= self.selected_index < len(self.offered_cards):
            return None
        return self.offered_cards[self.selected_index]


@dataclass(frozen=True)
class Vote:
    game_id: str
    pick_id: int
    user_id: str
    vote_index: int

    @property
    def key(self) -> Tuple[str, int, str]:
        """Identity key; a later vote with the same key replaces the earlier one."""
        return (self.game_id, self.pick_id, self.user_id)


@dataclass
class DraftGame:
    game_id: str
    owner: Optional[str] = None
    created_at: Optional[str] = None
