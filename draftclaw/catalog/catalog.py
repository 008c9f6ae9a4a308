"""Immutable in-memory card catalog."""

from types import MappingProxyType
from typing import FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..core.types import CanonicalCard
from .index import NameIndex


class CardCatalog:
    """Canonical cards keyed by name, plus the name search index.

    Built once per session and never mutated afterwards, so one instance can
    be shared by every resolver, command handler and capture loop.
    """

    def __init__(self, cards: Iterable[CanonicalCard]):
        by_name = {}
        for card in cards:
            by_name[card.name] = card

        self._cards: Mapping[str, CanonicalCard] = MappingProxyType(by_name)
        self._index = NameIndex(by_name.keys())

    @property
    def index(self) -> NameIndex:
        return self._index

    @property
    def tokens(self) -> FrozenSet[str]:
        return self._index.tokens

    @property
    def sorted_tokens(self) -> Tuple[str, ...]:
        return self._index.sorted_tokens

    def get(self, name: str) -> Optional[CanonicalCard]:
        return self._cards.get(name)

    def search(self, normalized_query: str) -> List[str]:
        return self._index.search(normalized_query)

    def __contains__(self, name: object) -> bool:
        return name in self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[CanonicalCard]:
        return iter(self._cards.values())
