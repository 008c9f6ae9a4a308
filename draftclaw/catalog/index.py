"""Exact/substring search index over canonical card names."""

from collections import defaultdict
from typing import Dict, FrozenSet, Iterable, List, Tuple

from ..core.text import normalize_fragment, tokenize


class NameIndex:
    """Read-only search index over a set of canonical names.

    Names are matched on their normalized form. A query hits a name when the
    two are equal, when the name appears in the query as a whole-word phrase,
    or when the query appears anywhere inside the name. Equality beats the
    substring rules: if any name equals the query, only those names are hits.
    """

    def __init__(self, names: Iterable[str]):
        by_normalized: Dict[str, List[str]] = defaultdict(list)
        for name in names:
            normalized = normalize_fragment(name)
            if normalized and name not in by_normalized[normalized]:
                by_normalized[normalized].append(name)

        self._by_normalized: Dict[str, Tuple[str, ...]] = {
            key: tuple(sorted(value)) for key, value in by_normalized.items()
        }
        self._entries: Tuple[Tuple[str, str], ...] = tuple(
            (normalized, name)
            for normalized, group in sorted(self._by_normalized.items())
            for name in group
        )
        self._tokens: FrozenSet[str] = frozenset(
            token for normalized in self._by_normalized for token in tokenize(normalized)
        )
        self._sorted_tokens: Tuple[str, ...] = tuple(sorted(self._tokens))

    @property
    def tokens(self) -> FrozenSet[str]:
        """Every whitespace token of every normalized name."""
        return self._tokens

    @property
    def sorted_tokens(self) -> Tuple[str, ...]:
        return self._sorted_tokens

    def __len__(self) -> int:
        return len(self._entries)

    def search(self, normalized_query: str) -> List[str]:
        """Return the sorted canonical names hit by an already-normalized query."""
        if not normalized_query:
            return []

        exact = self._by_normalized.get(normalized_query)
        if exact:
            return list(exact)

        padded_query = f" {normalized_query} "
        hits = [
            name
            for normalized, name in self._entries
            if normalized_query in normalized or f" {normalized} " in padded_query
        ]
        return sorted(set(hits))
