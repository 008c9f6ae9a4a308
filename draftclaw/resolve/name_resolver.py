"""Resolve noisy recognized text into canonical card names."""

from typing import Iterable, List, Optional, Sequence

from rapidfuzz.distance import Levenshtein

from ..catalog.catalog import CardCatalog
from ..catalog.index import NameIndex
from ..core.text import normalize_fragment, tokenize
from ..utils.error_handler import AmbiguousMatch, NoMatch, ResolutionError
from ..utils.log import LoggerMixin


def closest_token(token: str, dictionary: Sequence[str]) -> Optional[str]:
    """
    Return the dictionary token with the smallest edit distance to `token`.

    `dictionary` must be sorted; ties go to the first (lexicographically
    smallest) candidate.
    """
    best_token = None
    best_distance = None
    for candidate in dictionary:
        if best_distance is None:
            distance = Levenshtein.distance(token, candidate)
        else:
            # Anything above the current best comes back as best + 1
            distance = Levenshtein.distance(token, candidate, score_cutoff=best_distance)
        if best_distance is None or distance < best_distance:
            best_token, best_distance = candidate, distance
            if distance == 0:
                break
    return best_token


def correct_tokens(normalized: str, dictionary: Sequence[str], known: Iterable[str] = ()) -> str:
    """Replace every unknown token with its closest dictionary token."""
    known = set(known) or set(dictionary)
    corrected = []
    for token in tokenize(normalized):
        if token in known:
            corrected.append(token)
            continue
        replacement = closest_token(token, dictionary)
        corrected.append(replacement if replacement is not None else token)
    return " ".join(corrected)


def resolve_in_index(index: NameIndex, fragment: str) -> str:
    """
    Resolve one fragment against an index.

    Searches the normalized fragment first, then the token-corrected fragment.

    Raises:
        AmbiguousMatch: Several names hit after correction
        NoMatch: Nothing hit after correction
    """
    normalized = normalize_fragment(fragment)
    if not normalized:
        raise NoMatch("Empty fragment", fragment=fragment)

    hits = index.search(normalized)
    if len(hits) == 1:
        return hits[0]

    corrected = correct_tokens(normalized, index.sorted_tokens, index.tokens)
    if corrected != normalized:
        hits = index.search(corrected)
        if len(hits) == 1:
            return hits[0]

    if hits:
        raise AmbiguousMatch(
            f"Multiple cards match '{fragment}'", fragment=fragment, candidates=hits
        )
    raise NoMatch(f"No card matches '{fragment}'", fragment=fragment)


def find_in_list(names: Sequence[str], query: str) -> Optional[int]:
    """
    Search only within `names` and return the position of the single hit.

    Returns None when the query matches no entry or more than one.
    """
    try:
        name = resolve_in_index(NameIndex(names), query)
    except ResolutionError:
        return None
    names = list(names)
    if names.count(name) > 1:
        # Repeated offer; the name alone does not pick a slot
        return None
    return names.index(name)


class NameResolver(LoggerMixin):
    """Resolver bound to one read-only card catalog.

    Holds no mutable state, so one instance may be shared between callers.
    """

    def __init__(self, catalog: CardCatalog):
        self.catalog = catalog

    def resolve_strict(self, fragment: str) -> str:
        """Resolve a fragment, raising AmbiguousMatch or NoMatch on failure."""
        return resolve_in_index(self.catalog.index, fragment)

    def resolve(self, fragment: str) -> Optional[str]:
        """Resolve a fragment to a canonical name, or None."""
        try:
            return self.resolve_strict(fragment)
        except ResolutionError as e:
            self.logger.debug(
                "Fragment dropped",
                fragment=fragment,
                reason=type(e).__name__,
                candidates=e.candidates,
            )
            return None

    def resolve_many(self, fragments: Iterable[str]) -> List[str]:
        """Resolve fragments in order; unresolved ones are omitted."""
        fragments = list(fragments)
        resolved = [name for name in map(self.resolve, fragments) if name is not None]
        self.logger.info(
            "Fragments resolved",
            total=len(fragments),
            resolved=len(resolved),
            dropped=len(fragments) - len(resolved),
        )
        return resolved
