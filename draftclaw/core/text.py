"""Text normalization shared by the card index and the name resolver."""

import re
from typing import List

from .constants import FRAGMENT_EXTRA_CHARS

_WHITESPACE = re.compile(r"\s+")


def normalize_fragment(text: str) -> str:
    """
    Normalize recognized text for matching.

    Keeps alphanumerics, whitespace, commas and apostrophes, drops everything
    else, collapses whitespace runs and lowercases.

    Examples:
        >>> normalize_fragment("  Torch!!\\n")
        'torch'
        >>> normalize_fragment("Rizahn, the   Hero's")
        "rizahn, the hero's"
    """
    if not text:
        return ""
    kept = "".join(
        c for c in text if c.isalnum() or c.isspace() or c in FRAGMENT_EXTRA_CHARS
    )
    return _WHITESPACE.sub(" ", kept).strip().lower()


def tokenize(normalized: str) -> List[str]:
    """Split normalized text into whitespace tokens."""
    return normalized.split()
