"""Card name resolution."""

from .name_resolver import NameResolver, closest_token, correct_tokens, find_in_list, resolve_in_index

__all__ = ["NameResolver", "closest_token", "correct_tokens", "find_in_list", "resolve_in_index"]
