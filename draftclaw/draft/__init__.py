"""Draft bookkeeping: pick numbering, reconciliation, votes and rendering."""

from .reconciler import reconcile
from .sequencer import parse_pick_count, pick_id_of, position_of, validate_observation
from .votes import authorize_commit, commit, require_winner, resolve_vote_target, tally, winning_index

__all__ = [
    "reconcile",
    "parse_pick_count",
    "pick_id_of",
    "position_of",
    "validate_observation",
    "authorize_commit",
    "commit",
    "require_winner",
    "resolve_vote_target",
    "tally",
    "winning_index",
]
