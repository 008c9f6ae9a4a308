"""Vote tallying and the commit state machine."""

from collections import defaultdict
from dataclasses import replace
from typing import Dict, Iterable, Optional, Sequence, Set, Tuple

from ..core.types import DraftGame, DraftRecord, Vote
from ..resolve.name_resolver import find_in_list
from ..utils.error_handler import AlreadyCommitted, InvalidVoteTarget, NotGameOwner, NoVotes


def tally(votes: Iterable[Vote]) -> Dict[int, int]:
    """Count distinct voters per option index."""
    voters: Dict[int, Set[str]] = defaultdict(set)
    for vote in votes:
        voters[vote.vote_index].add(vote.user_id)
    return {index: len(users) for index, users in voters.items()}


def winning_index(votes: Iterable[Vote]) -> Optional[int]:
    """Index with the most distinct voters; the lowest index wins ties."""
    counts = tally(votes)
    if not counts:
        return None
    return min(counts, key=lambda index: (-counts[index], index))


def require_winner(votes: Iterable[Vote]) -> int:
    votes = list(votes)
    index = winning_index(votes)
    if index is None:
        raise NoVotes("No votes have been cast for this pick")
    return index


def resolve_vote_target(target: str, offered_cards: Sequence[str]) -> int:
    """
    Turn a vote argument into a 0-based option index.

    Digits are a 1-based display index. Anything else is a partial card name
    searched among the offered cards only.

    Raises:
        InvalidVoteTarget: Index out of range, or the name matches zero or
            several offered cards
    """
    target = (target or "").strip()
    if not target:
        raise InvalidVoteTarget("Vote target is empty")

    if target.isdigit():
        try:
            index = int(target) - 1
        except ValueError:
            # isdigit() also accepts superscripts and circled digits
            raise InvalidVoteTarget(f"Vote index {target} is not a number", details={"target": target})
        if not 0 <= index < len(offered_cards):
            raise InvalidVoteTarget(
                f"Vote index {target} is out of range",
                details={"target": target, "options": len(offered_cards)},
            )
        return index

    index = find_in_list(offered_cards, target)
    if index is None:
        raise InvalidVoteTarget(
            f"'{target}' does not match exactly one offered card",
            details={"target": target},
        )
    return index


def commit(record: DraftRecord, index: int) -> Tuple[DraftRecord, bool]:
    """
    Commit `index` as the selection of `record`.

    Returns:
        Tuple of (record, changed). Re-committing the same index returns the
        record unchanged with changed=False.

    Raises:
        InvalidVoteTarget: Index outside the offered cards
        AlreadyCommitted: A different index was committed earlier
    """
    if not 0 <= index < len(record.offered_cards):
        raise InvalidVoteTarget(
            f"Selection index {index} is out of range",
            details={"index": index, "options": len(record.offered_cards)},
        )
    if record.selected_index is not None:
        if record.selected_index == index:
            return record, False
        raise AlreadyCommitted(
            f"{record.position.label} is already committed",
            details={
                "record_id": record.record_id,
                "selected_index": record.selected_index,
                "requested_index": index,
            },
        )
    return replace(record, selected_index=index), True


def authorize_commit(game: Optional[DraftGame], actor: str) -> None:
    """Only the registered owner of a game may commit its picks."""
    if game is None or game.owner is None or game.owner != actor:
        raise NotGameOwner(
            "Only the game owner can commit picks",
            details={
                "game_id": game.game_id if game else None,
                "actor": actor,
            },
        )
