"""Pick numbering: flat pick ids, pack/pick positions and observation checks."""

from ..core.constants import PACK_COUNT, PICKS_PER_PACK
from ..core.types import PickPosition
from ..utils.error_handler import IncompleteObservation, InvalidPick


def position_of(pick_id: int) -> PickPosition:
    """Return the position for a flat pick id (1..48)."""
    return PickPosition(pick_id)


def pick_id_of(pack_number: int, pick_in_pack: int) -> int:
    """Inverse of position_of: (pack, pick) back to the flat pick id."""
    if not 1 <= pack_number <= PACK_COUNT:
        raise InvalidPick(
            f"Invalid pack number: {pack_number}",
            details={"pack_number": pack_number, "max": PACK_COUNT},
        )
    if not 1 <= pick_in_pack <= PICKS_PER_PACK:
        raise InvalidPick(
            f"Invalid pick in pack: {pick_in_pack}",
            details={"pick_in_pack": pick_in_pack, "max": PICKS_PER_PACK},
        )
    return (pack_number - 1) * PICKS_PER_PACK + pick_in_pack


def parse_pick_count(raw: str) -> PickPosition:
    """
    Parse the recognized pick counter, e.g. "Pick 13".

    The counter has exactly two whitespace-separated tokens and the second is
    the flat pick id.

    Raises:
        InvalidPick: Malformed counter or pick id out of range
    """
    tokens = (raw or "").split()
    if len(tokens) != 2 or not tokens[1].isdecimal():
        raise InvalidPick(f"Unreadable pick counter: {raw!r}", details={"raw": raw})
    return position_of(int(tokens[1]))


def validate_observation(position: PickPosition, resolved_count: int, lenient: bool = False) -> None:
    """
    Reject an observation that resolved fewer cards than the pack must hold.

    Raises:
        IncompleteObservation: Too few cards resolved and not lenient
    """
    expected = position.expected_option_count
    if resolved_count < expected and not lenient:
        raise IncompleteObservation(
            f"Resolved {resolved_count} of {expected} cards for {position.label}",
            details={
                "pick_id": position.pick_id,
                "expected": expected,
                "resolved": resolved_count,
            },
        )
