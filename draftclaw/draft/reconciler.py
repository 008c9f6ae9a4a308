"""Merge a fresh observation with the stored record for the same pick."""

from dataclasses import replace
from typing import Optional, Tuple

from ..core.types import DraftRecord


def reconcile(observed: DraftRecord, stored: Optional[DraftRecord]) -> Tuple[DraftRecord, bool]:
    """
    Decide what to persist for an observed pick.

    A committed selection on the stored record always survives together with
    the offered cards it indexes, and so does a stored image reference the
    observation lacks. The write is only needed when the offered cards changed
    or no image has been attached yet.

    Args:
        observed: Record built from the latest observation
        stored: Record currently persisted for the same (game, pick), if any

    Returns:
        Tuple of (record to persist, should_overwrite)

    Raises:
        ValueError: The records belong to different picks
    """
    if stored is None:
        return observed, True

    if (observed.game_id, observed.pick_id) != (stored.game_id, stored.pick_id):
        raise ValueError(
            f"Cannot reconcile {observed.record_id} with {stored.record_id}"
        )

    merged = replace(
        observed,
        offered_cards=list(observed.offered_cards),
        decklist_text=list(observed.decklist_text),
    )
    if stored.selected_index is not None:
        # The committed index refers to the stored offer, so that offer is kept
        merged.selected_index = stored.selected_index
        merged.offered_cards = list(stored.offered_cards)
        merged.selection_text = stored.selection_text
    if merged.image_reference is None:
        merged.image_reference = stored.image_reference

    should_overwrite = (
        list(observed.offered_cards) != list(stored.offered_cards)
        or stored.image_reference is None
    )
    return merged, should_overwrite
