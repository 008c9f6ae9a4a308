"""Tests for merging observations with stored draft records."""

import pytest

from draftclaw.core.types import DraftRecord
from draftclaw.draft.reconciler import reconcile


def make_record(**kwargs):
    data = {
        "game_id": "abcd1234",
        "pick_id": 5,
        "offered_cards": ["Torch", "Oni Ronin", "Permafrost"],
    }
    data.update(kwargs)
    return DraftRecord(**data)


class TestReconcile:
    """Test the overwrite decision and carried-forward fields."""

    def test_no_stored_record_always_writes(self):
        observed = make_record()
        merged, should_overwrite = reconcile(observed, None)
        assert merged is observed
        assert should_overwrite is True

    def test_identical_record_with_image_is_noop(self):
        """reconcile(x, x) does not write when x already has an image."""
        record = make_record(image_reference="https://i.imgur.com/a.png")
        merged, should_overwrite = reconcile(record, record)
        assert should_overwrite is False
        assert merged.image_reference == "https://i.imgur.com/a.png"

    def test_missing_stored_image_forces_write(self):
        """A record without an image still needs its artifact attached."""
        merged, should_overwrite = reconcile(make_record(), make_record())
        assert should_overwrite is True

    def test_changed_cards_force_write(self):
        stored = make_record(image_reference="https://i.imgur.com/a.png")
        observed = make_record(offered_cards=["Torch", "Oni Ronin", "Sandstorm Titan"])
        merged, should_overwrite = reconcile(observed, stored)
        assert should_overwrite is True
        assert merged.offered_cards == ["Torch", "Oni Ronin", "Sandstorm Titan"]

    def test_card_order_matters(self):
        """Display positions are part of the record, so reordering is a change."""
        stored = make_record(image_reference="https://i.imgur.com/a.png")
        observed = make_record(offered_cards=["Oni Ronin", "Torch", "Permafrost"])
        _, should_overwrite = reconcile(observed, stored)
        assert should_overwrite is True

    def test_selection_is_carried_forward(self):
        """A committed selection survives a later raw observation."""
        stored = make_record(selected_index=3, offered_cards=["a", "b", "c", "d"])
        observed = make_record(offered_cards=["a", "b", "c", "d"])
        merged, _ = reconcile(observed, stored)
        assert merged.selected_index == 3

    def test_selection_carried_even_when_overwriting(self):
        stored = make_record(selected_index=1, image_reference="https://i.imgur.com/a.png")
        observed = make_record(offered_cards=["Torch", "Oni Ronin", "Trail Maker"])
        merged, should_overwrite = reconcile(observed, stored)
        assert should_overwrite is True
        assert merged.selected_index == 1

    def test_image_is_carried_forward(self):
        stored = make_record(image_reference="https://i.imgur.com/a.png")
        observed = make_record(offered_cards=["Torch", "Oni Ronin", "Trail Maker"])
        merged, _ = reconcile(observed, stored)
        assert merged.image_reference == "https://i.imgur.com/a.png"

    def test_inputs_are_not_mutated(self):
        stored = make_record(selected_index=0, image_reference="https://i.imgur.com/a.png")
        observed = make_record()
        merged, _ = reconcile(observed, stored)
        assert observed.selected_index is None
        assert observed.image_reference is None
        assert merged is not observed
        merged.offered_cards.append("Fire Sigil")
        assert observed.offered_cards == ["Torch", "Oni Ronin", "Permafrost"]

    @pytest.mark.parametrize("other", [{"game_id": "zzzz9999"}, {"pick_id": 6}])
    def test_mismatched_keys_rejected(self, other):
        with pytest.raises(ValueError):
            reconcile(make_record(), make_record(**other))

    def test_committed_offer_survives_shorter_observation(self):
        """The committed index keeps pointing into the cards it was chosen from."""
        stored = make_record(
            selected_index=3,
            offered_cards=["Torch", "Oni Ronin", "Permafrost", "Trail Maker"],
            selection_text="4 cards",
            image_reference="https://i.imgur.com/a.png",
        )
        observed = make_record(offered_cards=["Torch", "Oni Ronin"], selection_text="2 cards")
        merged, _ = reconcile(observed, stored)
        assert merged.offered_cards == ["Torch", "Oni Ronin", "Permafrost", "Trail Maker"]
        assert merged.selection_text == "4 cards"
        assert merged.selected_card == "Trail Maker"

    def test_selected_card_out_of_range(self):
        record = make_record(selected_index=5)
        assert record.is_committed
        assert record.selected_card is None
