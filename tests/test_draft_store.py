"""Tests for the SQLite draft store."""

import sqlite3

import pytest

from draftclaw.core.types import DraftGame, DraftRecord, Vote
from draftclaw.store.draft_store import DraftStore
from draftclaw.utils.error_handler import StoreError


def make_record(pick_id=5, **kwargs):
    data = {
        "game_id": "abcd1234",
        "pick_id": pick_id,
        "offered_cards": ["Torch", "Oni Ronin"],
        "selection_text": "1  [B+] Torch\n2  [C ] Oni Ronin\n",
        "decklist_text": ["2x 1T Trail Maker"],
    }
    data.update(kwargs)
    return DraftRecord(**data)


class TestDraftStore:
    """Test cases for DraftStore class."""

    def test_init_creates_database(self, tmp_path):
        db_path = tmp_path / "nested" / "draft.db"
        DraftStore(db_path)
        assert db_path.exists()

        conn = sqlite3.connect(db_path)
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
        conn.close()
        assert {"draft_record", "draft_vote", "draft_game"} <= tables

    def test_record_round_trip(self, store):
        record = make_record(image_reference="https://i.imgur.com/a.png")
        store.put_record(record)
        assert store.get_record("abcd1234", 5) == record

    def test_missing_record(self, store):
        assert store.get_record("abcd1234", 5) is None
        assert store.get_last_record("abcd1234") is None

    def test_put_record_overwrites_same_key(self, store):
        store.put_record(make_record())
        store.put_record(make_record(offered_cards=["Permafrost"], selected_index=0))

        stored = store.get_record("abcd1234", 5)
        assert stored.offered_cards == ["Permafrost"]
        assert stored.selected_index == 0

    def test_last_record_is_highest_pick(self, store):
        for pick_id in (3, 11, 7):
            store.put_record(make_record(pick_id=pick_id))
        store.put_record(make_record(pick_id=40, game_id="other999"))

        assert store.get_last_record("abcd1234").pick_id == 11

    def test_vote_upsert_replaces_earlier_vote(self, store):
        """A user's later vote for the same pick replaces the earlier one."""
        store.upsert_vote(Vote("abcd1234", 5, "alice", 0))
        store.upsert_vote(Vote("abcd1234", 5, "bob", 1))
        store.upsert_vote(Vote("abcd1234", 5, "alice", 2))

        votes = store.get_votes("abcd1234", 5)
        assert votes == [Vote("abcd1234", 5, "alice", 2), Vote("abcd1234", 5, "bob", 1)]

    def test_votes_are_scoped_to_pick(self, store):
        store.upsert_vote(Vote("abcd1234", 5, "alice", 0))
        store.upsert_vote(Vote("abcd1234", 6, "alice", 1))
        assert [vote.vote_index for vote in store.get_votes("abcd1234", 6)] == [1]
        assert store.get_votes("abcd1234", 7) == []

    def test_game_round_trip(self, store):
        game = store.put_game(DraftGame(game_id="abcd1234", owner="alice"))
        assert game.created_at is not None
        assert store.get_game("abcd1234") == game
        assert store.get_game("missing1") is None

    def test_game_owner_update_keeps_created_at(self, store):
        created = store.put_game(DraftGame(game_id="abcd1234"))
        store.put_game(DraftGame(game_id="abcd1234", owner="bob", created_at="2000-01-01T00:00:00"))

        stored = store.get_game("abcd1234")
        assert stored.owner == "bob"
        assert stored.created_at == created.created_at

    def test_persists_across_instances(self, tmp_path):
        db_path = tmp_path / "draft.db"
        DraftStore(db_path).put_record(make_record())
        assert DraftStore(db_path).get_record("abcd1234", 5) is not None

    def test_database_error_wrapped(self, store):
        store.db_path.unlink()
        store.db_path.mkdir()
        with pytest.raises(StoreError):
            store.get_record("abcd1234", 5)
