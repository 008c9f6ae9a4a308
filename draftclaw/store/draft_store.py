"""SQLite storage for draft records, votes and games."""

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional, Union

from ..core.types import DraftGame, DraftRecord, Vote
from ..utils.config import settings
from ..utils.error_handler import StoreError
from ..utils.log import get_logger


class DraftStore:
    """SQLite store with upsert-by-key writes.

    Records are keyed by (game_id, pick_id), votes by (game_id, pick_id,
    user_id) and games by game_id. Every write is one INSERT ... ON CONFLICT
    statement, so concurrent writers for the same key never interleave.
    """

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        self.logger = get_logger(__name__)
        self.db_path = Path(db_path or settings.STORE_DB_PATH)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Connection that commits on success and is always closed."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_database(self):
        """Create tables if missing."""
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS draft_record (
                        game_id TEXT NOT NULL,
                        pick_id INTEGER NOT NULL,
                        offered_cards TEXT NOT NULL,
                        selected_index INTEGER,
                        image_reference TEXT,
                        selection_text TEXT NOT NULL DEFAULT '',
                        decklist_text TEXT NOT NULL DEFAULT '[]',
                        updated_at TEXT NOT NULL,
                        PRIMARY KEY(game_id, pick_id)
                    )
                """
                )

                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS draft_vote (
                        game_id TEXT NOT NULL,
                        pick_id INTEGER NOT NULL,
                        user_id TEXT NOT NULL,
                        vote_index INTEGER NOT NULL,
                        updated_at TEXT NOT NULL,
                        PRIMARY KEY(game_id, pick_id, user_id)
                    )
                """
                )

                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS draft_game (
                        game_id TEXT PRIMARY KEY,
                        owner TEXT,
                        created_at TEXT NOT NULL
                    )
                """
                )
                self.logger.info("Database initialized successfully", db_path=str(self.db_path))

        except sqlite3.Error as e:
            self.logger.error("Error initializing database", error=str(e))
            raise StoreError("Failed to initialize draft store", details={"db_path": str(self.db_path), "error": str(e)})

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> DraftRecord:
        return DraftRecord(
            game_id=row["game_id"],
            pick_id=row["pick_id"],
            offered_cards=json.loads(row["offered_cards"]),
            selected_index=row["selected_index"],
            image_reference=row["image_reference"],
            selection_text=row["selection_text"],
            decklist_text=json.loads(row["decklist_text"]),
        )

    def get_record(self, game_id: str, pick_id: int) -> Optional[DraftRecord]:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT * FROM draft_record WHERE game_id = ? AND pick_id = ?",
                    (game_id, pick_id),
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreError("Failed to read draft record", details={"game_id": game_id, "pick_id": pick_id, "error": str(e)})

        if row is None:
            self.logger.debug("Record miss", game_id=game_id, pick_id=pick_id)
            return None
        return self._row_to_record(row)

    def get_last_record(self, game_id: str) -> Optional[DraftRecord]:
        """Latest pick recorded for a game."""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    """
                    SELECT * FROM draft_record
                    WHERE game_id = ?
                    ORDER BY pick_id DESC
                    LIMIT 1
                """,
                    (game_id,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreError("Failed to read draft record", details={"game_id": game_id, "error": str(e)})
        return self._row_to_record(row) if row else None

    def put_record(self, record: DraftRecord) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO draft_record (
                        game_id, pick_id, offered_cards, selected_index,
                        image_reference, selection_text, decklist_text, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(game_id, pick_id) DO UPDATE SET
                        offered_cards = excluded.offered_cards,
                        selected_index = excluded.selected_index,
                        image_reference = excluded.image_reference,
                        selection_text = excluded.selection_text,
                        decklist_text = excluded.decklist_text,
                        updated_at = excluded.updated_at
                """,
                    (
                        record.game_id,
                        record.pick_id,
                        json.dumps(record.offered_cards),
                        record.selected_index,
                        record.image_reference,
                        record.selection_text,
                        json.dumps(record.decklist_text),
                        datetime.now().isoformat(),
                    ),
                )
        except sqlite3.Error as e:
            self.logger.error("Error writing draft record", record_id=record.record_id, error=str(e))
            raise StoreError("Failed to write draft record", details={"record_id": record.record_id, "error": str(e)})

        self.logger.info(
            "Draft record stored",
            record_id=record.record_id,
            cards=len(record.offered_cards),
            selected_index=record.selected_index,
        )

    def upsert_vote(self, vote: Vote) -> None:
        """Store a vote, replacing the user's earlier vote for the same pick."""
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO draft_vote (game_id, pick_id, user_id, vote_index, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(game_id, pick_id, user_id) DO UPDATE SET
                        vote_index = excluded.vote_index,
                        updated_at = excluded.updated_at
                """,
                    (vote.game_id, vote.pick_id, vote.user_id, vote.vote_index, datetime.now().isoformat()),
                )
        except sqlite3.Error as e:
            raise StoreError("Failed to write vote", details={"key": list(vote.key), "error": str(e)})

        self.logger.debug("Vote stored", game_id=vote.game_id, pick_id=vote.pick_id, user_id=vote.user_id)

    def get_votes(self, game_id: str, pick_id: int) -> List[Vote]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    """
                    SELECT game_id, pick_id, user_id, vote_index FROM draft_vote
                    WHERE game_id = ? AND pick_id = ?
                    ORDER BY user_id
                """,
                    (game_id, pick_id),
                ).fetchall()
        except sqlite3.Error as e:
            raise StoreError("Failed to read votes", details={"game_id": game_id, "pick_id": pick_id, "error": str(e)})

        return [
            Vote(
                game_id=row["game_id"],
                pick_id=row["pick_id"],
                user_id=row["user_id"],
                vote_index=row["vote_index"],
            )
            for row in rows
        ]

    def get_game(self, game_id: str) -> Optional[DraftGame]:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT game_id, owner, created_at FROM draft_game WHERE game_id = ?",
                    (game_id,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreError("Failed to read game", details={"game_id": game_id, "error": str(e)})

        if row is None:
            return None
        return DraftGame(game_id=row["game_id"], owner=row["owner"], created_at=row["created_at"])

    def put_game(self, game: DraftGame) -> DraftGame:
        """Insert or update a game; a missing created_at is set to now."""
        if game.created_at is None:
            game.created_at = datetime.now().isoformat()
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO draft_game (game_id, owner, created_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(game_id) DO UPDATE SET owner = excluded.owner
                """,
                    (game.game_id, game.owner, game.created_at),
                )
        except sqlite3.Error as e:
            raise StoreError("Failed to write game", details={"game_id": game.game_id, "error": str(e)})

        self.logger.info("Game stored", game_id=game.game_id, owner=game.owner)
        return game
