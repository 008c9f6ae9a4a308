"""Draft session: observe → resolve → validate → reconcile → upload → persist."""

import json
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..catalog.catalog import CardCatalog
from ..core.constants import GAME_ID_ALPHABET, GAME_ID_LENGTH
from ..core.types import DraftGame, DraftRecord, Vote
from ..resolve.name_resolver import NameResolver
from ..store.context import RuntimeContext
from ..store.draft_store import DraftStore
from ..upload.imgur import ImgurUploader
from ..utils.config import settings
from ..utils.error_handler import (
    ConfigurationError,
    GameNotRegistered,
    IncompleteObservation,
    NetworkError,
    NotGameOwner,
    RecordNotFound,
    UploadError,
)
from ..utils.log import LoggerMixin
from ..utils.validation import validate_game_id, validate_user_id
from . import render
from .reconciler import reconcile
from .sequencer import parse_pick_count, validate_observation
from .votes import authorize_commit, commit, require_winner, resolve_vote_target


def new_game_id() -> str:
    """Random 8-character game id from [A-Za-z0-9]."""
    return "".join(secrets.choice(GAME_ID_ALPHABET) for _ in range(GAME_ID_LENGTH))


@dataclass
class Observation:
    """One screen reading handed over by the capture/OCR side."""

    pick: str
    cards: List[str] = field(default_factory=list)
    deck: List[Tuple[str, str]] = field(default_factory=list)
    image: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Observation":
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Observation must be a JSON object", details={"type": type(data).__name__}
            )
        if "pick" not in data:
            raise ConfigurationError("Observation is missing 'pick'", details={"keys": list(data)})

        cards = data.get("cards") or []
        deck = data.get("deck") or []
        image = data.get("image")
        if not isinstance(cards, list) or not isinstance(deck, list):
            raise ConfigurationError("Observation 'cards' and 'deck' must be lists")
        if image is not None and not isinstance(image, str):
            raise ConfigurationError("Observation 'image' must be a path", details={"image": image})

        rows = []
        for row in deck:
            # (name fragment, count fragment)
            if not isinstance(row, (list, tuple)) or len(row) != 2:
                raise ConfigurationError("Deck rows must be [name, count] pairs", details={"row": row})
            rows.append((str(row[0]), str(row[1])))

        return cls(
            pick=str(data["pick"]),
            cards=[str(card) for card in cards],
            deck=rows,
            image=image,
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Observation":
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to read observation: {path}", details={"error": str(e)})
        return cls.from_dict(data)


@dataclass
class ObserveResult:
    record: DraftRecord
    written: bool
    uploaded: bool = False


@dataclass
class CommitResult:
    record: DraftRecord
    index: int
    changed: bool

    @property
    def card_name(self) -> str:
        return self.record.offered_cards[self.index]


class DraftSession(LoggerMixin):
    """Ties the resolver, reconciler and vote tally to the store and uploader.

    Writes for one (game, pick) are expected to come from a single caller at a
    time: the capture loop for observations, the command handler for votes
    and commits.
    """

    def __init__(
        self,
        catalog: CardCatalog,
        store: DraftStore,
        context: RuntimeContext,
        ratings: Optional[Dict[str, str]] = None,
        uploader: Optional[ImgurUploader] = None,
        lenient: Optional[bool] = None,
    ):
        self.catalog = catalog
        self.resolver = NameResolver(catalog)
        self.store = store
        self.context = context
        self.ratings = ratings or {}
        self.uploader = uploader
        self.lenient = settings.LENIENT_OBSERVATION if lenient is None else lenient

    # Games

    def current_game_id(self) -> str:
        game_id = self.context.current_game_id
        if not game_id:
            raise GameNotRegistered("No current game; start one with new-game")
        return game_id

    def new_game(self, owner: Optional[str] = None) -> DraftGame:
        """Create a game, make it the current one and optionally claim it."""
        game = self.store.put_game(DraftGame(game_id=new_game_id(), owner=owner))
        self.context.current_game_id = game.game_id
        if owner:
            self.context.register_user(owner, game.game_id)
        self.logger.info("New game started", game_id=game.game_id, owner=owner)
        return game

    def register(self, user_id: str, game_id: str) -> str:
        user_id = validate_user_id(user_id)
        game_id = validate_game_id(game_id)
        self.context.register_user(user_id, game_id)
        return game_id

    def own_game(self, user_id: str, game_id: str) -> DraftGame:
        """
        Register the user to a game and claim its ownership.

        Unknown games are created. A game already owned by someone else keeps
        its owner.

        Raises:
            NotGameOwner: The game belongs to another user
        """
        game_id = self.register(user_id, game_id)
        game = self.store.get_game(game_id) or DraftGame(game_id=game_id)
        if game.owner not in (None, user_id):
            raise NotGameOwner(
                f"Game [{game_id}] is already owned by [{game.owner}]",
                details={"game_id": game_id, "owner": game.owner, "actor": user_id},
            )
        game.owner = user_id
        return self.store.put_game(game)

    def user_game_id(self, user_id: str) -> str:
        game_id = self.context.user_game(user_id)
        if not game_id:
            raise GameNotRegistered(f"No game is registered to [{user_id}]", details={"user_id": user_id})
        return game_id

    def last_record(self, game_id: str) -> DraftRecord:
        record = self.store.get_last_record(game_id)
        if record is None:
            raise RecordNotFound(f"No draft data for game [{game_id}]", details={"game_id": game_id})
        return record

    # Observations

    def build_record(self, observation: Observation, game_id: str) -> DraftRecord:
        """
        Resolve an observation into a complete draft record.

        Only the first expected_option_count fragments are read; any further
        slots on screen are leftovers from the previous pick.

        Raises:
            InvalidPick: Unreadable or out-of-range pick counter
            IncompleteObservation: Too few cards resolved
        """
        position = parse_pick_count(observation.pick)
        fragments = observation.cards[: position.expected_option_count]
        names = self.resolver.resolve_many(fragments)
        validate_observation(position, len(names), lenient=self.lenient)
        if not names:
            raise IncompleteObservation(
                f"No cards resolved for {position.label}",
                details={"pick_id": position.pick_id},
            )

        deck_rows = []
        for name_fragment, count in observation.deck:
            name = self.resolver.resolve(name_fragment)
            if name is not None:
                deck_rows.append((name, count))

        return DraftRecord(
            game_id=game_id,
            pick_id=position.pick_id,
            offered_cards=names,
            selection_text=render.selection_text(names, self.catalog, self.ratings),
            decklist_text=render.decklist_lines(deck_rows, self.catalog),
        )

    async def observe(self, observation: Observation, game_id: Optional[str] = None) -> ObserveResult:
        """Resolve, reconcile and, when needed, persist one observation."""
        game_id = game_id or self.current_game_id()
        observed = self.build_record(observation, game_id)
        stored = self.store.get_record(game_id, observed.pick_id)
        record, should_overwrite = reconcile(observed, stored)
        log = self.pick_logger(game_id, record.pick_id)

        if not should_overwrite:
            log.debug("Observation unchanged")
            return ObserveResult(record=record, written=False)

        uploaded = False
        if record.image_reference is None and observation.image and self.uploader and self.uploader.enabled:
            try:
                record.image_reference = await self.uploader.upload(observation.image)
                uploaded = True
            except (NetworkError, UploadError, ConfigurationError) as e:
                # Stored without an image; the next observation retries the upload
                log.warning("Screenshot upload failed", error=str(e))

        self.store.put_record(record)
        log.info(
            "Observation stored",
            cards=len(record.offered_cards),
            uploaded=uploaded,
        )
        return ObserveResult(record=record, written=True, uploaded=uploaded)

    # Votes

    def vote(self, user_id: str, target: str, game_id: Optional[str] = None) -> Tuple[DraftRecord, int]:
        """Record the user's vote on the latest pick of their game."""
        user_id = validate_user_id(user_id)
        game_id = game_id or self.user_game_id(user_id)
        record = self.last_record(game_id)
        index = resolve_vote_target(target, record.offered_cards)
        self.store.upsert_vote(
            Vote(game_id=game_id, pick_id=record.pick_id, user_id=user_id, vote_index=index)
        )
        self.logger.info("Vote recorded", record_id=record.record_id, user_id=user_id, vote_index=index)
        return record, index

    def commit(self, actor: str, game_id: Optional[str] = None) -> CommitResult:
        """
        Commit the winning vote for the latest pick of the actor's game.

        Raises:
            NotGameOwner: Actor does not own the game
            NoVotes: Nobody voted on the pick
            AlreadyCommitted: A different card was committed earlier
        """
        game_id = game_id or self.user_game_id(actor)
        authorize_commit(self.store.get_game(game_id), actor)
        record = self.last_record(game_id)
        index = require_winner(self.store.get_votes(game_id, record.pick_id))
        record, changed = commit(record, index)
        if changed:
            self.store.put_record(record)
        self.logger.info(
            "Pick committed",
            record_id=record.record_id,
            selected_index=index,
            changed=changed,
        )
        return CommitResult(record=record, index=index, changed=changed)
