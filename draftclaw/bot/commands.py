"""Chat-style command handling, independent of any chat transport."""

from typing import List, Optional

from ..core.constants import CARD_CMD, DRAFT_CMD, PING_CMD, TOTAL_PICKS
from ..utils.error_handler import (
    AlreadyCommitted,
    AmbiguousMatch,
    ConfigurationError,
    DraftClawError,
    GameNotRegistered,
    InvalidVoteTarget,
    NoMatch,
    NotGameOwner,
    NoVotes,
    RecordNotFound,
)
from ..utils.log import LoggerMixin
from ..draft.render import boxed
from ..draft.session import DraftSession

DRAFT_CMD_HELP = f"""
{DRAFT_CMD} - Get the current draft selection
{DRAFT_CMD} reg <game_id> - Register an existing draft
{DRAFT_CMD} own <game_id> - Register and own a game
{DRAFT_CMD} deck - Get the current deck
{DRAFT_CMD} vote <card_id|card_name> - Vote for a card
{DRAFT_CMD} commit - Commit the highest voted card. Only the owner can perform this.
"""

HELP_CMD = "help"
REG_CMD = "reg"
OWN_CMD = "own"
DECK_CMD = "deck"
VOTE_CMD = "vote"
COMMIT_CMD = "commit"

# Candidates listed when a card lookup is ambiguous
MAX_LISTED_CANDIDATES = 3


class BotReply:
    """Reply assembled line by line."""

    def __init__(self):
        self.messages: List[str] = []

    def add(self, message: str):
        self.messages.append(message)

    def add_boxed(self, message: str):
        self.messages.append(boxed(message))

    def __str__(self) -> str:
        return "\n".join(self.messages)


class DraftCommandHandler(LoggerMixin):
    """Turns `!draft`, `!card` and `!ping` messages into reply text."""

    def __init__(self, session: DraftSession):
        self.session = session

    def handle(self, user: str, text: str) -> Optional[str]:
        """
        Handle one chat message.

        Returns:
            Reply text, or None when the message is not a command
        """
        parts = (text or "").strip().split(None, 1)
        if not parts:
            return None
        command = parts[0]
        args = parts[1].strip() if len(parts) > 1 else ""

        if command == DRAFT_CMD:
            reply = self.draft_command(user, args)
        elif command == CARD_CMD:
            reply = self.card_command(args)
        elif command == PING_CMD:
            reply = BotReply()
            reply.add("Pong!")
        else:
            return None

        self.logger.info("Command handled", user=user, command=command)
        return str(reply)

    def draft_command(self, user: str, args: str) -> BotReply:
        reply = BotReply()
        parts = args.split(None, 1)
        sub_command = parts[0] if parts else ""
        sub_args = parts[1].strip() if len(parts) > 1 else ""

        if sub_command == HELP_CMD:
            reply.add(f"```{DRAFT_CMD_HELP}```")
            return reply

        if sub_command == REG_CMD:
            try:
                game_id = self.session.register(user, sub_args)
            except ConfigurationError as e:
                reply.add(f"Unable to register game: [{e.message}]")
                return reply
            reply.add(f"Game [{game_id}] is now registered to {user}")
            return reply

        if sub_command == OWN_CMD:
            try:
                game = self.session.own_game(user, sub_args)
            except (ConfigurationError, NotGameOwner) as e:
                reply.add(f"Unable to own game: [{e.message}]")
                return reply
            reply.add(f"Game [{game.game_id}] is now owned by [{user}]")
            return reply

        try:
            game_id = self.session.user_game_id(user)
        except GameNotRegistered:
            reply.add(f"No game is registered to [{user}]")
            return reply
        reply.add(f"Game [{game_id}]")

        if sub_command == VOTE_CMD:
            self._vote(reply, user, game_id, sub_args)
        elif sub_command == COMMIT_CMD:
            self._commit(reply, user, game_id)
        elif sub_command == DECK_CMD:
            self._deck(reply, game_id)
        else:
            self._selection(reply, game_id)
        return reply

    def _vote(self, reply: BotReply, user: str, game_id: str, target: str):
        try:
            record, index = self.session.vote(user, target, game_id=game_id)
        except (RecordNotFound, InvalidVoteTarget, ConfigurationError) as e:
            reply.add(f"Err: {e.message}")
            return
        reply.add(f"[{user}] voted card for pick [{record.position.label}]:\n{record.offered_cards[index]}")

    def _commit(self, reply: BotReply, user: str, game_id: str):
        try:
            result = self.session.commit(user, game_id=game_id)
        except (NotGameOwner, RecordNotFound, NoVotes, AlreadyCommitted, InvalidVoteTarget) as e:
            reply.add(f"Unable to pick: {e.message}")
            return
        reply.add(
            f"[{user}] committed card for pick [{result.record.position.label}]:\n{result.card_name}"
        )

    def _deck(self, reply: BotReply, game_id: str):
        record = self.session.store.get_last_record(game_id)
        if record is None or not record.decklist_text:
            reply.add_boxed("No data")
            return
        reply.add_boxed("\n".join(record.decklist_text))

    def _selection(self, reply: BotReply, game_id: str):
        record = self.session.store.get_last_record(game_id)
        if record is None:
            reply.add("No draft data available")
            return
        reply.add(f"Card {record.pick_id} of {TOTAL_PICKS}")
        reply.add_boxed(record.selection_text)

    def card_command(self, args: str) -> BotReply:
        """Strict catalog lookup; replies with the card image link."""
        reply = BotReply()
        try:
            name = self.session.resolver.resolve_strict(args)
        except AmbiguousMatch as e:
            listed = ", ".join(f"[{candidate}]" for candidate in e.candidates[:MAX_LISTED_CANDIDATES])
            reply.add(f"Unable to find card: Multiple cards found: {listed}")
            return reply
        except NoMatch:
            reply.add("Unable to find card: No card found")
            return reply

        card = self.session.catalog.get(name)
        reply.add(card.image_url or card.name)
        return reply

    def safe_handle(self, user: str, text: str) -> Optional[str]:
        """handle() for transports that must never crash on a bad message."""
        try:
            return self.handle(user, text)
        except DraftClawError as e:
            self.logger.error("Command failed", user=user, text=text, error=str(e))
            return f"Err: {e.message}"
