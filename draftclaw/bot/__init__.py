"""Chat command surface."""

from .commands import BotReply, DraftCommandHandler

__all__ = ["BotReply", "DraftCommandHandler"]
