"""
sunbot.engine.errors — Command error taxonomy
===============================================

Handlers raise these; :class:`~sunbot.engine.commands.CommandEngine`
catches them and turns ``message`` into a reply directed at the sender.
None of them is fatal and none of them mutates state.
"""

from __future__ import annotations

__all__ = [
    "AuthorizationError",
    "CommandError",
    "NotFoundError",
    "PersistenceFailure",
    "UsageError",
]


class CommandError(Exception):
    """Base class. ``message`` is shown to the user verbatim."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UsageError(CommandError):
    """Malformed or missing command arguments."""


class AuthorizationError(CommandError):
    """Privileged command from a sender without the moderator prefix."""

    def __init__(self, message: str = "You are not allowed to use this command") -> None:
        super().__init__(message)


class NotFoundError(CommandError):
    """A referenced message id is unknown or already evicted."""


class PersistenceFailure(CommandError):
    """Writing the exported history to disk failed."""
