"""
sunbot.engine.presence — AFK table
====================================

A user is away iff they have an entry here.  ``!afk`` flips the state;
mentions of an away user trigger a notice from the command engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True, slots=True)
class AwayToggle:
    """Result of :meth:`PresenceTable.toggle`.

    ``duration`` is set only when the user came back.
    """

    entered: bool
    duration: timedelta | None = None


class PresenceTable:
    """user → instant they went AFK."""

    def __init__(self) -> None:
        self._away_since: dict[str, datetime] = {}

    def toggle(self, user: str, now: datetime) -> AwayToggle:
        since = self._away_since.pop(user, None)
        if since is None:
            self._away_since[user] = now
            return AwayToggle(entered=True)
        return AwayToggle(entered=False, duration=now - since)

    def is_away(self, user: str) -> bool:
        return user in self._away_since

    def away_duration(self, user: str, now: datetime) -> timedelta | None:
        since = self._away_since.get(user)
        if since is None:
            return None
        return now - since
