"""
sunbot.engine.moderation — Permanent & timed silences
=======================================================

A silenced user's lines are still recorded, but the command engine
answers them with a rejection instead of dispatching.

Each entry is either :class:`Permanent` (lifted only by ``!t``) or
:class:`Until` (expires at a fixed instant).  :meth:`is_silenced`
compares timestamps and never evicts; removing expired entries is the
sweeper's job (:meth:`ModerationTable.sweep_expired`).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from threading import Lock

from sunbot.engine.errors import UsageError

logger = logging.getLogger(__name__)

__all__ = ["ModerationTable", "Permanent", "Silence", "Until"]


@dataclass(frozen=True, slots=True)
class Permanent:
    """Never expires."""


@dataclass(frozen=True, slots=True)
class Until:
    """Expires once ``now`` reaches ``expires_at``."""

    expires_at: datetime


Silence = Permanent | Until


class ModerationTable:
    """Tracks silenced users.

    Thread-safe.  Every check-then-act sequence runs under one lock so a
    sweep can never interleave with a read of the same entry.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._silenced: dict[str, Silence] = {}

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def silence_permanently(self, user: str) -> None:
        with self._lock:
            self._silenced[user] = Permanent()
        logger.info("Silenced %s permanently", user)

    def silence_for(self, user: str, duration: timedelta, now: datetime) -> Until:
        """Silence *user* until ``now + duration``.

        Overwrites any existing entry, permanent ones included.

        Raises
        ------
        UsageError
            If *duration* is zero or negative.
        """
        if duration <= timedelta(0):
            raise UsageError("Please enter a valid number of minutes")
        entry = Until(expires_at=now + duration)
        with self._lock:
            previous = self._silenced.get(user)
            self._silenced[user] = entry
        if isinstance(previous, Permanent):
            logger.info("Timed silence for %s replaces a permanent one", user)
        logger.info("Silenced %s until %s", user, entry.expires_at.isoformat())
        return entry

    def unsilence(self, user: str) -> bool:
        """Lift any silence on *user*.  Returns False if there was none."""
        with self._lock:
            removed = self._silenced.pop(user, None) is not None
        if removed:
            logger.info("Unsilenced %s", user)
        return removed

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get(self, user: str) -> Silence | None:
        with self._lock:
            return self._silenced.get(user)

    def is_silenced(self, user: str, now: datetime) -> bool:
        with self._lock:
            entry = self._silenced.get(user)
        if entry is None:
            return False
        if isinstance(entry, Permanent):
            return True
        return entry.expires_at > now

    def remaining_minutes(self, user: str, now: datetime) -> int:
        """Whole minutes left on a timed silence, rounded up, never negative.

        Raises
        ------
        ValueError
            If the silence is permanent; callers branch on that first.
        """
        with self._lock:
            entry = self._silenced.get(user)
        if entry is None:
            return 0
        if isinstance(entry, Permanent):
            raise ValueError(f"{user} is silenced permanently")
        seconds = (entry.expires_at - now).total_seconds()
        return max(math.ceil(seconds / 60), 0)

    def __len__(self) -> int:
        with self._lock:
            return len(self._silenced)

    # -------------------------------------------------------------------
    # Sweep
    # -------------------------------------------------------------------
    def sweep_expired(self, now: datetime) -> list[str]:
        """Remove timed silences that expired strictly before *now*.

        Permanent entries are never touched.  Returns the removed names
        in table order.
        """
        with self._lock:
            expired = [
                user
                for user, entry in self._silenced.items()
                if isinstance(entry, Until) and entry.expires_at < now
            ]
            for user in expired:
                del self._silenced[user]
        if expired:
            logger.debug("Swept %d expired silence(s): %s", len(expired), ", ".join(expired))
        return expired
