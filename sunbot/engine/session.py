"""
sunbot.engine.session — BotSession
====================================

Every table the bot mutates, bundled in one object.  Built once at
startup by :class:`~sunbot.bot.core.ChatBot` and handed to the command
engine and the sweeper; nothing lives in module globals.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sunbot.constants import DEFAULT_HISTORY_LIMIT
from sunbot.engine.activity import ActivityLedger
from sunbot.engine.checkin import CheckinLedger
from sunbot.engine.history import MessageStore
from sunbot.engine.moderation import ModerationTable
from sunbot.engine.presence import PresenceTable


@dataclass
class BotSession:
    """All in-memory state for one bot process."""

    history: MessageStore = field(default_factory=MessageStore)
    activity: ActivityLedger = field(default_factory=ActivityLedger)
    moderation: ModerationTable = field(default_factory=ModerationTable)
    presence: PresenceTable = field(default_factory=PresenceTable)
    checkins: CheckinLedger = field(default_factory=CheckinLedger)

    @classmethod
    def create(cls, history_limit: int = DEFAULT_HISTORY_LIMIT) -> BotSession:
        return cls(history=MessageStore(capacity=history_limit))
