"""
sunbot.engine.sweeper — Expired-mute sweep pass
=================================================

One pass of the expiry sweeper: drop timed silences that have run out
and produce one broadcast per released user.  Scheduling lives in
:mod:`sunbot.bot.tasks`; this module only decides what to say.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sunbot.engine.events import Reply
from sunbot.engine.session import BotSession

logger = logging.getLogger(__name__)


def sweep_expired(session: BotSession, now: datetime) -> list[Reply]:
    """Run one sweep against *session* and return the expiry notices."""
    released = session.moderation.sweep_expired(now)
    for user in released:
        logger.info("Timed silence expired for %s", user)
    return [Reply.broadcast(f"{user}'s temporary mute has expired") for user in released]
