"""
sunbot.bot.tasks — Periodic Background Tasks
==============================================

Scheduled jobs that run on ``discord.ext.tasks`` loops:

- **Expiry sweep** — every 60 seconds (``sweep_interval_seconds``),
  lifts timed mutes that have run out and announces each one.

The loop shares the bot's event loop with frame handling, so a sweep
never runs in the middle of a command.  Cancelling the loop on shutdown
abandons any in-flight sweep; each user's entry is removed atomically,
so nothing is left half-done.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from discord.ext import tasks

from sunbot.constants import DEFAULT_SWEEP_INTERVAL

if TYPE_CHECKING:
    from sunbot.bot.core import ChatBot

logger = logging.getLogger(__name__)


class ExpirySweeper:
    """Owns the expiry sweep loop for one :class:`ChatBot`."""

    def __init__(self, bot: ChatBot, interval: float = DEFAULT_SWEEP_INTERVAL) -> None:
        self.bot = bot
        self.interval = interval

    def start(self) -> None:
        """Start the loop.  Must be called from inside the running event loop."""
        if self.sweep_loop.is_running():
            return
        self.sweep_loop.change_interval(seconds=self.interval)
        self.sweep_loop.start()
        logger.info("Expiry sweep started (every %.0f seconds)", self.interval)

    def stop(self) -> None:
        self.sweep_loop.cancel()

    # -------------------------------------------------------------------
    # Expiry sweep
    # -------------------------------------------------------------------
    @tasks.loop(seconds=DEFAULT_SWEEP_INTERVAL)
    async def sweep_loop(self):
        """Lift expired timed mutes and announce them."""
        try:
            released = await self.bot.run_sweep()
            if released:
                logger.info("Sweep complete: %d mute(s) expired", released)
        except Exception:
            logger.exception("Expiry sweep failed", extra={"task": "sweep"})
