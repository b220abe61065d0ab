"""
sunbot.bot.core — Bot Instance & Wiring
=========================================

**Why this file exists:**
:class:`ChatBot` is the one object that knows about both sides:

1. It owns the :class:`BotSession` (all in-memory tables) and the
   :class:`CommandEngine` that mutates it.
2. It owns the :class:`HackChatClient` and re-joins the channel on
   every (re)connect.
3. It decodes each inbound frame, hands chat lines to the engine and
   sends back whatever the engine returns.
4. It runs the expiry sweep loop (:mod:`sunbot.bot.tasks`).

Everything happens on one asyncio event loop, so command handling and
sweeps take turns instead of racing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from sunbot.bot.tasks import ExpirySweeper
from sunbot.config import BotConfig
from sunbot.engine.commands import CommandEngine
from sunbot.engine.events import ChatEvent, Reply
from sunbot.engine.session import BotSession
from sunbot.engine.sweeper import sweep_expired
from sunbot.services.export_service import HistoryExporter
from sunbot.transport.client import HackChatClient
from sunbot.transport.protocol import (
    decode_frame,
    encode_chat,
    encode_join,
    to_chat_event,
)

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(UTC)


class ChatBot:
    """A hack.chat channel participant.

    Parameters
    ----------
    cfg:
        The parsed :class:`BotConfig` from ``config.yaml``.
    password:
        Optional channel password (``BOT_PASSWORD`` in ``.env``).
    client:
        Transport override; tests pass a mock with async ``run``/``send``/``close``.
    exporter:
        ``!save`` destination override.
    clock:
        Returns the current aware UTC datetime.
    """

    def __init__(
        self,
        cfg: BotConfig,
        *,
        password: str | None = None,
        client: HackChatClient | None = None,
        exporter: HistoryExporter | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.cfg = cfg
        self.password = password
        self.clock = clock

        self.session = BotSession.create(history_limit=cfg.history_limit)
        self.engine = CommandEngine(
            self.session, cfg, exporter or HistoryExporter(cfg.history_dir),
        )
        self.client = client or HackChatClient(
            cfg.server_url, reconnect_delay=cfg.reconnect_delay,
        )
        self.sweeper = ExpirySweeper(self, interval=cfg.sweep_interval_seconds)

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------
    async def start(self) -> None:
        """Run until the transport stops (``close()`` or cancellation)."""
        logger.info("Starting %s for channel ?%s", self.cfg.bot_name, self.cfg.channel)
        self.sweeper.start()
        try:
            await self.client.run(self.join_channel, self.on_frame)
        finally:
            await self.close()

    async def close(self) -> None:
        """Graceful shutdown: stop the sweep loop and the socket."""
        logger.info("Bot shutting down…")
        self.sweeper.stop()
        await self.client.close()

    async def join_channel(self) -> None:
        """Called by the transport after every successful connect."""
        await self.client.send(encode_join(self.cfg.channel, self.cfg.bot_name, self.password))
        logger.info("Joined ?%s as %s", self.cfg.channel, self.cfg.bot_name)

    # -----------------------------------------------------------------------
    # Inbound
    # -----------------------------------------------------------------------
    async def on_frame(self, raw: str) -> None:
        """Handle one raw frame from the transport."""
        if self.cfg.debug:
            logger.debug("Received frame: %s", raw)

        frame = decode_frame(raw)
        if frame is None:
            return
        event = to_chat_event(frame)
        if event is None:
            logger.debug("Ignoring %s frame", frame.cmd)
            return

        try:
            await self._handle_chat(event)
        except Exception:
            logger.exception(
                "Error processing chat line from %s",
                event.nick,
                extra={"nick": event.nick},
            )

    async def _handle_chat(self, event: ChatEvent) -> None:
        """Inner chat handler (separated for error isolation)."""
        replies = await self.engine.handle(event, self.clock())
        for reply in replies:
            await self.send(reply)

    # -----------------------------------------------------------------------
    # Outbound
    # -----------------------------------------------------------------------
    async def send(self, reply: Reply) -> None:
        await self.client.send(encode_chat(reply.render()))

    async def run_sweep(self) -> int:
        """One expiry sweep; returns how many mutes were lifted."""
        notices = sweep_expired(self.session, self.clock())
        for notice in notices:
            await self.send(notice)
        return len(notices)
