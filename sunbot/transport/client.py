"""
sunbot.transport.client — WebSocket client with fixed-delay reconnect
======================================================================

**Why this file exists:**
The engine never touches the socket.  This client owns the aiohttp
session and the WebSocket, calls ``on_connect`` after every (re)connect
so the bot can re-join its channel, and feeds each text frame to
``on_frame``.

Failure policy:
    - Connect failures and dropped connections are logged, then retried
      after ``reconnect_delay`` seconds, forever, until :meth:`close`.
    - :meth:`send` is fire-and-forget: when disconnected or on error it
      logs and returns ``False``; nothing is raised to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

import aiohttp

from sunbot.constants import DEFAULT_RECONNECT_DELAY

logger = logging.getLogger(__name__)

OnConnect = Callable[[], Awaitable[None]]
OnFrame = Callable[[str], Awaitable[None]]

HEARTBEAT_SECONDS = 30.0


class TransportFailure(Exception):
    """Connecting to (or talking over) the WebSocket failed."""


class HackChatClient:
    """Long-lived WebSocket connection to a hack.chat server."""

    def __init__(
        self,
        url: str,
        *,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        session_factory: Callable[[], aiohttp.ClientSession] = aiohttp.ClientSession,
    ) -> None:
        self.url = url
        self.reconnect_delay = reconnect_delay
        self._session_factory = session_factory
        self._session: aiohttp.ClientSession | None = None
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._closing = False

    @property
    def connected(self) -> bool:
        return self._ws is not None and not self._ws.closed

    # -------------------------------------------------------------------
    # Connection loop
    # -------------------------------------------------------------------
    async def run(self, on_connect: OnConnect, on_frame: OnFrame) -> None:
        """Connect and pump frames until :meth:`close` is called."""
        self._closing = False
        self._session = self._session_factory()
        try:
            while not self._closing:
                try:
                    await self._run_once(on_connect, on_frame)
                except TransportFailure as exc:
                    logger.warning("%s: %s", exc, exc.__cause__)
                if self._closing:
                    break
                logger.info(
                    "Connection closed, reconnecting in %.0f seconds…",
                    self.reconnect_delay,
                )
                await asyncio.sleep(self.reconnect_delay)
        finally:
            await self._session.close()
            self._session = None

    async def _run_once(self, on_connect: OnConnect, on_frame: OnFrame) -> None:
        assert self._session is not None
        try:
            ws = await self._session.ws_connect(self.url, heartbeat=HEARTBEAT_SECONDS)
        except (aiohttp.ClientError, OSError) as exc:
            raise TransportFailure(f"Could not connect to {self.url}") from exc

        self._ws = ws
        logger.info("WebSocket connected to %s", self.url)
        try:
            await on_connect()
            async for msg in ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    await on_frame(msg.data)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    logger.error("WebSocket error: %s", ws.exception())
                    break
        finally:
            self._ws = None
            if not ws.closed:
                await ws.close()

    # -------------------------------------------------------------------
    # Outbound
    # -------------------------------------------------------------------
    async def send(self, payload: str) -> bool:
        """Send one text frame.  Returns False if it was dropped."""
        ws = self._ws
        if ws is None or ws.closed:
            logger.warning("WebSocket not connected, dropping outbound frame")
            return False
        try:
            await ws.send_str(payload)
        except (aiohttp.ClientError, ConnectionResetError, RuntimeError):
            logger.exception("Failed to send frame to %s", self.url)
            return False
        return True

    async def close(self) -> None:
        """Stop reconnecting and close the socket if open."""
        self._closing = True
        ws = self._ws
        if ws is not None and not ws.closed:
            await ws.close()
