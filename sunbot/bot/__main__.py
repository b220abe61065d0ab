"""
sunbot.bot.__main__ — Entry point for ``python -m sunbot.bot``
================================================================

Wiring:
1. Load .env (secrets).
2. Load config.yaml (identity & tuning).
3. Create the ChatBot (session, engine, transport, sweep loop).
4. Start the bot (blocking; runs the asyncio event loop until
   Ctrl+C or SIGTERM).

Run with::

    python -m sunbot.bot
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys

from dotenv import load_dotenv

from sunbot.bot.core import ChatBot
from sunbot.config import load_config

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("sunbot")


async def _run(bot: ChatBot) -> None:
    """Run *bot*, turning SIGTERM into a graceful close."""
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGTERM, lambda: asyncio.ensure_future(bot.close()))
    except NotImplementedError:
        pass  # Windows
    await bot.start()


def main() -> None:
    """Bootstrap and run the bot."""

    # 1. Environment variables (secrets).
    load_dotenv()

    # 2. Configuration.
    try:
        cfg = load_config(os.getenv("SUNBOT_CONFIG", "config.yaml"))
    except (FileNotFoundError, KeyError) as exc:
        logger.critical("Invalid configuration: %s", exc)
        sys.exit(1)

    if cfg.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    logger.info("Config loaded — channel ?%s as %s", cfg.channel, cfg.bot_name)

    # 3. Bot.
    bot = ChatBot(cfg, password=os.getenv("BOT_PASSWORD") or None)

    # 4. Run (blocks until Ctrl+C or SIGTERM).
    logger.info("Starting sunbot…")
    try:
        asyncio.run(_run(bot))
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully…")


if __name__ == "__main__":
    main()
