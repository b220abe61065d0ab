"""
sunbot.config — YAML Configuration Loader
==========================================

**Why this file exists:**
This module reads ``config.yaml`` for the bot's identity and connection
settings (server, channel, nick, moderator prefix, tuning knobs).
Secrets (the optional channel password) stay in ``.env`` and are read
by the entry point, never from YAML.

Usage::

    from sunbot.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.channel)           # "lounge"
    print(cfg.bot_name)          # "sunldigv3_bot"
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from sunbot.constants import (
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_PRIVILEGED_PREFIX,
    DEFAULT_RECONNECT_DELAY,
    DEFAULT_SWEEP_INTERVAL,
)


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class BotConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Connection
    server_url: str
    channel: str
    bot_name: str

    # Moderation
    privileged_prefix: str = DEFAULT_PRIVILEGED_PREFIX

    # History
    history_dir: str = "."
    history_limit: int = DEFAULT_HISTORY_LIMIT

    # Timing
    reconnect_delay: float = DEFAULT_RECONNECT_DELAY
    sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL

    # Logs every inbound frame at DEBUG when set
    debug: bool = False


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> BotConfig:
    """Read *path* and return a :class:`BotConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    return BotConfig(
        server_url=raw["server_url"],
        channel=raw["channel"],
        bot_name=raw["bot_name"],
        privileged_prefix=raw.get("privileged_prefix", DEFAULT_PRIVILEGED_PREFIX),
        history_dir=str(raw.get("history_dir", ".")),
        history_limit=int(raw.get("history_limit", DEFAULT_HISTORY_LIMIT)),
        reconnect_delay=float(raw.get("reconnect_delay", DEFAULT_RECONNECT_DELAY)),
        sweep_interval_seconds=float(
            raw.get("sweep_interval_seconds", DEFAULT_SWEEP_INTERVAL)
        ),
        debug=bool(raw.get("debug", False)),
    )
