"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import random
from datetime import UTC, datetime

import pytest

from sunbot.config import BotConfig
from sunbot.engine.commands import CommandEngine
from sunbot.engine.session import BotSession
from sunbot.services.export_service import HistoryExporter

BOT_NAME = "sunldigv3_bot"


@pytest.fixture
def t0() -> datetime:
    """A fixed, timezone-aware 'now' so no test depends on the wall clock."""
    return datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def cfg(tmp_path) -> BotConfig:
    """Config pointing history exports at a per-test temp directory."""
    return BotConfig(
        server_url="wss://chat.example.invalid/chat-ws",
        channel="lounge",
        bot_name=BOT_NAME,
        history_dir=str(tmp_path),
    )


@pytest.fixture
def session() -> BotSession:
    return BotSession()


@pytest.fixture
def engine(session: BotSession, cfg: BotConfig) -> CommandEngine:
    """A CommandEngine over a fresh session with a seeded dice RNG."""
    return CommandEngine(
        session, cfg, HistoryExporter(cfg.history_dir), rng=random.Random(1234),
    )
