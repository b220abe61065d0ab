"""
tests/test_config.py — YAML Config Loader Tests
=================================================
"""

from __future__ import annotations

import pytest

from sunbot.config import BotConfig, load_config
from sunbot.constants import (
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_PRIVILEGED_PREFIX,
    DEFAULT_SWEEP_INTERVAL,
)

MINIMAL = """\
server_url: wss://hack.chat/chat-ws
channel: lounge
bot_name: sunbot
"""


class TestLoadConfig:
    def test_minimal_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(MINIMAL, encoding="utf-8")

        cfg = load_config(path)

        assert cfg == BotConfig(
            server_url="wss://hack.chat/chat-ws", channel="lounge", bot_name="sunbot",
        )
        assert cfg.privileged_prefix == DEFAULT_PRIVILEGED_PREFIX
        assert cfg.history_limit == DEFAULT_HISTORY_LIMIT
        assert cfg.sweep_interval_seconds == DEFAULT_SWEEP_INTERVAL
        assert cfg.debug is False

    def test_overrides(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            MINIMAL
            + "privileged_prefix: mod_\n"
            + "history_dir: exports\n"
            + "history_limit: 50\n"
            + "reconnect_delay: 2\n"
            + "sweep_interval_seconds: 15\n"
            + "debug: true\n",
            encoding="utf-8",
        )

        cfg = load_config(path)

        assert cfg.privileged_prefix == "mod_"
        assert cfg.history_dir == "exports"
        assert cfg.history_limit == 50
        assert cfg.reconnect_delay == 2.0
        assert cfg.sweep_interval_seconds == 15.0
        assert cfg.debug is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="config.yaml.example"):
            load_config(tmp_path / "nope.yaml")

    def test_missing_required_key(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("server_url: wss://hack.chat/chat-ws\nchannel: lounge\n", encoding="utf-8")
        with pytest.raises(KeyError, match="bot_name"):
            load_config(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(KeyError):
            load_config(path)

    def test_config_is_frozen(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(MINIMAL, encoding="utf-8")
        cfg = load_config(path)
        with pytest.raises(AttributeError):
            cfg.channel = "elsewhere"
