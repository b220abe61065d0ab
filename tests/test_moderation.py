"""
tests/test_moderation.py — Silence Table & Expiry Sweep Tests
===============================================================

Tests permanent vs timed silences, the expiry boundary, remaining-minute
feedback, and the sweep pass that lifts expired mutes.
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from sunbot.engine.errors import UsageError
from sunbot.engine.events import Reply
from sunbot.engine.moderation import ModerationTable, Permanent, Until
from sunbot.engine.session import BotSession
from sunbot.engine.sweeper import sweep_expired


class TestTransitions:
    def test_unknown_user_not_silenced(self, t0):
        assert ModerationTable().is_silenced("bob", t0) is False

    def test_permanent_always_silenced(self, t0):
        table = ModerationTable()
        table.silence_permanently("bob")
        assert table.is_silenced("bob", t0)
        assert table.is_silenced("bob", t0 + timedelta(days=3650))
        assert table.get("bob") == Permanent()

    def test_permanent_is_idempotent_and_overwrites_timed(self, t0):
        table = ModerationTable()
        table.silence_for("bob", timedelta(minutes=5), t0)
        table.silence_permanently("bob")
        table.silence_permanently("bob")
        assert table.get("bob") == Permanent()
        assert len(table) == 1

    def test_timed_overwrites_permanent(self, t0):
        """A later !mute replaces an earlier permanent silence."""
        table = ModerationTable()
        table.silence_permanently("bob")
        table.silence_for("bob", timedelta(minutes=5), t0)
        assert table.get("bob") == Until(expires_at=t0 + timedelta(minutes=5))

    @pytest.mark.parametrize("minutes", [0, -1, -60])
    def test_non_positive_duration_rejected(self, t0, minutes):
        table = ModerationTable()
        with pytest.raises(UsageError):
            table.silence_for("bob", timedelta(minutes=minutes), t0)
        assert table.get("bob") is None

    def test_unsilence_absent_is_noop(self):
        table = ModerationTable()
        assert table.unsilence("bob") is False
        assert table.unsilence("bob") is False
        assert len(table) == 0

    def test_unsilence_removes_entry(self, t0):
        table = ModerationTable()
        table.silence_permanently("bob")
        assert table.unsilence("bob") is True
        assert table.is_silenced("bob", t0) is False


class TestExpiryBoundary:
    def test_silenced_until_exactly_expiry(self, t0):
        table = ModerationTable()
        table.silence_for("bob", timedelta(minutes=1), t0)
        assert table.is_silenced("bob", t0)
        assert table.is_silenced("bob", t0 + timedelta(seconds=59))
        assert table.is_silenced("bob", t0 + timedelta(seconds=60)) is False

    def test_check_does_not_evict(self, t0):
        """An expired entry answers False but stays until the sweep."""
        table = ModerationTable()
        table.silence_for("bob", timedelta(minutes=1), t0)
        assert table.is_silenced("bob", t0 + timedelta(minutes=5)) is False
        assert table.get("bob") is not None


class TestRemainingMinutes:
    def test_rounds_up(self, t0):
        table = ModerationTable()
        table.silence_for("bob", timedelta(minutes=2), t0)
        assert table.remaining_minutes("bob", t0) == 2
        assert table.remaining_minutes("bob", t0 + timedelta(seconds=30)) == 2
        assert table.remaining_minutes("bob", t0 + timedelta(seconds=61)) == 1

    def test_clamped_at_zero(self, t0):
        table = ModerationTable()
        table.silence_for("bob", timedelta(minutes=1), t0)
        assert table.remaining_minutes("bob", t0 + timedelta(minutes=10)) == 0

    def test_absent_is_zero(self, t0):
        assert ModerationTable().remaining_minutes("bob", t0) == 0

    def test_permanent_raises(self, t0):
        table = ModerationTable()
        table.silence_permanently("bob")
        with pytest.raises(ValueError):
            table.remaining_minutes("bob", t0)


class TestSweep:
    def test_removes_only_expired_timed_entries(self, t0):
        table = ModerationTable()
        table.silence_for("bob", timedelta(minutes=1), t0)
        table.silence_for("carol", timedelta(minutes=10), t0)
        table.silence_permanently("dave")

        removed = table.sweep_expired(t0 + timedelta(minutes=2))

        assert removed == ["bob"]
        assert table.get("bob") is None
        assert isinstance(table.get("carol"), Until)
        assert table.get("dave") == Permanent()

    def test_expiry_equal_to_now_is_kept(self, t0):
        """Only entries strictly in the past are swept."""
        table = ModerationTable()
        table.silence_for("bob", timedelta(minutes=1), t0)
        assert table.sweep_expired(t0 + timedelta(minutes=1)) == []
        assert table.get("bob") is not None

    def test_permanent_never_swept(self, t0):
        table = ModerationTable()
        table.silence_permanently("dave")
        assert table.sweep_expired(t0 + timedelta(days=10_000)) == []


class TestSweepPass:
    def test_one_notice_per_released_user(self, t0):
        session = BotSession()
        session.moderation.silence_for("bob", timedelta(minutes=1), t0)
        session.moderation.silence_for("carol", timedelta(minutes=1), t0)

        notices = sweep_expired(session, t0 + timedelta(seconds=61))

        assert notices == [
            Reply.broadcast("bob's temporary mute has expired"),
            Reply.broadcast("carol's temporary mute has expired"),
        ]
        assert len(session.moderation) == 0

    def test_nothing_expired_means_no_notices(self, t0):
        session = BotSession()
        session.moderation.silence_permanently("dave")
        assert sweep_expired(session, t0) == []
