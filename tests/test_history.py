"""
tests/test_history.py — Message Store Tests
=============================================

Tests id assignment, ring-buffer eviction, and that the id index always
mirrors the retained window.
"""

from __future__ import annotations

import pytest

from sunbot.engine.history import MessageStore


class TestRecord:
    def test_ids_start_at_one_and_increase(self, t0):
        store = MessageStore()
        first = store.record("alice", "hi", t0)
        second = store.record("bob", "yo", t0)
        assert (first.id, second.id) == (1, 2)
        assert second.author == "bob"
        assert second.text == "yo"
        assert second.timestamp == t0

    def test_rejects_non_positive_capacity(self):
        with pytest.raises(ValueError):
            MessageStore(capacity=0)


class TestEviction:
    def test_keeps_last_thousand_in_order(self, t0):
        """1005 records → recent(1000) is exactly the last 1000 payloads."""
        store = MessageStore(capacity=1000)
        for i in range(1005):
            store.record(f"user{i % 7}", f"m{i}", t0)

        window = store.recent(1000)
        assert store.size == 1000
        assert [m.text for m in window] == [f"m{i}" for i in range(5, 1005)]

    def test_evicted_ids_not_found(self, t0):
        store = MessageStore(capacity=1000)
        for i in range(1005):
            store.record("alice", f"m{i}", t0)

        for evicted_id in range(1, 6):
            assert store.lookup(evicted_id) is None
        assert store.lookup(6).text == "m5"
        assert store.lookup(1005).text == "m1004"

    def test_ids_never_reused_after_eviction(self, t0):
        store = MessageStore(capacity=2)
        for text in ("a", "b", "c"):
            store.record("alice", text, t0)
        assert store.record("alice", "d", t0).id == 4
        assert [m.id for m in store.export_all()] == [3, 4]


class TestQueries:
    def test_recent_returns_fewer_when_short(self, t0):
        store = MessageStore()
        store.record("alice", "one", t0)
        store.record("alice", "two", t0)
        assert [m.text for m in store.recent(5)] == ["one", "two"]

    def test_recent_is_repeatable(self, t0):
        store = MessageStore()
        for text in ("one", "two", "three"):
            store.record("alice", text, t0)
        assert store.recent(2) == store.recent(2)
        assert [m.text for m in store.recent(2)] == ["two", "three"]

    def test_recent_zero_is_empty(self, t0):
        store = MessageStore()
        store.record("alice", "one", t0)
        assert store.recent(0) == []

    def test_lookup_never_issued_id(self):
        assert MessageStore().lookup(42) is None

    def test_export_all_is_a_snapshot(self, t0):
        store = MessageStore()
        store.record("alice", "one", t0)
        snapshot = store.export_all()
        store.record("alice", "two", t0)
        assert [m.text for m in snapshot] == ["one"]
