"""
sunbot.engine.activity — Per-user message counters
====================================================

Feeds ``!stats`` and ``!userinfo``.  Counts only go up; a user's entry
is created on their first observed line.
"""

from __future__ import annotations


class ActivityLedger:
    """user → number of chat lines seen."""

    def __init__(self) -> None:
        # dict insertion order doubles as "order of first appearance"
        self._counts: dict[str, int] = {}

    def increment(self, user: str) -> int:
        count = self._counts.get(user, 0) + 1
        self._counts[user] = count
        return count

    def get(self, user: str) -> int:
        return self._counts.get(user, 0)

    def top(self, n: int) -> list[tuple[str, int]]:
        """Return up to *n* ``(user, count)`` pairs, busiest first.

        ``sorted`` is stable, so equal counts keep first-appearance order.
        """
        if n <= 0:
            return []
        ranked = sorted(self._counts.items(), key=lambda item: item[1], reverse=True)
        return ranked[:n]

    def __len__(self) -> int:
        return len(self._counts)
