"""
sunbot.engine.history — In-Memory Message Ring Buffer
======================================================

Keeps the most recent chat lines with a monotonically increasing id and
an id → message index for ``!reply``.

Invariant: the index holds exactly the messages in the window.  When
the oldest message falls off the deque it is dropped from the index in
the same critical section.  Ids keep counting after eviction and are
never handed out twice.
"""

from __future__ import annotations

import threading
from collections import deque
from datetime import datetime

from sunbot.constants import DEFAULT_HISTORY_LIMIT
from sunbot.engine.events import Message


class MessageStore:
    """Thread-safe ring buffer backed by :class:`collections.deque`."""

    def __init__(self, capacity: int = DEFAULT_HISTORY_LIMIT) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._messages: deque[Message] = deque()
        self._index: dict[int, Message] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def record(self, author: str, text: str, now: datetime) -> Message:
        """Append a message, assigning the next id, and evict past capacity."""
        with self._lock:
            message = Message(id=self._next_id, author=author, text=text, timestamp=now)
            self._next_id += 1
            self._messages.append(message)
            self._index[message.id] = message
            while len(self._messages) > self.capacity:
                evicted = self._messages.popleft()
                del self._index[evicted.id]
            return message

    def recent(self, k: int) -> list[Message]:
        """Return the last *k* messages in arrival order."""
        if k <= 0:
            return []
        with self._lock:
            snapshot = list(self._messages)
        return snapshot[-k:]

    def lookup(self, message_id: int) -> Message | None:
        with self._lock:
            return self._index.get(message_id)

    def export_all(self) -> list[Message]:
        """Snapshot of the whole retained window, oldest first."""
        with self._lock:
            return list(self._messages)

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._messages)

    @property
    def next_id(self) -> int:
        return self._next_id
