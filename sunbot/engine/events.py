"""
sunbot.engine.events — ChatEvent, Reply and Message
=====================================================

The envelopes that flow in and out of the engine.  Every inbound
``chat`` frame is normalized into a :class:`ChatEvent`; every line the
bot wants to say is a :class:`Reply`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

__all__ = ["ChatEvent", "Message", "Reply"]


@dataclass(frozen=True, slots=True)
class ChatEvent:
    """One chat line as delivered by the transport."""

    nick: str
    text: str


@dataclass(frozen=True, slots=True)
class Message:
    """A recorded chat line.  Owned by the message store, never mutated."""

    id: int
    author: str
    text: str
    timestamp: datetime

    def to_dict(self) -> dict[str, int | str]:
        """Export shape used by the history file."""
        return {
            "id": self.id,
            "nick": self.author,
            "text": self.text,
            "time": self.timestamp.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class Reply:
    """An outbound chat line.

    Directed replies carry ``mention`` and render as ``@mention text``;
    broadcasts leave it ``None``.
    """

    text: str
    mention: str | None = None

    @classmethod
    def to(cls, nick: str, text: str) -> Reply:
        return cls(text=text, mention=nick)

    @classmethod
    def broadcast(cls, text: str) -> Reply:
        return cls(text=text)

    @property
    def is_directed(self) -> bool:
        return self.mention is not None

    def render(self) -> str:
        if self.mention:
            return f"@{self.mention} {self.text}"
        return self.text
