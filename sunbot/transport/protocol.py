"""
sunbot.transport.protocol — hack.chat JSON frames
===================================================

hack.chat speaks one JSON object per WebSocket text frame, discriminated
by ``cmd``.  We only act on inbound ``chat`` frames; everything else
(``onlineSet``, ``onlineAdd``, ``info``, ``warn`` …) is decoded and
ignored by the caller.

Malformed frames (bad JSON, missing fields) are logged and dropped here
so they never reach command dispatch.
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sunbot.engine.events import ChatEvent

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class InboundFrame(BaseModel):
    """Any server frame.  Unknown keys are kept for debug logging."""

    model_config = ConfigDict(extra="allow")

    cmd: str
    nick: str | None = None
    text: str | None = None


class ChatFrame(BaseModel):
    model_config = ConfigDict(extra="ignore")

    cmd: Literal["chat"]
    nick: str
    text: str


class JoinFrame(BaseModel):
    cmd: Literal["join"] = "join"
    channel: str
    nick: str
    password: str | None = Field(default=None, serialization_alias="pass")


class OutboundChatFrame(BaseModel):
    cmd: Literal["chat"] = "chat"
    text: str


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------
def decode_frame(raw: str | bytes) -> InboundFrame | None:
    """Parse one raw frame; ``None`` if it isn't a valid frame."""
    try:
        return InboundFrame.model_validate_json(raw)
    except ValidationError as exc:
        logger.warning(
            "Dropping malformed frame (%d error(s)): %.200r",
            exc.error_count(), raw,
        )
        return None


def to_chat_event(frame: InboundFrame) -> ChatEvent | None:
    """Narrow a decoded frame to a :class:`ChatEvent`; ``None`` for non-chat frames."""
    if frame.cmd != "chat":
        return None
    try:
        chat = ChatFrame.model_validate(frame.model_dump())
    except ValidationError as exc:
        logger.warning(
            "Dropping chat frame with missing fields (%d error(s))", exc.error_count(),
        )
        return None
    return ChatEvent(nick=chat.nick, text=chat.text)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------
def encode_join(channel: str, nick: str, password: str | None = None) -> str:
    frame = JoinFrame(channel=channel, nick=nick, password=password)
    return frame.model_dump_json(by_alias=True, exclude_none=True)


def encode_chat(text: str) -> str:
    return OutboundChatFrame(text=text).model_dump_json()
