"""
sunbot.engine.commands — Command parsing & dispatch
=====================================================

Turns one inbound chat line into zero or more replies.

Pipeline (per :class:`ChatEvent`):
1. Record the line in the message store and bump the sender's counter.
2. Gate: lines echoed back from the bot's own nick stop here.
3. Gate: a silenced sender gets a directed rejection and nothing else.
4. Dispatch the trimmed text against the command table.
5. Mention scan: the first ``@name`` on the line announces an AFK user.

Handlers raise :class:`~sunbot.engine.errors.CommandError` subclasses
for bad input; :meth:`CommandEngine.dispatch` converts them into a reply
directed at the sender.  No handler awaits while mutating state, so a
sweep scheduled on the same event loop never observes a half-applied
command.
"""

from __future__ import annotations

import asyncio
import logging
import random
import re
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from sunbot.constants import (
    COMMAND_DESCRIPTIONS,
    COMMANDS,
    DICE_SIDES,
    HELP_FOOTER,
    MSGLIST_SIZE,
    PRIVILEGED_COMMANDS,
    PRIVILEGED_USAGE,
    PUZZLED_RESPONSE,
    PUZZLED_TRIGGER,
    STATS_TOP_N,
    first_mention,
)
from sunbot.engine.errors import (
    AuthorizationError,
    CommandError,
    NotFoundError,
    UsageError,
)
from sunbot.engine.events import ChatEvent, Reply
from sunbot.engine.moderation import Permanent

if TYPE_CHECKING:
    from sunbot.config import BotConfig
    from sunbot.engine.session import BotSession
    from sunbot.services.export_service import HistoryExporter

logger = logging.getLogger(__name__)

# (sender, argument text, now) → reply or nothing
Handler = Callable[[str, str, datetime], Awaitable[Reply | None]]

_WHITESPACE = re.compile(r"\s+")


def split_args(text: str) -> tuple[str, str]:
    """Split *text* on its first run of whitespace → ``(head, rest)``."""
    parts = _WHITESPACE.split(text.strip(), maxsplit=1)
    head = parts[0]
    rest = parts[1] if len(parts) > 1 else ""
    return head, rest


class CommandEngine:
    """Interprets chat lines against the session's tables.

    Parameters
    ----------
    session:
        The :class:`BotSession` whose tables this engine reads and mutates.
    cfg:
        Bot identity (own nick) and the moderator name prefix.
    exporter:
        Destination for ``!save``.
    rng:
        Source for ``!roll``; tests pass a seeded :class:`random.Random`.
    """

    def __init__(
        self,
        session: BotSession,
        cfg: BotConfig,
        exporter: HistoryExporter,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self.session = session
        self.cfg = cfg
        self.exporter = exporter
        self._rng = rng or random.Random()

        # Whole trimmed line must equal the trigger
        self._exact: dict[str, Handler] = {
            COMMANDS["help"]: self._help,
            COMMANDS["special_help"]: self._special_help,
            PUZZLED_TRIGGER: self._puzzled,
            COMMANDS["roll"]: self._roll,
            COMMANDS["stats"]: self._stats,
            COMMANDS["save"]: self._save,
            COMMANDS["afk"]: self._afk,
            COMMANDS["checkin"]: self._checkin,
            COMMANDS["msglist"]: self._msglist,
        }
        # First word must equal the trigger; the rest are arguments
        self._prefixed: dict[str, Handler] = {
            COMMANDS["silence"]: self._silence,
            COMMANDS["unsilence"]: self._unsilence,
            COMMANDS["broadcast"]: self._broadcast,
            COMMANDS["mute"]: self._mute,
            COMMANDS["upper"]: self._upper,
            COMMANDS["lower"]: self._lower,
            COMMANDS["reply"]: self._reply,
            COMMANDS["userinfo"]: self._userinfo,
        }

    # -------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------
    async def handle(self, event: ChatEvent, now: datetime) -> list[Reply]:
        """Process one chat line and return what the bot should say."""
        self.session.history.record(event.nick, event.text, now)
        self.session.activity.increment(event.nick)

        # Gate 1: our own lines come back from the server
        if event.nick == self.cfg.bot_name:
            return []

        # Gate 2: silenced senders
        if self.session.moderation.is_silenced(event.nick, now):
            logger.debug("Rejected line from silenced user %s", event.nick)
            return [self._silenced_notice(event.nick, now)]

        replies: list[Reply] = []
        reply = await self.dispatch(event.nick, event.text, now)
        if reply is not None:
            replies.append(reply)

        notice = self._mention_notice(event.text, now)
        if notice is not None:
            replies.append(notice)
        return replies

    def resolve(self, text: str) -> tuple[Handler | None, str]:
        """Find the handler for *text* → ``(handler, argument text)``."""
        text = text.strip()
        handler = self._exact.get(text)
        if handler is not None:
            return handler, ""
        keyword, rest = split_args(text)
        return self._prefixed.get(keyword), rest

    async def dispatch(self, nick: str, text: str, now: datetime) -> Reply | None:
        """Run the command in *text*, if any.  Unknown text yields ``None``."""
        handler, args = self.resolve(text)
        if handler is None:
            return None
        try:
            return await handler(nick, args, now)
        except CommandError as exc:
            logger.info(
                "%s from %s rejected: %s", type(exc).__name__, nick, exc.message,
            )
            return Reply.to(nick, exc.message)

    def is_privileged(self, nick: str) -> bool:
        """Advisory check: anyone can pick a nick with the prefix."""
        return nick.startswith(self.cfg.privileged_prefix)

    def _require_privileged(self, nick: str) -> None:
        if not self.is_privileged(nick):
            raise AuthorizationError()

    # -------------------------------------------------------------------
    # Gates & scans
    # -------------------------------------------------------------------
    def _silenced_notice(self, nick: str, now: datetime) -> Reply:
        moderation = self.session.moderation
        if isinstance(moderation.get(nick), Permanent):
            return Reply.to(nick, "You are permanently muted")
        minutes = moderation.remaining_minutes(nick, now)
        return Reply.to(nick, f"You are muted, {minutes} minute(s) remaining")

    def _mention_notice(self, text: str, now: datetime) -> Reply | None:
        name = first_mention(text)
        if name is None:
            return None
        away = self.session.presence.away_duration(name, now)
        if away is None:
            return None
        return Reply.broadcast(f"{name} is AFK (away {int(away.total_seconds())}s)")

    # -------------------------------------------------------------------
    # Everyone
    # -------------------------------------------------------------------
    async def _help(self, nick: str, args: str, now: datetime) -> Reply:
        lines = [
            f"{trigger} - {COMMAND_DESCRIPTIONS[key]}"
            for key, trigger in COMMANDS.items()
            if key not in PRIVILEGED_COMMANDS
        ]
        return Reply.to(nick, "\n".join(["    Bot commands:", *lines, HELP_FOOTER]))

    async def _special_help(self, nick: str, args: str, now: datetime) -> Reply:
        lines = [
            f"{COMMANDS[key]} {PRIVILEGED_USAGE[key]} - {COMMAND_DESCRIPTIONS[key]}"
            for key in COMMANDS
            if key in PRIVILEGED_COMMANDS
        ]
        return Reply.to(nick, "\n".join(["    Moderator commands (restricted):", *lines]))

    async def _puzzled(self, nick: str, args: str, now: datetime) -> Reply:
        return Reply.to(nick, PUZZLED_RESPONSE)

    async def _roll(self, nick: str, args: str, now: datetime) -> Reply:
        return Reply.to(nick, f"\U0001f3b2 You rolled: {self._rng.randint(1, DICE_SIDES)}")

    async def _stats(self, nick: str, args: str, now: datetime) -> Reply:
        top = self.session.activity.top(STATS_TOP_N)
        summary = ", ".join(f"{user}: {count} msgs" for user, count in top)
        return Reply.to(nick, f"\U0001f3c6 Most active users: {summary or 'no data yet'}")

    async def _save(self, nick: str, args: str, now: datetime) -> Reply:
        # Snapshot on the loop; only the disk write leaves it
        messages = self.session.history.export_all()
        path = await asyncio.to_thread(self.exporter.save, messages, now.date())
        return Reply.to(nick, f"Chat history saved on the server: {path.name}")

    async def _afk(self, nick: str, args: str, now: datetime) -> Reply:
        result = self.session.presence.toggle(nick, now)
        if result.entered:
            return Reply.broadcast(f"{nick} is now AFK")
        seconds = int(result.duration.total_seconds())
        return Reply.broadcast(f"{nick} is back from AFK (away {seconds}s)")

    async def _checkin(self, nick: str, args: str, now: datetime) -> Reply:
        result = self.session.checkins.checkin(nick, now.date())
        if result.already_done:
            return Reply.to(nick, f"{nick} has already checked in today!")
        return Reply.broadcast(
            f"{nick} checked in! Current streak: {result.streak} day(s)"
        )

    async def _msglist(self, nick: str, args: str, now: datetime) -> Reply:
        recent = self.session.history.recent(MSGLIST_SIZE)
        if not recent:
            return Reply.to(nick, "No messages yet")
        listing = "\n".join(f"[{m.id}] {m.author}: {m.text}" for m in recent)
        return Reply.to(nick, f"Latest {MSGLIST_SIZE} messages:\n{listing}")

    async def _upper(self, nick: str, args: str, now: datetime) -> Reply:
        if not args:
            raise UsageError(f"Please enter some text, usage: {COMMANDS['upper']} <text>")
        return Reply.to(nick, args.upper())

    async def _lower(self, nick: str, args: str, now: datetime) -> Reply:
        if not args:
            raise UsageError(f"Please enter some text, usage: {COMMANDS['lower']} <text>")
        return Reply.to(nick, args.lower())

    async def _reply(self, nick: str, args: str, now: datetime) -> Reply:
        if not args:
            raise UsageError(f"Usage: {COMMANDS['reply']} <id> <text>")
        id_text, content = split_args(args)
        try:
            message_id = int(id_text)
        except ValueError:
            raise NotFoundError("Message id not found") from None
        target = self.session.history.lookup(message_id)
        if target is None:
            raise NotFoundError("Message id not found")
        return Reply.broadcast(f"Reply to @{target.author} (ID:{message_id}): {content}")

    async def _userinfo(self, nick: str, args: str, now: datetime) -> Reply:
        target, _ = split_args(args) if args else (nick, "")
        session = self.session
        info = "\n".join([
            f"{target}'s info:",
            f"Messages sent: {session.activity.get(target)}",
            f"AFK: {'yes' if session.presence.is_away(target) else 'no'}",
            f"Muted: {'yes' if session.moderation.is_silenced(target, now) else 'no'}",
        ])
        return Reply.to(nick, info)

    # -------------------------------------------------------------------
    # Moderators
    # -------------------------------------------------------------------
    async def _silence(self, nick: str, args: str, now: datetime) -> Reply:
        target, _ = split_args(args)
        if not target:
            raise UsageError(f"Usage: {COMMANDS['silence']} <user>")
        if target == self.cfg.bot_name:
            raise UsageError("The bot can't mute itself")
        self._require_privileged(nick)

        self.session.moderation.silence_permanently(target)
        logger.info("%s silenced %s permanently", nick, target)
        return Reply.broadcast(f"{target} has been muted permanently")

    async def _unsilence(self, nick: str, args: str, now: datetime) -> Reply:
        target, _ = split_args(args)
        if not target:
            raise UsageError(f"Usage: {COMMANDS['unsilence']} <user>")
        self._require_privileged(nick)

        self.session.moderation.unsilence(target)
        logger.info("%s unsilenced %s", nick, target)
        return Reply.broadcast(f"{target} has been unmuted")

    async def _broadcast(self, nick: str, args: str, now: datetime) -> Reply:
        if not args:
            raise UsageError(f"Usage: {COMMANDS['broadcast']} <text>")
        self._require_privileged(nick)
        return Reply.broadcast(args)

    async def _mute(self, nick: str, args: str, now: datetime) -> Reply:
        parts = args.split()
        if len(parts) < 2:
            raise UsageError(f"Wrong format, usage: {COMMANDS['mute']} <user> <minutes>")
        target, minutes_text = parts[0], parts[1]
        if target == self.cfg.bot_name:
            raise UsageError("The bot can't mute itself")
        self._require_privileged(nick)

        try:
            minutes = int(minutes_text)
            self.session.moderation.silence_for(target, timedelta(minutes=minutes), now)
        except (ValueError, OverflowError):
            raise UsageError("Please enter a valid number of minutes") from None
        logger.info("%s silenced %s for %d minute(s)", nick, target, minutes)
        return Reply.broadcast(f"{target} has been muted for {minutes} minute(s)")
