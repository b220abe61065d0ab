"""
sunbot.constants — Shared Constants & Helpers
===============================================

Single source of truth for command triggers, help text and limits.
Import from here instead of duplicating in the engine, bot, and tests.
"""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Defaults (overridable from config.yaml)
# ---------------------------------------------------------------------------
DEFAULT_HISTORY_LIMIT = 1000
DEFAULT_PRIVILEGED_PREFIX = "sun"
DEFAULT_RECONNECT_DELAY = 5.0
DEFAULT_SWEEP_INTERVAL = 60.0

# ---------------------------------------------------------------------------
# Fixed presentation limits
# ---------------------------------------------------------------------------
MSGLIST_SIZE = 5
STATS_TOP_N = 3
DICE_SIDES = 6

# ---------------------------------------------------------------------------
# Command triggers: command key → literal trigger
# ---------------------------------------------------------------------------
COMMANDS: dict[str, str] = {
    "help": "!help",
    "roll": "!roll",
    "stats": "!stats",
    "save": "!save",
    "afk": "!afk",
    "special_help": "!help s",
    "silence": "!s",
    "unsilence": "!t",
    "broadcast": "!con",
    "mute": "!mute",
    "checkin": "!checkin",
    "upper": "!upper",
    "lower": "!lower",
    "reply": "!reply",
    "userinfo": "!userinfo",
    "msglist": "!msglist",
}

COMMAND_DESCRIPTIONS: dict[str, str] = {
    "help": "Show every available command",
    "roll": "Roll a six-sided die",
    "stats": "Show the most active users in this channel",
    "save": "Export the chat history to a JSON file",
    "afk": "Toggle your away (AFK) status",
    "special_help": "Show the moderator command reference",
    "silence": "Mute a user permanently",
    "unsilence": "Lift a user's mute",
    "broadcast": "Post custom text as the bot",
    "mute": "Mute a user for a number of minutes",
    "checkin": "Daily check-in, tracks your consecutive-day streak",
    "upper": "Convert text to UPPERCASE [!upper <text>]",
    "lower": "Convert text to lowercase [!lower <text>]",
    "reply": "Quote a past message by id (see !msglist)",
    "userinfo": "Show a user's info (defaults to you)",
    "msglist": "Show the latest 5 messages with their ids",
}

# Commands hidden from !help and gated by the privileged name prefix
PRIVILEGED_COMMANDS: frozenset[str] = frozenset(
    {"silence", "unsilence", "broadcast", "mute"}
)

# Argument placeholders shown in !help s
PRIVILEGED_USAGE: dict[str, str] = {
    "silence": "[name]",
    "unsilence": "[name]",
    "broadcast": "[text]",
    "mute": "[name] [minutes]",
}

# The one trigger without a ! prefix
PUZZLED_TRIGGER = "?"
PUZZLED_RESPONSE = "I'm just as puzzled."

HELP_FOOTER = "p.s. please don't abuse the bot"


# ---------------------------------------------------------------------------
# Text processing helpers
# ---------------------------------------------------------------------------
# hack.chat nicks are ASCII word characters only
_MENTION_REGEX = re.compile(r"@(\w+)", re.ASCII)


def first_mention(text: str) -> str | None:
    """Return the name in the first ``@name`` token of *text*, if any.

    Only the first match counts; later mentions on the same line are
    ignored.
    """
    match = _MENTION_REGEX.search(text)
    return match.group(1) if match else None
