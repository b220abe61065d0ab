"""
sunbot — A Stateful Command Bot for hack.chat Channels
========================================================
Joins one hack.chat channel, keeps an in-memory picture of who said what,
who is AFK, who is muted and who checked in today, and answers a small
vocabulary of ``!`` commands.

Package layout::

    sunbot/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Command triggers, help text, limits
    ├── engine/
    │   ├── errors.py      # CommandError taxonomy
    │   ├── events.py      # ChatEvent / Reply / Message dataclasses
    │   ├── history.py     # Message ring buffer + id index
    │   ├── activity.py    # Per-user message counters
    │   ├── moderation.py  # Permanent / timed silences
    │   ├── presence.py    # AFK table
    │   ├── checkin.py     # Daily check-in streaks
    │   ├── session.py     # BotSession — owns every table
    │   ├── sweeper.py     # Expired-mute sweep pass
    │   └── commands.py    # CommandEngine — parse + dispatch
    ├── services/
    │   └── export_service.py  # Chat history → dated JSON file
    ├── transport/
    │   ├── protocol.py    # hack.chat JSON frames (pydantic)
    │   └── client.py      # aiohttp WebSocket client + reconnect
    └── bot/
        ├── core.py        # ChatBot — wires transport ↔ engine
        ├── tasks.py       # Periodic expiry sweep loop
        └── __main__.py    # ``python -m sunbot.bot``
"""

__version__ = "0.1.0"
