"""
sunbot.services.export_service — Chat History Export
=====================================================

Writes the retained message window to ``chat_history_YYYY-MM-DD.json``
for ``!save``.  Exporting the same day twice overwrites that day's file.

The write is blocking file I/O.  The command engine runs it through
``asyncio.to_thread()`` so the event loop (and the sweep loop riding on
it) never stalls on disk.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from datetime import date
from pathlib import Path

from sunbot.engine.errors import PersistenceFailure
from sunbot.engine.events import Message

logger = logging.getLogger(__name__)

FILENAME_TEMPLATE = "chat_history_{day}.json"


class HistoryExporter:
    """Serializes messages into a dated JSON file under ``directory``."""

    def __init__(self, directory: str | Path = ".") -> None:
        self.directory = Path(directory)

    def path_for(self, day: date) -> Path:
        return self.directory / FILENAME_TEMPLATE.format(day=day.isoformat())

    def save(self, messages: Sequence[Message], day: date) -> Path:
        """Write *messages* and return the file path.

        Raises
        ------
        PersistenceFailure
            If the directory can't be created or the file can't be written.
            The in-memory history is untouched either way.
        """
        path = self.path_for(day)
        payload = json.dumps(
            [m.to_dict() for m in messages], indent=2, ensure_ascii=False,
        )
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            logger.exception("Failed to write chat history to %s", path)
            raise PersistenceFailure("Failed to save the chat history") from exc

        logger.info("Chat history saved to %s (%d messages)", path, len(messages))
        return path
