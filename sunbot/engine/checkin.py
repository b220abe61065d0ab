"""
sunbot.engine.checkin — Daily check-in streaks
================================================

One check-in per user per calendar day (UTC).  Checking in on the day
right after the previous check-in extends the streak; any gap resets it
to 1.  A second check-in on the same day changes nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta


@dataclass(frozen=True, slots=True)
class CheckinRecord:
    last_date: date
    streak: int


@dataclass(frozen=True, slots=True)
class CheckinResult:
    """``already_done`` is True for a same-day repeat; ``streak`` is current either way."""

    already_done: bool
    streak: int


class CheckinLedger:
    """user → :class:`CheckinRecord`."""

    def __init__(self) -> None:
        self._records: dict[str, CheckinRecord] = {}

    def checkin(self, user: str, today: date) -> CheckinResult:
        record = self._records.get(user)
        if record is not None and record.last_date == today:
            return CheckinResult(already_done=True, streak=record.streak)

        streak = 1
        if record is not None and record.last_date == today - timedelta(days=1):
            streak = record.streak + 1

        self._records[user] = CheckinRecord(last_date=today, streak=streak)
        return CheckinResult(already_done=False, streak=streak)

    def get(self, user: str) -> CheckinRecord | None:
        return self._records.get(user)
