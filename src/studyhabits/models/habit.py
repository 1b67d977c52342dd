"""Habit data structures stored inside a user document."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional
from uuid import uuid4

from sqlmodel import Field, SQLModel

from ..constants import DEFAULT_HABIT_TITLE
from ..errors import InvalidInput
from ..services.dates import format_day, parse_day


class Frequency(str, Enum):
    """How often a habit becomes due again after completion."""

    DAILY = "daily"
    EVERY_TWO_DAYS = "every2days"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: "Frequency | str | None") -> "Frequency":
        """Accept enum members, stored values, and a few friendly spellings."""

        if isinstance(value, Frequency):
            return value
        raw = str(value or "").strip().lower().replace("-", "").replace("_", "").replace(" ", "")
        aliases = {
            "daily": cls.DAILY,
            "every2days": cls.EVERY_TWO_DAYS,
            "everytwodays": cls.EVERY_TWO_DAYS,
            "custom": cls.CUSTOM,
        }
        try:
            return aliases[raw]
        except KeyError:
            raise InvalidInput(f"Unknown habit frequency: {value!r}") from None


class Habit(SQLModel):
    """A recurring habit with a fixed-interval due policy."""

    id: str = Field(default_factory=lambda: uuid4().hex, min_length=1)
    title: str = Field(min_length=1)
    frequency: Frequency = Field(default=Frequency.DAILY)
    interval_days: int = Field(default=1, ge=1)
    last_completed: Optional[date] = Field(default=None)
    total_completions: int = Field(default=0, ge=0)

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "freq": self.frequency.value,
            "intervalDays": self.interval_days,
            "lastDoneDate": format_day(self.last_completed),
            "totalCompletions": self.total_completions,
        }

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "Habit":
        """Build a habit from stored fields, tolerating missing or zero values."""

        try:
            interval = int(data.get("intervalDays") or 1)
        except (TypeError, ValueError):
            interval = 1
        try:
            frequency = Frequency.parse(data.get("freq") or Frequency.DAILY.value)
        except InvalidInput:
            frequency = Frequency.CUSTOM if interval > 1 else Frequency.DAILY
        return cls(
            id=str(data.get("id") or uuid4().hex),
            title=str(data.get("title") or DEFAULT_HABIT_TITLE),
            frequency=frequency,
            interval_days=max(1, interval),
            last_completed=parse_day(data.get("lastDoneDate")),
            total_completions=max(0, int(data.get("totalCompletions") or 0)),
        )
