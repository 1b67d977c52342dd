"""User profile document and its mapping to stored fields."""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional

from sqlmodel import Field, SQLModel

from ..constants import XP_PER_LEVEL
from ..services.dates import format_day, parse_day
from .habit import Habit


def level_from_xp(xp: int) -> int:
    """Every 100 xp is one level; a fresh user is level 1."""
    return max(0, xp) // XP_PER_LEVEL + 1


class UserProfile(SQLModel):
    """Aggregate state of one classroom user, keyed by display name."""

    name: str = Field(min_length=1)
    credential_hash: str = Field(default="")
    points: int = Field(default=0, ge=0)
    xp: int = Field(default=0, ge=0)
    overall_streak: int = Field(default=0, ge=0)
    last_active: Optional[date] = Field(default=None)
    habits: list[Habit] = Field(default_factory=list)

    @property
    def level(self) -> int:
        """Level is always derived from xp, never trusted from storage."""
        return level_from_xp(self.xp)

    def find_habit(self, habit_id: str) -> Optional[Habit]:
        for habit in self.habits:
            if habit.id == habit_id:
                return habit
        return None

    def to_document(self) -> dict[str, Any]:
        """Return the full stored representation (name is the document key)."""

        return {
            "credentialHash": self.credential_hash,
            **self.stats_fields(),
            "habits": self.habit_fields(),
        }

    def stats_fields(self) -> dict[str, Any]:
        return {
            "points": self.points,
            "xp": self.xp,
            "level": self.level,
            "overallStreak": self.overall_streak,
            "lastActiveDate": format_day(self.last_active),
        }

    def habit_fields(self) -> list[dict[str, Any]]:
        return [habit.to_document() for habit in self.habits]

    @classmethod
    def from_document(cls, name: str, data: Mapping[str, Any]) -> "UserProfile":
        return cls(
            name=name,
            credential_hash=str(data.get("credentialHash") or ""),
            points=max(0, int(data.get("points") or 0)),
            xp=max(0, int(data.get("xp") or 0)),
            overall_streak=max(0, int(data.get("overallStreak") or 0)),
            last_active=parse_day(data.get("lastActiveDate")),
            habits=[Habit.from_document(item) for item in data.get("habits") or []],
        )
