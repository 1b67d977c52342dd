"""Shared top-N leaderboard document."""

from __future__ import annotations

from typing import Any, Mapping

from sqlmodel import Field, SQLModel


class LeaderboardEntry(SQLModel):
    """Snapshot of one user's standing, copied at completion time."""

    name: str = Field(min_length=1)
    points: int = Field(default=0, ge=0)
    streak: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)

    def to_document(self) -> dict[str, Any]:
        return {"name": self.name, "points": self.points, "streak": self.streak, "level": self.level}

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "LeaderboardEntry":
        return cls(
            name=str(data.get("name") or ""),
            points=max(0, int(data.get("points") or 0)),
            streak=max(0, int(data.get("streak") or 0)),
            level=max(1, int(data.get("level") or 1)),
        )
