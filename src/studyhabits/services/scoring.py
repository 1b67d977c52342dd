"""Points, XP, level, and overall-streak rules for a habit completion."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..constants import COMPLETION_POINTS
from ..errors import NotFound
from ..models.habit import Habit
from ..models.leaderboard import LeaderboardEntry
from ..models.user import UserProfile, level_from_xp
from .dates import days_between


@dataclass(frozen=True)
class CompletionResult:
    """Outcome of applying one completion to a profile."""

    profile: UserProfile
    habit: Habit
    points_awarded: int
    leveled_up: bool

    def leaderboard_entry(self) -> LeaderboardEntry:
        return LeaderboardEntry(
            name=self.profile.name,
            points=self.profile.points,
            streak=self.profile.overall_streak,
            level=self.profile.level,
        )


def next_streak(streak: int, last_active: date | None, today: date) -> int:
    """Return the overall streak after a completion on ``today``.

    Completing several habits on one day counts once. Anything other than a
    one-day gap (including clock skew into the past) restarts the streak.
    """
    if last_active == today:
        return streak
    if last_active is None:
        return 1
    if days_between(last_active, today) == 1:
        return streak + 1
    return 1


def complete_habit(habit: Habit, today: date) -> Habit:
    """Stamp a completion on the habit, whether or not it was due."""
    return habit.model_copy(
        update={"last_completed": today, "total_completions": habit.total_completions + 1}
    )


def apply_completion(profile: UserProfile, habit_id: str, today: date) -> CompletionResult:
    """Return the profile as it looks after completing ``habit_id`` on ``today``.

    The caller must invoke this once per completion action; there is no
    idempotency key and a repeat call awards points again.
    """
    target = profile.find_habit(habit_id)
    if target is None:
        raise NotFound(f"Habit {habit_id} does not belong to {profile.name}")

    completed = complete_habit(target, today)
    habits = [completed if h.id == habit_id else h for h in profile.habits]
    new_xp = profile.xp + COMPLETION_POINTS
    updated = profile.model_copy(
        update={
            "points": profile.points + COMPLETION_POINTS,
            "xp": new_xp,
            "overall_streak": next_streak(profile.overall_streak, profile.last_active, today),
            "last_active": today,
            "habits": habits,
        }
    )
    return CompletionResult(
        profile=updated,
        habit=completed,
        points_awarded=COMPLETION_POINTS,
        leveled_up=level_from_xp(new_xp) > profile.level,
    )


__all__ = [
    "CompletionResult",
    "apply_completion",
    "complete_habit",
    "level_from_xp",
    "next_streak",
]
