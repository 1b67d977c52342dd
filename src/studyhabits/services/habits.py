"""Habit helpers: due-date rules and validation of new habits."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from ..constants import DEFAULT_HABIT_TITLE
from ..errors import InvalidInput
from ..models.habit import Frequency, Habit
from .dates import days_between, today as current_day


def effective_interval(habit: Habit) -> int:
    """Return how many days must pass after a completion before the habit is due."""

    if habit.frequency is Frequency.DAILY:
        return 1
    if habit.frequency is Frequency.EVERY_TWO_DAYS:
        return 2
    return max(1, habit.interval_days)


def is_due(habit: Habit, reference: date | None = None) -> bool:
    """Return True when the habit can be completed on ``reference`` (default today).

    A habit that was never completed is always due.
    """
    if habit.last_completed is None:
        return True
    reference = reference or current_day()
    return days_between(habit.last_completed, reference) >= effective_interval(habit)


def days_until_due(habit: Habit, reference: date | None = None) -> int:
    """Return the days left before the habit is due again; 0 once it is due."""

    if habit.last_completed is None:
        return 0
    reference = reference or current_day()
    gap = days_between(habit.last_completed, reference)
    return max(0, effective_interval(habit) - gap)


def count_due(habits: Iterable[Habit], reference: date | None = None) -> int:
    reference = reference or current_day()
    return sum(1 for habit in habits if is_due(habit, reference))


def describe_frequency(habit: Habit) -> str:
    if habit.frequency is Frequency.DAILY:
        return "Daily"
    if habit.frequency is Frequency.EVERY_TWO_DAYS:
        return "Every 2 days"
    return f"Every {effective_interval(habit)} days"


def _parse_interval(raw: int | str | None) -> int:
    """Parse a custom interval; blanks mean 1 and values below 1 clamp to 1."""

    if raw is None:
        return 1
    if isinstance(raw, bool):
        raise InvalidInput(f"Interval must be a whole number of days, got {raw!r}")
    if isinstance(raw, int):
        return max(1, raw)
    text = str(raw).strip()
    if not text:
        return 1
    try:
        return max(1, int(text))
    except ValueError:
        raise InvalidInput(f"Interval must be a whole number of days, got {raw!r}") from None


def build_habit(
    title: str | None,
    frequency: Frequency | str = Frequency.DAILY,
    interval_days: int | str | None = None,
) -> Habit:
    """Validate add-habit form input and return a fresh, never-completed habit."""

    clean_title = (title or "").strip() or DEFAULT_HABIT_TITLE
    freq = Frequency.parse(frequency)
    if freq is Frequency.CUSTOM:
        interval = _parse_interval(interval_days)
    elif freq is Frequency.EVERY_TWO_DAYS:
        interval = 2
    else:
        interval = 1
    return Habit(title=clean_title, frequency=freq, interval_days=interval)


__all__ = [
    "build_habit",
    "count_due",
    "days_until_due",
    "describe_frequency",
    "effective_interval",
    "is_due",
]
