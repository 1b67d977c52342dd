"""Calendar-day helpers shared by the due-date and streak rules."""

from __future__ import annotations

from datetime import date, datetime, timezone

from ..errors import InvalidInput


def today() -> date:
    """Return the current calendar day in UTC.

    Every rule that compares days goes through this function so that two
    clients in different timezones agree on what "today" is.
    """
    return datetime.now(timezone.utc).date()


def days_between(start: date, end: date) -> int:
    """Return the signed number of whole calendar days from ``start`` to ``end``."""
    return (end - start).days


def parse_day(value: str | date | None) -> date | None:
    """Parse an ISO ``YYYY-MM-DD`` string as stored in documents."""

    if isinstance(value, datetime):
        return value.date()
    if value is None or isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise InvalidInput(f"Malformed calendar date: {value!r}") from exc


def format_day(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


__all__ = ["days_between", "format_day", "parse_day", "today"]
