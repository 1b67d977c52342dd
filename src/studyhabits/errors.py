"""Error kinds surfaced to user-facing actions."""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for all errors the tracker reports to the user."""


class InvalidInput(TrackerError, ValueError):
    """Empty name/secret/title, malformed interval, or an action in the wrong state."""


class InvalidCredential(TrackerError):
    """The secret does not match the stored credential for an existing name."""


class CapacityExceeded(TrackerError, ValueError):
    """A bounded collection (habits per user) is already full."""


class StoreUnavailable(TrackerError):
    """The document store failed to read or write."""


class NotFound(TrackerError, LookupError):
    """A document or habit lookup missed."""


__all__ = [
    "CapacityExceeded",
    "InvalidCredential",
    "InvalidInput",
    "NotFound",
    "StoreUnavailable",
    "TrackerError",
]
