"""Repository protocol definitions for domain layer."""

from .documents import ChangeListener, DocumentSnapshot, DocumentStore, Unsubscribe, WriteMode

__all__ = [
    "ChangeListener",
    "DocumentSnapshot",
    "DocumentStore",
    "Unsubscribe",
    "WriteMode",
]
