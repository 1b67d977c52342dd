"""Document store protocol."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Protocol


class WriteMode(str, Enum):
    """Whether a write replaces the whole document or merges top-level fields."""

    REPLACE = "replace"
    MERGE = "merge"


@dataclass(frozen=True)
class DocumentSnapshot:
    """Immutable view of a stored document at one version."""

    collection: str
    key: str
    data: Mapping[str, Any] = field(default_factory=dict)
    version: int = 1


# Receives the new snapshot, or None when the document no longer exists.
ChangeListener = Callable[[Optional[DocumentSnapshot]], None]
Unsubscribe = Callable[[], None]


class DocumentStore(Protocol):
    """Key-value document store with change subscriptions."""

    def get_document(self, collection: str, key: str) -> Optional[DocumentSnapshot]:
        """Return the document or None when it does not exist."""
        ...

    def set_document(
        self,
        collection: str,
        key: str,
        fields: Mapping[str, Any],
        mode: WriteMode = WriteMode.REPLACE,
    ) -> DocumentSnapshot:
        """Write a document and return the stored snapshot."""
        ...

    def subscribe(self, collection: str, key: str, on_change: ChangeListener) -> Unsubscribe:
        """Register a listener; the current snapshot is delivered immediately if present."""
        ...

    def poll(self) -> int:
        """Deliver changes written by other clients; return how many were pushed."""
        ...
