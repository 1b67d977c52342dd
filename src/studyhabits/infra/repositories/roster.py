"""The class roster used to populate name pickers."""

from __future__ import annotations

from typing import Callable, Optional

from ...constants import META_COLLECTION, ROSTER_KEY, ROSTER_LIMIT
from ...domain.repositories.documents import DocumentSnapshot, DocumentStore, Unsubscribe, WriteMode
from ...models.roster import Roster


class RosterRepository:
    """Append-once list of names stored in ``meta/roster``."""

    def __init__(self, store: DocumentStore, *, limit: int = ROSTER_LIMIT):
        self.store = store
        self.limit = limit

    def get(self) -> Roster:
        snapshot = self.store.get_document(META_COLLECTION, ROSTER_KEY)
        return Roster.from_document(snapshot.data) if snapshot else Roster()

    def add(self, name: str) -> bool:
        """Append ``name``; returns False when it is already listed or the roster is full."""
        updated = self.get().with_name(name, limit=self.limit)
        if updated is None:
            return False
        self.store.set_document(
            META_COLLECTION, ROSTER_KEY, {"names": updated.names}, WriteMode.REPLACE
        )
        return True

    def subscribe(self, on_change: Callable[[Roster], None]) -> Unsubscribe:
        def _listener(snapshot: Optional[DocumentSnapshot]) -> None:
            on_change(Roster.from_document(snapshot.data) if snapshot else Roster())

        return self.store.subscribe(META_COLLECTION, ROSTER_KEY, _listener)
