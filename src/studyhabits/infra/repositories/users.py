"""User profile documents in the ``users`` collection."""

from __future__ import annotations

from typing import Callable, Optional

from ...constants import USERS_COLLECTION
from ...domain.repositories.documents import DocumentSnapshot, DocumentStore, Unsubscribe, WriteMode
from ...models.user import UserProfile


class UserRepository:
    """Reads and writes user profiles keyed by display name."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def get(self, name: str) -> Optional[UserProfile]:
        snapshot = self.store.get_document(USERS_COLLECTION, name)
        if snapshot is None:
            return None
        return UserProfile.from_document(name, snapshot.data)

    def create(self, profile: UserProfile) -> UserProfile:
        """Write a complete profile, replacing anything stored under the name."""
        self.store.set_document(
            USERS_COLLECTION, profile.name, profile.to_document(), WriteMode.REPLACE
        )
        return profile

    def save_habits(self, profile: UserProfile) -> None:
        """Merge only the habit list; stats written by other writers survive."""
        self.store.set_document(
            USERS_COLLECTION, profile.name, {"habits": profile.habit_fields()}, WriteMode.MERGE
        )

    def save_progress(self, profile: UserProfile) -> None:
        """Merge stats and habits after a completion."""
        fields = {**profile.stats_fields(), "habits": profile.habit_fields()}
        self.store.set_document(USERS_COLLECTION, profile.name, fields, WriteMode.MERGE)

    def subscribe(
        self, name: str, on_change: Callable[[Optional[UserProfile]], None]
    ) -> Unsubscribe:
        def _listener(snapshot: Optional[DocumentSnapshot]) -> None:
            on_change(UserProfile.from_document(name, snapshot.data) if snapshot else None)

        return self.store.subscribe(USERS_COLLECTION, name, _listener)
