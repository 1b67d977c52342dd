"""The shared top-N leaderboard document."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Optional

from ...constants import LEADERBOARD_COLLECTION, LEADERBOARD_KEY
from ...domain.repositories.documents import DocumentSnapshot, DocumentStore, Unsubscribe, WriteMode
from ...models.leaderboard import LeaderboardEntry


def _players(data: Mapping[str, Any]) -> list[LeaderboardEntry]:
    return [LeaderboardEntry.from_document(item) for item in data.get("players") or [] if item.get("name")]


class LeaderboardRepository:
    """Reads the board and overwrites it wholesale (last writer wins)."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def get(self) -> list[LeaderboardEntry]:
        snapshot = self.store.get_document(LEADERBOARD_COLLECTION, LEADERBOARD_KEY)
        return _players(snapshot.data) if snapshot else []

    def replace(self, players: Iterable[LeaderboardEntry]) -> None:
        self.store.set_document(
            LEADERBOARD_COLLECTION,
            LEADERBOARD_KEY,
            {"players": [p.to_document() for p in players]},
            WriteMode.REPLACE,
        )

    def subscribe(self, on_change: Callable[[list[LeaderboardEntry]], None]) -> Unsubscribe:
        def _listener(snapshot: Optional[DocumentSnapshot]) -> None:
            on_change(_players(snapshot.data) if snapshot else [])

        return self.store.subscribe(LEADERBOARD_COLLECTION, LEADERBOARD_KEY, _listener)
