"""Top-N leaderboard reconciliation."""

from __future__ import annotations

from typing import Iterable

from ..constants import LEADERBOARD_SIZE
from ..models.leaderboard import LeaderboardEntry


def reconcile(
    players: Iterable[LeaderboardEntry],
    candidate: LeaderboardEntry,
    *,
    limit: int = LEADERBOARD_SIZE,
) -> list[LeaderboardEntry]:
    """Insert-or-update ``candidate`` by name, rank by points, keep the top ``limit``.

    The sort is stable: among equal scores, earlier entries keep their order
    and the candidate lands after them.
    """
    others = [p for p in players if p.name != candidate.name]
    ranked = sorted([*others, candidate], key=lambda p: p.points, reverse=True)
    return ranked[:limit]


def rank_of(players: Iterable[LeaderboardEntry], name: str) -> int | None:
    """Return the 1-based position of ``name`` on the board, if present."""

    for index, player in enumerate(players, start=1):
        if player.name == name:
            return index
    return None


__all__ = ["rank_of", "reconcile"]
