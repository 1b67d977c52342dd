"""Concrete repository implementations over the document store."""

from .documents import SQLModelDocumentStore
from .leaderboard import LeaderboardRepository
from .roster import RosterRepository
from .users import UserRepository

__all__ = [
    "LeaderboardRepository",
    "RosterRepository",
    "SQLModelDocumentStore",
    "UserRepository",
]
