"""Document models and the SQLModel table that stores them."""

from .document import DocumentRecord
from .habit import Frequency, Habit
from .leaderboard import LeaderboardEntry
from .roster import Roster
from .user import UserProfile

__all__ = [
    "DocumentRecord",
    "Frequency",
    "Habit",
    "LeaderboardEntry",
    "Roster",
    "UserProfile",
]
