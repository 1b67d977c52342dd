"""Fixed game rules and document locations shared across the client."""

from __future__ import annotations

# Scoring
COMPLETION_POINTS = 10
XP_PER_LEVEL = 100

# Capacities
MAX_HABITS = 15
LEADERBOARD_SIZE = 5
ROSTER_LIMIT = 50

DEFAULT_HABIT_TITLE = "Untitled"

# Document store layout
USERS_COLLECTION = "users"
LEADERBOARD_COLLECTION = "leaderboard"
LEADERBOARD_KEY = "global"
META_COLLECTION = "meta"
ROSTER_KEY = "roster"
