"""Business rules for habits, scoring, the leaderboard, and user sessions."""
