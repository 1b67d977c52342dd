"""Reusable desktop widgets."""

from .leaderboard import build_leaderboard, leaderboard_rows

__all__ = ["build_leaderboard", "leaderboard_rows"]
