"""Desktop view builders."""

from .auth import build_auth_view
from .habits import build_habits_view

__all__ = ["build_auth_view", "build_habits_view"]
