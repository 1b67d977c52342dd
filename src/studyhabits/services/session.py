"""Explicit per-client session: identity state plus the user-facing habit actions.

The session keeps a working copy of the signed-in profile, the leaderboard,
and the roster. Every copy is refreshed from store push notifications, so a
write made by another client (including a racing leaderboard overwrite)
simply replaces what this session holds.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Optional

from ..constants import MAX_HABITS
from ..domain.repositories.documents import DocumentStore, Unsubscribe
from ..errors import CapacityExceeded, InvalidInput, StoreUnavailable, TrackerError
from ..infra.repositories.leaderboard import LeaderboardRepository
from ..infra.repositories.roster import RosterRepository
from ..infra.repositories.users import UserRepository
from ..logging_config import get_logger
from ..models.habit import Frequency, Habit
from ..models.leaderboard import LeaderboardEntry
from ..models.roster import Roster
from ..models.user import UserProfile
from .auth import IdentityResult, resolve_identity
from .dates import today
from .habits import build_habit, count_due
from .leaderboard import reconcile
from .scoring import CompletionResult, apply_completion

logger = get_logger(__name__)


class SessionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    RESOLVING = "resolving"
    ACTIVE = "active"


class SessionChange(str, Enum):
    """Which part of the session a listener should re-render."""

    STATE = "state"
    PROFILE = "profile"
    LEADERBOARD = "leaderboard"
    ROSTER = "roster"


SessionListener = Callable[[SessionChange], None]


@dataclass(frozen=True)
class CompletionOutcome:
    """A completion as seen by the caller.

    ``leaderboard_updated`` is False when the profile was saved but the shared
    board could not be written; the board catches up on the next completion.
    """

    result: CompletionResult
    leaderboard_updated: bool
    leaderboard: list[LeaderboardEntry]


class TrackerSession:
    """One client's view of the shared store."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        clock: Callable[[], date] = today,
        max_habits: int = MAX_HABITS,
    ):
        self.store = store
        self.users = UserRepository(store)
        self.leaderboard_repo = LeaderboardRepository(store)
        self.roster_repo = RosterRepository(store)
        self.clock = clock
        self.max_habits = max_habits

        self.state = SessionState.UNAUTHENTICATED
        self.profile: Optional[UserProfile] = None
        self.leaderboard: list[LeaderboardEntry] = []
        self.roster = Roster()

        self._listeners: list[SessionListener] = []
        self._user_unsubscribe: Optional[Unsubscribe] = None
        self._shared_unsubscribes: list[Unsubscribe] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def open(self) -> None:
        """Start following the leaderboard and roster (visible before sign-in)."""
        if self._shared_unsubscribes:
            return
        self._shared_unsubscribes = [
            self.leaderboard_repo.subscribe(self._on_leaderboard),
            self.roster_repo.subscribe(self._on_roster),
        ]

    def close(self) -> None:
        self.switch_user()
        for unsubscribe in self._shared_unsubscribes:
            unsubscribe()
        self._shared_unsubscribes = []

    def add_listener(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE and self.profile is not None

    @property
    def name(self) -> Optional[str]:
        return self.profile.name if self.profile else None

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    def enter(self, name: str, secret: str) -> IdentityResult:
        """Sign in as ``name``, creating the user on first use."""
        if self.state is not SessionState.UNAUTHENTICATED:
            self.switch_user()

        self._set_state(SessionState.RESOLVING)
        try:
            result = resolve_identity(
                name=name, secret=secret, users=self.users, roster=self.roster_repo
            )
        except TrackerError:
            self._set_state(SessionState.UNAUTHENTICATED)
            raise

        self.profile = result.profile
        try:
            self._user_unsubscribe = self.users.subscribe(result.profile.name, self._on_profile)
        except TrackerError:
            self.profile = None
            self._set_state(SessionState.UNAUTHENTICATED)
            raise

        self._set_state(SessionState.ACTIVE)
        return result

    def switch_user(self) -> None:
        if self._user_unsubscribe is not None:
            self._user_unsubscribe()
            self._user_unsubscribe = None
        was_signed_in = self.state is not SessionState.UNAUTHENTICATED
        self.profile = None
        self.state = SessionState.UNAUTHENTICATED
        if was_signed_in:
            self._emit(SessionChange.STATE)

    # ------------------------------------------------------------------
    # Habit actions
    # ------------------------------------------------------------------
    def add_habit(
        self,
        title: str | None,
        frequency: Frequency | str = Frequency.DAILY,
        interval_days: int | str | None = None,
    ) -> Habit:
        profile = self._require_profile()
        if len(profile.habits) >= self.max_habits:
            raise CapacityExceeded(f"Max {self.max_habits} habits")

        habit = build_habit(title, frequency, interval_days)
        self.users.save_habits(profile.model_copy(update={"habits": [*profile.habits, habit]}))
        logger.info(
            "Habit added",
            extra={"user": profile.name, "habit_id": habit.id, "frequency": habit.frequency.value},
        )
        return habit

    def delete_habit(self, habit_id: str) -> bool:
        """Remove a habit by id; returns False when the id is unknown."""
        profile = self._require_profile()
        remaining = [h for h in profile.habits if h.id != habit_id]
        if len(remaining) == len(profile.habits):
            return False
        self.users.save_habits(profile.model_copy(update={"habits": remaining}))
        logger.info("Habit deleted", extra={"user": profile.name, "habit_id": habit_id})
        return True

    def complete_habit(self, habit_id: str) -> CompletionOutcome:
        """Score a completion, save the profile, then refresh the shared board.

        Due-ness is not re-checked here; callers that want to block early
        completions gate on :func:`studyhabits.services.habits.is_due`.
        """
        profile = self._require_profile()
        result = apply_completion(profile, habit_id, self.clock())
        self.users.save_progress(result.profile)
        logger.info(
            "Habit completed",
            extra={
                "user": profile.name,
                "habit_id": habit_id,
                "points": result.profile.points,
                "streak": result.profile.overall_streak,
                "level": result.profile.level,
            },
        )

        # Not atomic: a concurrent completion by another user can overwrite this.
        try:
            players = reconcile(self.leaderboard_repo.get(), result.leaderboard_entry())
            self.leaderboard_repo.replace(players)
        except StoreUnavailable:
            logger.warning(
                "Leaderboard update failed; profile update kept",
                extra={"user": profile.name},
                exc_info=True,
            )
            return CompletionOutcome(
                result=result, leaderboard_updated=False, leaderboard=list(self.leaderboard)
            )
        return CompletionOutcome(result=result, leaderboard_updated=True, leaderboard=players)

    def due_count(self) -> int:
        if self.profile is None:
            return 0
        return count_due(self.profile.habits, self.clock())

    def can_add_habit(self) -> bool:
        return self.profile is not None and len(self.profile.habits) < self.max_habits

    # ------------------------------------------------------------------
    # Push handlers
    # ------------------------------------------------------------------
    def _on_profile(self, profile: Optional[UserProfile]) -> None:
        if profile is None:
            logger.warning("Signed-in user document disappeared", extra={"user": self.name})
            return
        self.profile = profile
        self._emit(SessionChange.PROFILE)

    def _on_leaderboard(self, players: list[LeaderboardEntry]) -> None:
        self.leaderboard = players
        self._emit(SessionChange.LEADERBOARD)

    def _on_roster(self, roster: Roster) -> None:
        self.roster = roster
        self._emit(SessionChange.ROSTER)

    def _require_profile(self) -> UserProfile:
        profile = self.profile
        if self.state is not SessionState.ACTIVE or profile is None:
            raise InvalidInput("Sign in first")
        return profile

    def _set_state(self, state: SessionState) -> None:
        self.state = state
        self._emit(SessionChange.STATE)

    def _emit(self, change: SessionChange) -> None:
        for listener in list(self._listeners):
            listener(change)


__all__ = [
    "CompletionOutcome",
    "SessionChange",
    "SessionListener",
    "SessionState",
    "TrackerSession",
]
