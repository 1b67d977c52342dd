"""Pytest configuration and shared fixtures for Study Habit Tracker tests.

Every test that touches storage gets its own data directory and SQLite file,
so nothing leaks into the real shared database.
"""

from __future__ import annotations

import logging
from datetime import date

import pytest

from studyhabits.config import TestConfig
from studyhabits.infra.database import bootstrap_database, create_session_factory
from studyhabits.infra.repositories import (
    LeaderboardRepository,
    RosterRepository,
    SQLModelDocumentStore,
    UserRepository,
)
from studyhabits.logging_config import ROOT_LOGGER_NAME
from studyhabits.models.habit import Frequency, Habit
from studyhabits.services.session import TrackerSession

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def test_config(tmp_path) -> TestConfig:
    """Configuration pointed at a throwaway data directory."""

    return TestConfig(tmp_path / "data")


@pytest.fixture(scope="function")
def db_engine(test_config):
    """Create an isolated SQLite database with all tables for each test.

    Yields:
        Engine: SQLModel engine connected to the test database
    """
    engine, _ = bootstrap_database(test_config)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what the repositories expect."""

    return create_session_factory(db_engine)


@pytest.fixture
def store(session_factory) -> SQLModelDocumentStore:
    return SQLModelDocumentStore(session_factory)


@pytest.fixture
def other_store(session_factory) -> SQLModelDocumentStore:
    """A second client on the same database; its writes only reach ``store`` via poll()."""

    return SQLModelDocumentStore(session_factory)


@pytest.fixture
def users(store) -> UserRepository:
    return UserRepository(store)


@pytest.fixture
def roster(store) -> RosterRepository:
    return RosterRepository(store)


@pytest.fixture
def leaderboard_repo(store) -> LeaderboardRepository:
    return LeaderboardRepository(store)


# =============================================================================
# Clock and Session Fixtures
# =============================================================================


@pytest.fixture
def fixed_today() -> date:
    return date(2024, 3, 10)


@pytest.fixture
def clock(fixed_today):
    """Mutable clock; tests advance it with ``clock.set(...)``."""

    class _Clock:
        def __init__(self, current: date):
            self.current = current

        def __call__(self) -> date:
            return self.current

        def set(self, value: date) -> None:
            self.current = value

    return _Clock(fixed_today)


@pytest.fixture
def session(store, clock):
    tracker = TrackerSession(store, clock=clock)
    tracker.open()
    yield tracker
    tracker.close()


@pytest.fixture
def habit_factory():
    """Factory for in-memory habits with sensible defaults."""

    def _create_habit(
        title: str = "Read 20 mins",
        frequency: Frequency = Frequency.DAILY,
        interval_days: int = 1,
        last_completed: date | None = None,
        total_completions: int = 0,
    ) -> Habit:
        return Habit(
            title=title,
            frequency=frequency,
            interval_days=interval_days,
            last_completed=last_completed,
            total_completions=total_completions,
        )

    return _create_habit


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logging so streams do not leak across tests."""

    yield
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
