"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import flet as ft
from sqlalchemy.engine import Engine

from ..config import BaseConfig
from ..infra.database import SessionFactory, bootstrap_database
from ..infra.repositories import SQLModelDocumentStore
from ..scheduler import ChangePoller, create_poller
from ..services.session import SessionChange, TrackerSession

ViewRefresher = Callable[[SessionChange], None]


@dataclass
class AppContext:
    """Everything a view or controller needs, passed explicitly."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory
    store: SQLModelDocumentStore
    session: TrackerSession
    poller: ChangePoller

    theme_mode: ft.ThemeMode = ft.ThemeMode.LIGHT
    page: Optional[ft.Page] = None
    dev_mode: bool = False

    # Set by the view currently on screen so pushes only touch live controls
    view_refresher: Optional[ViewRefresher] = None

    def bind_view(self, refresher: Optional[ViewRefresher]) -> None:
        self.view_refresher = refresher

    def refresh_view(self, change: SessionChange) -> None:
        if self.view_refresher is not None:
            self.view_refresher(change)


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create the context: database, document store, session, and poller."""

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)
    store = SQLModelDocumentStore(session_factory)
    session = TrackerSession(store)
    poller = create_poller(store, interval_seconds=config.POLL_SECONDS)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        store=store,
        session=session,
        poller=poller,
        dev_mode=config.DEV_MODE,
    )
