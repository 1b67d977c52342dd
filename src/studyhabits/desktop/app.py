"""Main Flet desktop application entry point."""

from __future__ import annotations

from typing import Optional

import flet as ft

from ..config import BaseConfig
from ..devtools import dev_log
from ..logging_config import setup_logging
from ..services.session import SessionChange
from . import controllers
from .context import AppContext, create_app_context
from .navigation import Router
from .views import build_auth_view, build_habits_view


def wire_session(ctx: AppContext, page: ft.Page) -> None:
    """Forward session pushes to the live view; sign-out always lands on login."""

    def on_session_change(change: SessionChange) -> None:
        if change is SessionChange.STATE:
            if not ctx.session.is_active and page.route != controllers.LOGIN_ROUTE:
                page.go(controllers.LOGIN_ROUTE)
            return
        ctx.refresh_view(change)

    ctx.session.add_listener(on_session_change)


def main(page: ft.Page, config: Optional[BaseConfig] = None) -> None:
    """Main entry point for the Flet desktop app."""

    ctx = create_app_context(config)
    logger = setup_logging(ctx.config)
    logger.info("Study Habit Tracker starting", extra={"database": ctx.config.DATABASE_URL})

    ctx.page = page
    page.title = "Study Habit Tracker (DEV)" if ctx.dev_mode else "Study Habit Tracker"
    page.theme_mode = ctx.theme_mode
    page.padding = 0
    page.window.width = 960
    page.window.height = 800

    if ctx.dev_mode:
        dev_log(ctx.config, "Dev mode enabled", context={"data_dir": ctx.config.DATA_DIR})

    wire_session(ctx, page)
    ctx.session.open()
    ctx.poller.start()

    def on_disconnect(_e) -> None:
        logger.info("Application closing, stopping poller")
        ctx.poller.stop()
        ctx.session.close()

    page.on_disconnect = on_disconnect

    router = Router(page, ctx)
    router.register(controllers.LOGIN_ROUTE, build_auth_view)
    router.register(controllers.HABITS_ROUTE, build_habits_view)
    page.on_route_change = router.route_change
    page.on_view_pop = router.view_pop

    page.go(controllers.LOGIN_ROUTE)


def run() -> None:
    ft.app(target=main)


if __name__ == "__main__":
    run()
