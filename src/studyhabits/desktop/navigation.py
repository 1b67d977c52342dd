"""Navigation and routing for the Flet desktop app."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict

import flet as ft

from ..devtools import dev_log
from ..logging_config import get_logger
from .controllers import HABITS_ROUTE, LOGIN_ROUTE

if TYPE_CHECKING:
    from .context import AppContext

logger = get_logger(__name__)

ViewBuilder = Callable[["AppContext", ft.Page], ft.View]


class Router:
    """Maps routes to view builders and keeps signed-out users on the login view."""

    def __init__(self, page: ft.Page, context: AppContext):
        self.page = page
        self.context = context
        self.routes: Dict[str, ViewBuilder] = {}

    def register(self, route: str, builder: ViewBuilder) -> None:
        logger.debug(f"Registering route: {route}")
        self.routes[route] = builder

    def resolve(self, route: str | None) -> str:
        """Return the route that should actually be shown for ``route``."""
        route = route or LOGIN_ROUTE
        signed_in = self.context.session.is_active
        if not signed_in:
            return LOGIN_ROUTE
        if route == LOGIN_ROUTE or route not in self.routes:
            return HABITS_ROUTE
        return route

    def route_change(self, e: ft.RouteChangeEvent) -> None:
        self.show(e.route)

    def show(self, requested: str | None) -> None:
        route = self.resolve(requested)
        if route != requested:
            logger.info(f"Route {requested} redirected to {route}")
            self.page.go(route)
            return

        builder = self.routes.get(route)
        if builder is None:
            logger.error(f"No builder found for route: {route}")
            return

        try:
            view = builder(self.context, self.page)
        except Exception as exc:
            logger.error(f"Failed to build view for route {route}: {exc}", exc_info=True)
            dev_log(self.context.config, "Route load failed", exc=exc, context={"route": route})
            raise

        if self.page.views:
            self.page.views[-1] = view
        else:
            self.page.views.append(view)
        self.page.update()

    def view_pop(self, e: ft.ViewPopEvent) -> None:
        if len(self.page.views) > 1:
            self.page.views.pop()
        self.show(self.page.views[-1].route if self.page.views else LOGIN_ROUTE)
