"""Controller helpers that run session actions and report the outcome."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, TypeVar

import flet as ft

from ..devtools import dev_log
from ..errors import TrackerError
from ..logging_config import get_logger

if TYPE_CHECKING:
    from .context import AppContext

logger = get_logger(__name__)

T = TypeVar("T")

LOGIN_ROUTE = "/login"
HABITS_ROUTE = "/habits"


def show_snack(page: ft.Page, message: str) -> None:
    """Display a snack bar message."""

    page.open(ft.SnackBar(content=ft.Text(message)))
    page.update()


def navigate(page: ft.Page, route: str) -> None:
    clean = route if route.startswith("/") else f"/{route}"
    page.go(clean)
    page.update()


def _run(ctx: AppContext, page: ft.Page, action: str, call: Callable[[], T]) -> T | None:
    """Run a session call, turning tracker errors into a snack bar message."""

    try:
        return call()
    except TrackerError as exc:
        logger.warning(f"{action} failed: {exc}", extra={"action": action, "error": type(exc).__name__})
        dev_log(ctx.config, f"{action} failed", context={"error": exc})
        show_snack(page, str(exc))
        return None


def enter(ctx: AppContext, page: ft.Page, name: str, pin: str) -> bool:
    result = _run(ctx, page, "enter", lambda: ctx.session.enter(name, pin))
    if result is None:
        return False
    greeting = "Welcome" if result.created else "Welcome back"
    show_snack(page, f"{greeting}, {result.profile.name}!")
    navigate(page, HABITS_ROUTE)
    return True


def add_habit(
    ctx: AppContext,
    page: ft.Page,
    title: str | None,
    frequency: str | None,
    interval_days: str | int | None,
) -> bool:
    habit = _run(
        ctx,
        page,
        "add_habit",
        lambda: ctx.session.add_habit(title, frequency or "daily", interval_days),
    )
    if habit is None:
        return False
    show_snack(page, f"Added {habit.title}")
    return True


def delete_habit(ctx: AppContext, page: ft.Page, habit_id: str) -> bool:
    removed = _run(ctx, page, "delete_habit", lambda: ctx.session.delete_habit(habit_id))
    return bool(removed)


def complete_habit(ctx: AppContext, page: ft.Page, habit_id: str) -> bool:
    outcome = _run(ctx, page, "complete_habit", lambda: ctx.session.complete_habit(habit_id))
    if outcome is None:
        return False
    message = f"+{outcome.result.points_awarded} pts"
    if outcome.result.leveled_up:
        message += f" - Level {outcome.result.profile.level}!"
    if not outcome.leaderboard_updated:
        message += " (leaderboard not updated)"
    show_snack(page, message)
    return True


def switch_user(ctx: AppContext, page: ft.Page) -> None:
    ctx.session.switch_user()
    navigate(page, LOGIN_ROUTE)
