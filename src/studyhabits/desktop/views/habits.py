"""Habits view: stats header, habit list, add form, and live leaderboard."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import flet as ft

from .. import controllers
from ...constants import COMPLETION_POINTS
from ...models.habit import Frequency, Habit
from ...models.user import UserProfile
from ...services.habits import days_until_due, describe_frequency, is_due
from ...services.session import SessionChange
from ..components import leaderboard_rows

if TYPE_CHECKING:  # pragma: no cover
    from ..context import AppContext

FREQUENCY_OPTIONS: list[tuple[str, str]] = [
    (Frequency.DAILY.value, "Daily"),
    (Frequency.EVERY_TWO_DAYS.value, "Every 2 days"),
    (Frequency.CUSTOM.value, "Custom (N days)"),
]


def habit_subtitle(habit: Habit, today: date) -> str:
    """Frequency, last completion, and time to next due date in one line."""

    parts = [describe_frequency(habit)]
    if habit.last_completed is not None:
        parts.append(f"Last done {habit.last_completed.isoformat()}")
    if not is_due(habit, today):
        parts.append(f"Next due in {days_until_due(habit, today)} day(s)")
    return " • ".join(parts)


def stats_line(profile: UserProfile) -> str:
    return (
        f"Level {profile.level} • {profile.points} pts • XP {profile.xp} "
        f"• 🔥 {profile.overall_streak}"
    )


def build_habits_view(ctx: AppContext, page: ft.Page) -> ft.View:
    """Build the signed-in view."""

    session = ctx.session
    greeting = ft.Text(size=24, weight=ft.FontWeight.BOLD)
    stats = ft.Text(color=ft.Colors.ON_SURFACE_VARIANT)
    due_text = ft.Text(color=ft.Colors.ON_SURFACE_VARIANT)
    habit_list = ft.Column(spacing=8)
    leaderboard_column = ft.Column(spacing=0)

    title_field = ft.TextField(label="Title (e.g., Read 20 mins)", expand=True)
    interval_field = ft.TextField(label="Interval days", value="1", width=140, visible=False)
    frequency_field = ft.Dropdown(
        label="Frequency",
        options=[ft.dropdown.Option(key, label) for key, label in FREQUENCY_OPTIONS],
        value=Frequency.DAILY.value,
        width=180,
    )
    add_card = ft.Container(
        content=ft.Column(
            [
                ft.Text("Add Habit", weight=ft.FontWeight.W_600),
                ft.Row([title_field, frequency_field, interval_field]),
                ft.FilledButton("Add Habit", on_click=lambda _e: do_add()),
            ]
        ),
        padding=16,
        border=ft.border.all(1, ft.Colors.OUTLINE_VARIANT),
        border_radius=12,
    )

    def on_frequency_change(_e) -> None:
        interval_field.visible = frequency_field.value == Frequency.CUSTOM.value
        page.update()

    frequency_field.on_change = on_frequency_change

    def habit_row(habit: Habit, today: date) -> ft.Control:
        due = is_due(habit, today)
        return ft.Container(
            content=ft.Row(
                [
                    ft.Column(
                        [
                            ft.Text(habit.title, weight=ft.FontWeight.W_500),
                            ft.Text(habit_subtitle(habit, today), size=12, color=ft.Colors.ON_SURFACE_VARIANT),
                        ],
                        spacing=2,
                        expand=True,
                    ),
                    ft.OutlinedButton(
                        "Delete",
                        on_click=lambda _e, hid=habit.id: controllers.delete_habit(ctx, page, hid),
                    ),
                    ft.FilledButton(
                        f"Complete (+{COMPLETION_POINTS})" if due else "Not due",
                        disabled=not due,
                        on_click=lambda _e, hid=habit.id: controllers.complete_habit(ctx, page, hid),
                    ),
                ],
                vertical_alignment=ft.CrossAxisAlignment.CENTER,
            ),
            padding=12,
            border=ft.border.all(1, ft.Colors.OUTLINE_VARIANT),
            border_radius=12,
        )

    def render_profile() -> None:
        profile = session.profile
        if profile is None:
            return
        today = session.clock()
        greeting.value = f"Hi, {profile.name}"
        stats.value = stats_line(profile)
        due_text.value = f"{session.due_count()} due today"
        habit_list.controls = [habit_row(habit, today) for habit in profile.habits]
        add_card.visible = session.can_add_habit()

    def render_leaderboard() -> None:
        leaderboard_column.controls = leaderboard_rows(session.leaderboard)

    def do_add() -> None:
        added = controllers.add_habit(
            ctx,
            page,
            title_field.value,
            frequency_field.value,
            interval_field.value if interval_field.visible else None,
        )
        if added:
            title_field.value = ""
            frequency_field.value = Frequency.DAILY.value
            interval_field.value = "1"
            interval_field.visible = False
            page.update()

    title_field.on_submit = lambda _e: do_add()

    def on_change(change: SessionChange) -> None:
        if change is SessionChange.PROFILE:
            render_profile()
        elif change is SessionChange.LEADERBOARD:
            render_leaderboard()
        else:
            return
        page.update()

    render_profile()
    render_leaderboard()
    ctx.bind_view(on_change)

    return ft.View(
        route=controllers.HABITS_ROUTE,
        controls=[
            ft.Column(
                controls=[
                    ft.Row(
                        [
                            ft.Column([greeting, stats], spacing=4, expand=True),
                            ft.OutlinedButton(
                                "Switch user",
                                on_click=lambda _e: controllers.switch_user(ctx, page),
                            ),
                        ]
                    ),
                    ft.Text("Your Habits", size=20, weight=ft.FontWeight.W_600),
                    due_text,
                    habit_list,
                    add_card,
                    ft.Divider(),
                    ft.Text("Leaderboard (Top 5)", size=20, weight=ft.FontWeight.W_600),
                    leaderboard_column,
                    ft.Text(
                        "Keep codes private for light security (classroom use)",
                        size=11,
                        color=ft.Colors.ON_SURFACE_VARIANT,
                    ),
                ],
                spacing=12,
                scroll=ft.ScrollMode.AUTO,
            )
        ],
        padding=24,
    )
