"""Sign-in view: pick a name from the class list and enter a PIN."""

from __future__ import annotations

from typing import TYPE_CHECKING

import flet as ft

from .. import controllers
from ...services.session import SessionChange
from ..components import leaderboard_rows

if TYPE_CHECKING:  # pragma: no cover
    from ..context import AppContext


def build_auth_view(ctx: AppContext, page: ft.Page) -> ft.View:
    """Build the login view with roster, name and PIN fields, and the leaderboard."""

    name_field = ft.TextField(label="Your name", autofocus=True, width=300)
    pin_field = ft.TextField(
        label="Your code (PIN)",
        password=True,
        can_reveal_password=True,
        width=300,
    )
    roster_row = ft.Row(wrap=True, spacing=8, run_spacing=8)
    leaderboard_column = ft.Column(spacing=0)

    def pick_name(name: str) -> None:
        name_field.value = name
        render_roster()
        page.update()

    def render_roster() -> None:
        roster_row.controls = [
            (ft.FilledButton if name == (name_field.value or "") else ft.OutlinedButton)(
                name, on_click=lambda _e, n=name: pick_name(n)
            )
            for name in ctx.session.roster.names
        ]

    def render_leaderboard() -> None:
        leaderboard_column.controls = leaderboard_rows(ctx.session.leaderboard)

    def do_enter(_e) -> None:
        controllers.enter(ctx, page, name_field.value or "", pin_field.value or "")

    def on_change(change: SessionChange) -> None:
        if change is SessionChange.ROSTER:
            render_roster()
        elif change is SessionChange.LEADERBOARD:
            render_leaderboard()
        else:
            return
        page.update()

    name_field.on_submit = lambda _: pin_field.focus()
    pin_field.on_submit = do_enter

    render_roster()
    render_leaderboard()
    ctx.bind_view(on_change)

    return ft.View(
        route=controllers.LOGIN_ROUTE,
        controls=[
            ft.Column(
                controls=[
                    ft.Text("Study Habit Tracker", size=32, weight=ft.FontWeight.BOLD),
                    ft.Text(
                        "Click your name, enter your code, and you're in. Or create a new name.",
                        color=ft.Colors.ON_SURFACE_VARIANT,
                    ),
                    ft.Text("Class List", size=18, weight=ft.FontWeight.W_600),
                    roster_row,
                    name_field,
                    pin_field,
                    ft.FilledButton("Enter", width=300, on_click=do_enter),
                    ft.Divider(),
                    ft.Text("Leaderboard", size=20, weight=ft.FontWeight.W_600),
                    leaderboard_column,
                ],
                spacing=12,
                scroll=ft.ScrollMode.AUTO,
            )
        ],
        padding=24,
    )
