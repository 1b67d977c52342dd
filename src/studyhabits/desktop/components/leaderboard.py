"""Leaderboard widget shared by the login and habits views."""

from __future__ import annotations

from typing import Iterable

import flet as ft

from ...models.leaderboard import LeaderboardEntry


def leaderboard_rows(players: Iterable[LeaderboardEntry]) -> list[ft.Control]:
    """Return one row per ranked player, or a placeholder when the board is empty."""

    rows: list[ft.Control] = []
    for rank, player in enumerate(players, start=1):
        rows.append(
            ft.ListTile(
                leading=ft.Text(str(rank), weight=ft.FontWeight.BOLD),
                title=ft.Text(player.name),
                trailing=ft.Text(f"{player.points} pts • 🔥 {player.streak} • Lv {player.level}"),
                dense=True,
            )
        )
    if not rows:
        rows.append(ft.Text("No players yet.", color=ft.Colors.ON_SURFACE_VARIANT))
    return rows


def build_leaderboard(players: Iterable[LeaderboardEntry]) -> ft.Column:
    return ft.Column(controls=leaderboard_rows(players), spacing=0)
