"""Command-line interface for the Study Habit Tracker."""

from __future__ import annotations

import functools
from typing import Callable, Optional, TypeVar

import click

from .config import BaseConfig
from .errors import TrackerError
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelDocumentStore
from .logging_config import setup_logging
from .models.habit import Frequency, Habit
from .models.user import UserProfile
from .services.habits import days_until_due, describe_frequency, is_due
from .services.session import TrackerSession


def _session(ctx: click.Context) -> TrackerSession:
    """Open (once per invocation) a session against the configured database."""

    obj = ctx.ensure_object(dict)
    if "session" not in obj:
        config: BaseConfig = obj["config"]
        _, session_factory = bootstrap_database(config)
        obj["session"] = TrackerSession(SQLModelDocumentStore(session_factory))
    return obj["session"]


T = TypeVar("T")


def _guard(call: Callable[[], T]) -> T:
    try:
        return call()
    except TrackerError as exc:
        raise click.ClickException(str(exc)) from exc


def identity_options(func):
    """Add --name/--pin (env STUDYHABITS_NAME/STUDYHABITS_PIN) and sign in first."""

    @click.option("--name", envvar="STUDYHABITS_NAME", prompt="Your name", help="Display name")
    @click.option(
        "--pin",
        envvar="STUDYHABITS_PIN",
        prompt="Your code (PIN)",
        hide_input=True,
        help="Shared secret code",
    )
    @click.pass_context
    @functools.wraps(func)
    def wrapper(ctx: click.Context, name: str, pin: str, **kwargs):
        session = _session(ctx)
        _guard(lambda: session.enter(name, pin))
        return func(session, **kwargs)

    return wrapper


def _profile(session: TrackerSession) -> UserProfile:
    if session.profile is None:
        raise click.ClickException("Sign in first")
    return session.profile


def _stats(profile: UserProfile) -> str:
    return (
        f"Level {profile.level} | {profile.points} pts | XP {profile.xp} "
        f"| streak {profile.overall_streak}"
    )


def _resolve_habit(profile: UserProfile, ref: str) -> Habit:
    """Find a habit by 1-based list position, full id, or unique id prefix."""

    ref = ref.strip()
    if ref.isdigit() and 1 <= int(ref) <= len(profile.habits):
        return profile.habits[int(ref) - 1]
    matches = [h for h in profile.habits if h.id == ref or h.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise click.ClickException(f"No habit matches {ref!r}")
    raise click.ClickException(f"{ref!r} matches {len(matches)} habits; use a longer id")


@click.group()
@click.option(
    "--data-dir",
    envvar="STUDYHABITS_DATA_DIR",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding the shared database and logs.",
)
@click.pass_context
def cli(ctx: click.Context, data_dir: Optional[str]) -> None:
    """Study Habit Tracker: complete habits, earn points, climb the leaderboard."""

    config = BaseConfig(data_dir)
    setup_logging(config)
    ctx.ensure_object(dict)["config"] = config


@cli.command("enter")
@identity_options
def enter_command(session: TrackerSession) -> None:
    """Sign in, creating the name on first use."""

    profile = _profile(session)
    click.echo(f"Hi, {profile.name}")
    click.echo(_stats(profile))
    click.echo(f"{session.due_count()} due today")


@cli.command("habits")
@identity_options
def habits_command(session: TrackerSession) -> None:
    """List your habits and whether each one is due."""

    profile = _profile(session)
    if not profile.habits:
        click.echo("No habits yet. Add one with `studyhabits add`.")
        return
    today = session.clock()
    for position, habit in enumerate(profile.habits, start=1):
        if is_due(habit, today):
            status = "DUE"
        else:
            status = f"in {days_until_due(habit, today)}d"
        last = habit.last_completed.isoformat() if habit.last_completed else "never"
        click.echo(
            f"{position:>2}. [{status:>6}] {habit.title} ({describe_frequency(habit)}, "
            f"last {last}, x{habit.total_completions}) id={habit.id[:8]}"
        )
    click.echo(f"{session.due_count()} due today")


@cli.command("add")
@identity_options
@click.argument("title", required=False, default="")
@click.option(
    "--frequency",
    "-f",
    type=click.Choice([f.value for f in Frequency]),
    default=Frequency.DAILY.value,
    show_default=True,
)
@click.option(
    "--interval",
    "-i",
    "interval_days",
    default=None,
    help="Days between completions (custom only).",
)
def add_command(
    session: TrackerSession, title: str, frequency: str, interval_days: Optional[str]
) -> None:
    """Add a habit (max 15)."""

    habit = _guard(lambda: session.add_habit(title, frequency, interval_days))
    click.echo(f"Added {habit.title} ({describe_frequency(habit)}) id={habit.id[:8]}")


@cli.command("complete")
@identity_options
@click.argument("habit_ref")
@click.option("--force", is_flag=True, default=False, help="Complete even when not due.")
def complete_command(session: TrackerSession, habit_ref: str, force: bool) -> None:
    """Complete a habit by list number or id."""

    profile = _profile(session)
    habit = _resolve_habit(profile, habit_ref)
    today = session.clock()
    if not force and not is_due(habit, today):
        raise click.ClickException(
            f"{habit.title} is not due; next due in {days_until_due(habit, today)} day(s)"
        )

    outcome = _guard(lambda: session.complete_habit(habit.id))
    result = outcome.result
    click.echo(f"+{result.points_awarded} pts for {habit.title}")
    if result.leveled_up:
        click.echo(f"Level up! You are now level {result.profile.level}")
    click.echo(_stats(result.profile))
    if not outcome.leaderboard_updated:
        click.echo(
            "Leaderboard could not be updated; it will catch up on the next completion.",
            err=True,
        )


@cli.command("delete")
@identity_options
@click.argument("habit_ref")
def delete_command(session: TrackerSession, habit_ref: str) -> None:
    """Delete a habit by list number or id."""

    profile = _profile(session)
    habit = _resolve_habit(profile, habit_ref)
    _guard(lambda: session.delete_habit(habit.id))
    click.echo(f"Deleted {habit.title}")


@cli.command("leaderboard")
@click.pass_context
def leaderboard_command(ctx: click.Context) -> None:
    """Show the top 5 players."""

    players = _guard(lambda: _session(ctx).leaderboard_repo.get())
    if not players:
        click.echo("No players yet.")
        return
    for rank, player in enumerate(players, start=1):
        click.echo(
            f"{rank}. {player.name} - {player.points} pts | streak {player.streak} | Lv {player.level}"
        )


@cli.command("roster")
@click.pass_context
def roster_command(ctx: click.Context) -> None:
    """Show the class list."""

    roster = _guard(lambda: _session(ctx).roster_repo.get())
    if not roster.names:
        click.echo("Class list is empty.")
        return
    for name in roster.names:
        click.echo(name)


@cli.command("desktop")
@click.pass_context
def desktop_command(ctx: click.Context) -> None:
    """Launch the desktop app against the same data directory."""

    import flet as ft

    from .desktop.app import main

    config: BaseConfig = ctx.obj["config"]
    ft.app(target=lambda page: main(page, config))


if __name__ == "__main__":
    cli()
