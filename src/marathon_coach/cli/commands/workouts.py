"""Workout commands: log, show, delete."""

from typing import Annotated, Optional

import typer
from rich.markup import escape

from ...core.config import CLEAR_ANSWER
from ...core.dates import format_date, today
from ...core.errors import PersistenceError, ValidationError
from ...core.models import WorkoutLog
from ...io.serializers import build_workout_log
from .. import views
from ..app import DataDirOption, app, get_state, parse_date_option


def _prompt(label: str, current: object | None = None) -> str:
    """Prompt for one value, offering the current one as the Enter default."""
    hint = f" \\[{escape(str(current))}]" if current not in (None, "") else ""
    raw = views.console.input(f"{label}{hint}: ").strip()
    if not raw and current is not None:
        return str(current)
    return raw


@app.command("log")
def log_workout(
    ctx: typer.Context,
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Workout date (YYYY-MM-DD, default: today)"),
    ] = None,
    distance: Annotated[
        Optional[float],
        typer.Option("--distance", "-k", help="Distance in km"),
    ] = None,
    time: Annotated[
        Optional[str],
        typer.Option("--time", "-t", help="Duration HH:MM:SS, e.g. 00:45:30"),
    ] = None,
    pace: Annotated[
        Optional[str],
        typer.Option("--pace", help="Average pace (min/km), e.g. 5:15"),
    ] = None,
    heart_rate: Annotated[
        Optional[int],
        typer.Option("--hr", help="Average heart rate (BPM, 0 clears a saved value)"),
    ] = None,
    link: Annotated[
        Optional[str],
        typer.Option(
            "--link", "-l", help="Activity link, e.g. a Strava URL ('-' clears a saved link)"
        ),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Log (or update) a workout for a day.

    Missing required values are prompted for; an existing log for the
    same day is offered as the default and then overwritten.

      marathon-coach log --date 2026-11-03 --distance 10 --time 00:52:10 --pace 5:13
    """
    state, _ = get_state(data_dir, ctx=ctx)
    target = parse_date_option(date, today())
    date_str = format_date(target)

    existing = state.get_entry(target)
    old: WorkoutLog | None = existing.log if existing is not None else None

    position = state.locate(target)
    views.console.print(
        f"[bold]{'Edit' if old else 'Log'} Workout for {date_str}[/bold]"
    )
    if position.loaded:
        views.print_position(position)

    if distance is None:
        distance = _prompt("Distance (km)", old.distance_km if old else None)  # type: ignore[assignment]
    if time is None:
        time = _prompt("Time (HH:MM:SS)", old.duration if old else None)
    if pace is None:
        pace = _prompt("Avg Pace (min/km)", old.pace if old else None)
    if heart_rate is None and old is not None:
        heart_rate = old.avg_heart_rate
    if link is None and old is not None:
        link = old.external_link
    if link == CLEAR_ANSWER:
        link = None

    try:
        log = build_workout_log(distance, time, pace, heart_rate, link)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    try:
        state.upsert_log(target, log)
    except PersistenceError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(
        f"Workout for {date_str} has been successfully {'updated' if old else 'logged'}!"
    )


@app.command("show")
def show_workout(
    ctx: typer.Context,
    date: Annotated[
        Optional[str],
        typer.Argument(help="Workout date (YYYY-MM-DD, default: today)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Show the logged workout for a day."""
    state, _ = get_state(data_dir, ctx=ctx)
    target = parse_date_option(date, today())
    date_str = format_date(target)

    entry = state.get_entry(target)
    if entry is None:
        views.print_log_detail(date_str, None)
        raise typer.Exit(1)

    views.print_log_detail(date_str, entry)


@app.command("delete")
def delete_workout(
    ctx: typer.Context,
    date: Annotated[
        str,
        typer.Argument(help="Workout date to delete (YYYY-MM-DD)"),
    ],
    data_dir: DataDirOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """Delete the logged workout for a day."""
    state, _ = get_state(data_dir, ctx=ctx)
    target = parse_date_option(date, today())
    date_str = format_date(target)

    if not state.is_logged(target):
        views.print_error(f"No workout logged for {date_str}.")
        raise typer.Exit(1)

    if not force and not views.confirm_action(
        f"Are you sure you want to delete the workout log for {date_str}?"
    ):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    try:
        state.delete_log(target)
    except PersistenceError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"The log for {date_str} has been removed.")
