"""Plan commands: import, today, plan."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.dates import format_date, next_monday_on_or_after, today
from ...core.errors import PersistenceError, ScheduleImportError
from ...core.importer import import_schedule
from ...core.indexer import build_plan_grid
from .. import views
from ..app import DataDirOption, app, get_state, parse_date_option


@app.command("import")
def import_plan(
    ctx: typer.Context,
    csv_file: Annotated[
        Path,
        typer.Argument(help="Schedule file: header Week,Mon,Tue,Wed,Thu,Fri,Sat,Sun"),
    ],
    start_date: Annotated[
        Optional[str],
        typer.Option("--start-date", "-s", help="Monday of week 1 (YYYY-MM-DD, default: next Monday)"),
    ] = None,
    data_dir: DataDirOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Replace an existing plan without prompting"),
    ] = False,
) -> None:
    """
    Import a weekly training schedule.

    Replaces any existing plan; logged workouts are kept.

      marathon-coach import plan.csv --start-date 2026-11-02
    """
    state, settings = get_state(data_dir, ctx=ctx)

    start = parse_date_option(start_date, next_monday_on_or_after(today()))
    if start.weekday() != 0:
        views.print_error(f"Plan start date {format_date(start)} is not a Monday.")
        raise typer.Exit(1)

    try:
        text = csv_file.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        views.print_error(f"Could not read {csv_file}: {e}")
        raise typer.Exit(1)

    try:
        plan = import_schedule(text, start, settings.delimiter)
    except ScheduleImportError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if state.has_plan and not force:
        if not views.confirm_action(f"Replace the current {len(state.plan)}-week plan?"):  # type: ignore[arg-type]
            views.print_info("Cancelled.")
            raise typer.Exit(0)

    try:
        state.replace_plan(plan)
    except PersistenceError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(
        f"Successfully imported {len(plan)} weeks of training data, starting {format_date(start)}."
    )


@app.command("today")
def today_cmd(
    ctx: typer.Context,
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Show another day instead (YYYY-MM-DD)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Show today's planned activity."""
    state, _ = get_state(data_dir, ctx=ctx)

    if not state.has_plan:
        views.print_error("No plan loaded.")
        views.print_info("Run 'import' first to load a training schedule.")
        raise typer.Exit(1)

    target = parse_date_option(date, today())
    views.print_dashboard(state.locate(target), target, state.plan)


@app.command("plan")
def show_plan(
    ctx: typer.Context,
    data_dir: DataDirOption = None,
) -> None:
    """Show the full training plan with logged days ticked."""
    state, _ = get_state(data_dir, ctx=ctx)

    if state.plan is None:
        views.print_error("No plan loaded.")
        views.print_info("Run 'import' first to load a training schedule.")
        raise typer.Exit(1)

    grid = build_plan_grid(state.plan.start_date, state.plan.weeks, state.logs, today())
    views.print_plan(grid, state.plan.start_date)
