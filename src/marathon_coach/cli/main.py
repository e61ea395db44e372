"""
CLI entry point using Typer.

Provides commands for plan tracking:
- import: Import a weekly schedule file
- today: Show today's planned activity
- plan: Show the full plan
- log: Log or update a workout
- show: Show a logged workout
- delete: Delete a logged workout

Run without a command for the interactive session.
"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.navigation import ViewController
from . import views
from .app import app, configure_logging, get_settings, get_state
from .commands import plan as _plan_commands  # noqa: F401  (registers commands)
from .commands import workouts as _workout_commands  # noqa: F401  (registers commands)
from .session import run_session


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    data_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--data-dir", "-p", help="Directory holding plan and log records (all commands)"
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Marathon training tracker. Run without a command for interactive mode.
    """
    ctx.obj = {"data_dir": data_dir}
    configure_logging(get_settings(data_dir).log_level, verbose)

    if ctx.invoked_subcommand is not None:
        return

    views.console.print()
    views.console.print("[bold cyan]marathon-coach[/bold cyan]: training plan tracker")

    state, settings = get_state(data_dir, warn=False)
    controller = ViewController(state, delimiter=settings.delimiter)
    run_session(controller)


if __name__ == "__main__":
    app()
