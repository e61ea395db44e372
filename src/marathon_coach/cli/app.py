"""Shared Typer app object, shared option types, and state loading."""

import logging
from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.logging import RichHandler

from ..core.dates import parse_date
from ..core.errors import FormatError
from ..core.settings import Settings, load_settings
from ..core.state import AppState
from ..io.store import get_default_store
from . import views

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-p", help="Directory holding plan and log records"),
]

app = typer.Typer(
    name="marathon-coach",
    help="Personal marathon training tracker: import a weekly plan and log your runs.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def configure_logging(level: str, verbose: bool = False) -> None:
    """Route library logging through Rich; --verbose forces DEBUG."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=views.console, show_path=False)],
        force=True,
    )


def get_settings(data_dir: Path | None) -> Settings:
    """Load settings, letting an explicit --data-dir win over config.yaml."""
    settings = load_settings()
    if data_dir is not None:
        settings.data_dir = data_dir
    return settings


def resolve_data_dir(ctx: typer.Context | None, data_dir: Path | None) -> Path | None:
    """A command-level --data-dir wins over the one given before the command."""
    if data_dir is not None or ctx is None or not ctx.obj:
        return data_dir
    return ctx.obj.get("data_dir")


def get_state(
    data_dir: Path | None,
    warn: bool = True,
    ctx: typer.Context | None = None,
) -> tuple[AppState, Settings]:
    """
    Load app state from the data directory.

    Records that could not be read are reported once as a warning unless
    warn is False (the interactive session shows its own dialog).
    """
    settings = get_settings(resolve_data_dir(ctx, data_dir))
    state = AppState.from_store(get_default_store(settings.data_dir))
    if warn and state.load_problems:
        views.print_warning(
            "Could not load some saved data. It might be corrupted and was ignored."
        )
    return state, settings


def parse_date_option(value: str | None, default: date) -> date:
    """Parse a --date value or exit with an error."""
    if value is None:
        return default
    try:
        return parse_date(value)
    except FormatError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
