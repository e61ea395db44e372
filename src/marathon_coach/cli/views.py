"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of plan positions and workout logs.
"""

from datetime import date

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.config import DAY_COLUMNS, WEEK_COLUMN
from ..core.dates import format_date, weekday_name
from ..core.dialog import Dialog
from ..core.models import LoggedWorkoutEntry, PlanGridRow, PlanPosition, TrainingPlan

console = Console()

NA = "N/A"


def print_dashboard(position: PlanPosition, today: date, plan: TrainingPlan | None) -> None:
    """
    Print today's planned activity.

    Args:
        position: Plan position for today
        today: Today's date
        plan: Loaded plan (for the start date line)
    """
    console.print()
    console.print(f"[bold]Today is {weekday_name(today)}[/bold]")
    console.print(f"[dim]{format_date(today)}[/dim]")
    console.print()
    console.print(f"[bold cyan]{escape(str(position.week))}[/bold cyan]")
    icon = "[green]✓[/green]" if position.is_logged else "[magenta]»[/magenta]"
    console.print(f"  {icon} [bold]{escape(str(position.activity))}[/bold]")
    console.print()
    if position.is_logged:
        console.print("[green]Workout logged![/green]")
    start = format_date(plan.start_date) if plan is not None else NA
    console.print(f"[dim]Plan started: {start}[/dim]")


def format_plan_table(grid: list[PlanGridRow], title: str = "Training Schedule") -> Table:
    """
    Create a Rich table of the whole plan.

    Today's cell is highlighted; logged cells carry a tick.

    Args:
        grid: Rows from build_plan_grid
        title: Table title

    Returns:
        Rich Table object
    """
    table = Table(title=title, show_lines=True)
    table.add_column(WEEK_COLUMN, style="bold cyan", no_wrap=True)
    for day in DAY_COLUMNS:
        table.add_column(day)

    for row in grid:
        cells = []
        for cell in row.cells:
            text = escape(cell.activity)
            if cell.is_logged:
                text += " [green]✓[/green]"
            if cell.is_today:
                text = f"[bold black on yellow]{text}[/bold black on yellow]"
            elif cell.is_logged:
                text = f"[green]{text}[/green]"
            cells.append(text)
        table.add_row(escape(row.week_label), *cells)

    return table


def print_plan(grid: list[PlanGridRow], start_date: date | None = None) -> None:
    """Print the full plan grid."""
    if not grid:
        console.print("[yellow]No plan loaded. Please import a schedule first.[/yellow]")
        return
    console.print(format_plan_table(grid, title=f"{len(grid)}-Week Training Schedule"))
    if start_date is not None:
        console.print(f"[dim]Week 1 starts {format_date(start_date)}. Yellow is today.[/dim]")


def print_position(position: PlanPosition) -> None:
    """One-line 'Week N: activity' header for dated views."""
    console.print(f"[cyan]{escape(str(position.week))}: {escape(str(position.activity))}[/cyan]")


def format_log_table(date_str: str, entry: LoggedWorkoutEntry) -> Table:
    """
    Create a two-column table for one logged workout.

    Missing optional values are shown as N/A.
    """
    log = entry.log
    table = Table(title=f"Workout Log: {date_str}", show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Planned", escape(entry.planned_activity or NA))
    table.add_row("Distance", f"{log.distance_km:g} km" if log.distance_km else NA)
    table.add_row("Time", log.duration or NA)
    table.add_row("Avg Pace", escape(log.pace or NA))
    table.add_row("Avg Heartbeat", f"{log.avg_heart_rate} BPM" if log.avg_heart_rate else NA)
    table.add_row("Link", escape(log.external_link or "No link provided."))
    return table


def print_log_detail(date_str: str, entry: LoggedWorkoutEntry | None) -> None:
    """Print a logged workout, or a notice if there is none."""
    if entry is None:
        console.print(f"[yellow]No workout logged for {date_str}.[/yellow]")
        return
    console.print(format_log_table(date_str, entry))


def print_dialog(dialog: Dialog) -> None:
    """Print a dialog title and message followed by its numbered actions."""
    console.print()
    console.print(f"[bold]{dialog.title}[/bold]")
    console.print(escape(dialog.message))
    for i, label in enumerate(dialog.labels(), 1):
        console.print(f"  \\[{i}] {label}")


def print_menu(options: list[tuple[str, str]]) -> None:
    """Print '[key] description' menu lines."""
    console.print()
    for key, desc in options:
        console.print(f"  \\[{key}] {desc}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
