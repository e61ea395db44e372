"""
Interactive session: renders the controller's current view and feeds
user input back into it until the user quits.
"""

from pathlib import Path

from rich.markup import escape

from ..core.config import CLEAR_ANSWER
from ..core.dates import format_date, next_monday_on_or_after, parse_date
from ..core.errors import FormatError, ValidationError
from ..core.navigation import (
    Dashboard,
    Detail,
    FullPlan,
    Import,
    LogEntry,
    LogFormFields,
    ViewController,
)
from . import views


class QuitSession(Exception):
    """Raised by a screen handler to end the session."""


def _handle_dialog(controller: ViewController) -> None:
    """Show the open dialog and press the action the user picks."""
    dialog = controller.dialog.dialog
    if dialog is None:
        return
    views.print_dialog(dialog)
    labels = dialog.labels()
    if len(labels) == 1:
        views.console.input("Press Enter to continue ")
        controller.dialog.activate(labels[0])
        return
    while True:
        raw = views.console.input("Choose [1]: ").strip() or "1"
        if raw.isdigit() and 1 <= int(raw) <= len(labels):
            controller.dialog.activate(labels[int(raw) - 1])
            return
        views.print_error(f"Enter a number between 1 and {len(labels)}")


def _dashboard(controller: ViewController) -> None:
    position = controller.today_position()
    views.print_dashboard(position, controller.today(), controller.state.plan)
    first = "View Log Details" if position.is_logged else "Log Today's Workout"
    views.print_menu([("1", first), ("2", "View Full Plan"), ("3", "Import New Plan"), ("0", "Quit")])

    choice = views.console.input("Choose [1]: ").strip() or "1"
    if choice == "0":
        raise QuitSession
    if choice == "1":
        controller.open_today()
    elif choice == "2":
        controller.show_full_plan()
    elif choice == "3":
        controller.show_import()
    else:
        views.print_error(f"Unknown choice: {choice}")


def _full_plan(controller: ViewController) -> None:
    plan = controller.state.plan
    views.print_plan(controller.plan_grid(), plan.start_date if plan else None)
    raw = views.console.input("Open day (YYYY-MM-DD, Enter = Back to Today): ").strip()
    if not raw:
        controller.back()
        return
    try:
        controller.open_day(parse_date(raw))
    except (FormatError, ValueError) as e:
        views.print_error(str(e))


def _import(controller: ViewController) -> None:
    views.console.print()
    views.console.print("[bold]Import a training plan[/bold]")
    views.console.print("Header must be: [cyan]Week,Mon,Tue,Wed,Thu,Fri,Sat,Sun[/cyan]")

    has_plan = controller.state.has_plan
    hint = "Enter = Back" if has_plan else "Enter = Quit"
    raw = views.console.input(f"Schedule file ({hint}): ").strip()
    if not raw:
        if not has_plan:
            raise QuitSession
        controller.show_dashboard()
        return

    default_start = format_date(next_monday_on_or_after(controller.today()))
    start_raw = views.console.input(f"Plan start date, Monday of Week 1 [{default_start}]: ").strip()
    try:
        start = parse_date(start_raw or default_start)
    except FormatError as e:
        views.print_error(str(e))
        return

    try:
        text = Path(raw).expanduser().read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        views.print_error(f"Could not read {raw}: {e}")
        return

    try:
        controller.import_plan(text, start)
    except ValidationError as e:
        views.print_error(str(e))


def _log_entry(controller: ViewController, view: LogEntry) -> None:
    entry = controller.entry_for(view.date)
    old = entry.log if entry is not None else None
    back = "Dashboard" if view.date == controller.today() else "Full Plan"

    views.console.print()
    views.console.print(f"[bold]{'Edit' if old else 'Log'} Workout for {format_date(view.date)}[/bold]")
    views.print_position(controller.position_for(view.date))
    views.console.print(f"[dim]Leave Distance empty to go back to {back}.[/dim]")

    def ask(label: str, current: object | None, clearable: bool = False) -> str:
        hint = f" \\[{escape(str(current))}]" if current not in (None, "") else ""
        if clearable and hint:
            hint += f" ({CLEAR_ANSWER} to clear)"
        value = views.console.input(f"{label}{hint}: ").strip()
        if clearable and value == CLEAR_ANSWER:
            return ""
        return value or ("" if current is None else str(current))

    distance = ask("Distance (km)", old.distance_km if old else None)
    if not distance:
        controller.back()
        return

    fields = LogFormFields(
        distance=distance,
        duration=ask("Time (HH:MM:SS)", old.duration if old else None),
        pace=ask("Avg Pace (min/km)", old.pace if old else None),
        avg_heart_rate=ask(
            "Heartbeat Avg (BPM, optional)", old.avg_heart_rate if old else None, clearable=True
        ),
        external_link=ask(
            "Activity Link (optional)", old.external_link if old else None, clearable=True
        ),
    )
    try:
        controller.submit_log(fields)
    except ValidationError as e:
        views.print_error(str(e))


def _detail(controller: ViewController, view: Detail) -> None:
    views.console.print()
    views.print_log_detail(format_date(view.date), controller.entry_for(view.date))
    back = "Dashboard" if view.date == controller.today() else "Full Plan"
    views.print_menu([("1", "Edit Workout"), ("2", "Delete Log"), ("0", f"Back to {back}")])

    choice = views.console.input("Choose [0]: ").strip() or "0"
    if choice == "1":
        controller.edit()
    elif choice == "2":
        controller.request_delete()
    elif choice == "0":
        controller.back()
    else:
        views.print_error(f"Unknown choice: {choice}")


def run_session(controller: ViewController) -> None:
    """
    Drive the controller until the user quits (or input ends).

    Any open dialog is handled before the next screen is drawn.
    """
    while True:
        try:
            if controller.dialog.is_open:
                _handle_dialog(controller)
                continue

            view = controller.rendered_view()
            if isinstance(view, Dashboard):
                _dashboard(controller)
            elif isinstance(view, FullPlan):
                _full_plan(controller)
            elif isinstance(view, Import):
                _import(controller)
            elif isinstance(view, LogEntry):
                _log_entry(controller, view)
            elif isinstance(view, Detail):
                _detail(controller, view)
        except (QuitSession, EOFError):
            views.console.print()
            return
