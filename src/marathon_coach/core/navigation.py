"""
View controller: which screen is shown and what the user can do there.

Views are tagged values; LogEntry and Detail carry the date they refer to,
so the selected date can never disagree with the current view.

Transitions:
- startup:        Dashboard if a plan is loaded, else Import
- Dashboard:      open_today -> LogEntry(today) | Detail(today)
- FullPlan:       open_day(d) -> LogEntry(d) | Detail(d)
- LogEntry(d):    back -> Dashboard if d is today else FullPlan
                  submit_log -> acknowledgement, then back on dismiss
- Detail(d):      edit -> LogEntry(d); back as above
                  request_delete -> confirmation (see dialog.py)
- Import:         import_plan -> Dashboard
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import TypeVar

from ..io.serializers import build_workout_log
from .dates import format_date, is_monday, today as local_today
from .dialog import ConfirmationFlow
from .errors import PersistenceError, ScheduleImportError, ValidationError
from .importer import import_schedule
from .indexer import build_plan_grid, is_in_plan
from .models import LoggedWorkoutEntry, PlanGridRow, PlanPosition
from .state import AppState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dashboard:
    pass


@dataclass(frozen=True)
class FullPlan:
    pass


@dataclass(frozen=True)
class Import:
    pass


@dataclass(frozen=True)
class LogEntry:
    date: date


@dataclass(frozen=True)
class Detail:
    date: date


View = Dashboard | FullPlan | Import | LogEntry | Detail

DatedView = TypeVar("DatedView", LogEntry, Detail)


@dataclass
class LogFormFields:
    """Raw values from the log form."""

    distance: str | float | None = None
    duration: str | None = None
    pace: str | None = None
    avg_heart_rate: str | int | None = None
    external_link: str | None = None


class ViewController:
    """
    Screen state machine over an AppState.

    Args:
        state: Loaded application state
        clock: Returns "today"; injectable for tests
        delimiter: Cell separator for schedule imports
    """

    def __init__(
        self,
        state: AppState,
        clock: Callable[[], date] = local_today,
        delimiter: str = ",",
    ):
        self.state = state
        self.clock = clock
        self.delimiter = delimiter
        self.dialog = ConfirmationFlow()
        self.view: View = Dashboard() if state.has_plan else Import()

        if state.load_problems:
            self.dialog.show_message(
                "Data Error",
                "Could not load saved data from storage. It might be corrupted.",
            )

    # ── helpers ────────────────────────────────────────────────────────────

    def today(self) -> date:
        return self.clock()

    def _home_for(self, d: date) -> View:
        """Where back-navigation from a dated view lands."""
        return Dashboard() if d == self.today() else FullPlan()

    def _storage_failed(self, error: PersistenceError) -> None:
        logger.error("Storage failure: %s", error)
        self.dialog.show_message("Storage Error", f"Your changes could not be saved: {error}")

    def _require(self, *view_types: type) -> None:
        if not isinstance(self.view, view_types):
            names = ", ".join(t.__name__ for t in view_types)
            raise RuntimeError(f"Action not available in {type(self.view).__name__} (needs {names})")

    def _require_dated(self, view_type: type[DatedView]) -> DatedView:
        view = self.view
        if isinstance(view, view_type):
            return view
        raise RuntimeError(
            f"Action not available in {type(view).__name__} (needs {view_type.__name__})"
        )

    def _open_dated(self, d: date) -> View:
        self.view = Detail(d) if self.state.is_logged(d) else LogEntry(d)
        return self.view

    # ── rendering queries ──────────────────────────────────────────────────

    def rendered_view(self) -> View:
        """The view to draw; a dashboard without a plan draws the import screen."""
        if isinstance(self.view, Dashboard) and not self.state.has_plan:
            return Import()
        return self.view

    def today_position(self) -> PlanPosition:
        return self.state.locate(self.today())

    def position_for(self, d: date) -> PlanPosition:
        return self.state.locate(d)

    def plan_grid(self) -> list[PlanGridRow]:
        if self.state.plan is None:
            return []
        return build_plan_grid(
            self.state.plan.start_date, self.state.plan.weeks, self.state.logs, self.today()
        )

    def entry_for(self, d: date) -> LoggedWorkoutEntry | None:
        return self.state.get_entry(d)

    # ── navigation ─────────────────────────────────────────────────────────

    def show_dashboard(self) -> View:
        self.view = Dashboard()
        return self.view

    def show_full_plan(self) -> View:
        self.view = FullPlan()
        return self.view

    def show_import(self) -> View:
        self.view = Import()
        return self.view

    def open_today(self) -> View:
        """Dashboard action: log today's workout, or view it if already logged."""
        self._require(Dashboard)
        return self._open_dated(self.today())

    def open_day(self, d: date) -> View:
        """
        Full-plan action: open any day in the plan, past or future.

        Raises:
            ValueError: If d is outside the plan
        """
        self._require(FullPlan)
        plan = self.state.plan
        if plan is None or not is_in_plan(d, plan.start_date, plan.weeks):
            raise ValueError(f"{format_date(d)} is not part of the plan")
        return self._open_dated(d)

    def back(self) -> View:
        """Return from a dated view (or the full plan) to where it was opened from."""
        if isinstance(self.view, (LogEntry, Detail)):
            self.view = self._home_for(self.view.date)
        else:
            self.view = Dashboard()
        return self.view

    def edit(self) -> View:
        """Detail action: edit the shown log."""
        view = self._require_dated(Detail)
        self.view = LogEntry(view.date)
        return self.view

    # ── mutations ──────────────────────────────────────────────────────────

    def import_plan(self, text: str, start_date: date | None) -> int:
        """
        Import a schedule and go to the dashboard.

        Args:
            text: Schedule file contents
            start_date: Monday of week 1

        Returns:
            Number of imported weeks (0 if nothing was committed)

        Raises:
            ValidationError: If the start date is missing or not a Monday
        """
        if start_date is None:
            raise ValidationError(
                "Please select a plan start date (Monday of Week 1) before importing.",
                field="start_date",
            )
        if not is_monday(start_date):
            raise ValidationError(
                f"Plan start date {format_date(start_date)} is not a Monday.", field="start_date"
            )

        try:
            plan = import_schedule(text, start_date, self.delimiter)
        except ScheduleImportError as e:
            self.dialog.show_message("Error", str(e))
            return 0

        try:
            self.state.replace_plan(plan)
        except PersistenceError as e:
            self._storage_failed(e)
            return 0

        self.dialog.show_message(
            "Success",
            f"Successfully imported {len(plan)} weeks of training data, "
            f"starting {format_date(start_date)}.",
        )
        self.view = Dashboard()
        return len(plan)

    def submit_log(self, fields: LogFormFields) -> LoggedWorkoutEntry | None:
        """
        Save the log form for the current LogEntry date.

        The acknowledgement is shown immediately; navigation back happens
        only when the user dismisses it.

        Raises:
            ValidationError: If a required field is missing or invalid (no state change)
        """
        d = self._require_dated(LogEntry).date

        log = build_workout_log(
            fields.distance,
            fields.duration,
            fields.pace,
            fields.avg_heart_rate,
            fields.external_link,
        )

        is_update = self.state.is_logged(d)
        try:
            entry = self.state.upsert_log(d, log)
        except PersistenceError as e:
            self._storage_failed(e)
            return None

        verb = "updated" if is_update else "logged"
        target = self._home_for(d)
        self.dialog.show_message(
            "Success",
            f"Workout for {format_date(d)} has been successfully {verb}!",
            on_dismiss=lambda: self._navigate(target),
        )
        return entry

    def _navigate(self, view: View) -> None:
        self.view = view

    def request_delete(self) -> None:
        """Detail action: ask for confirmation before deleting the shown log."""
        d = self._require_dated(Detail).date
        self.dialog.raise_confirmation(
            "Confirm Delete",
            f"Are you sure you want to delete the workout log for {format_date(d)}?",
            on_confirm=lambda: self._delete_confirmed(d),
            on_cancel=lambda: self._navigate(Detail(d)),
        )

    def _delete_confirmed(self, d: date) -> None:
        try:
            self.state.delete_log(d)
        except PersistenceError as e:
            self._storage_failed(e)
            return
        self.dialog.show_message("Deleted", f"The log for {format_date(d)} has been removed.")
        self.view = self._home_for(d)
