"""
Integration tests for the view controller and confirmation flow.

Each test drives ViewController the way the presentation layer does:
navigation calls, form submissions and dialog button presses, over an
AppState backed by an in-memory store.

Fixed clock: "today" is Wednesday 2024-01-03, inside a two-week plan
starting Monday 2024-01-01.
"""

from datetime import date

import pytest

from marathon_coach.core.config import DAY_COLUMNS, LOGS_KEY
from marathon_coach.core.dialog import ConfirmationFlow
from marathon_coach.core.errors import PersistenceError, ValidationError
from marathon_coach.core.models import LoggedWorkoutEntry, ScheduleRow, TrainingPlan, WorkoutLog
from marathon_coach.core.navigation import (
    Dashboard,
    Detail,
    FullPlan,
    Import,
    LogEntry,
    LogFormFields,
    ViewController,
)
from marathon_coach.core.state import AppState
from marathon_coach.io.store import MemoryStore, TrainingStore

TODAY = date(2024, 1, 3)
START = date(2024, 1, 1)
OTHER_DAY = date(2024, 1, 10)  # week 2, Wed
CSV = (
    "Week,Mon,Tue,Wed,Thu,Fri,Sat,Sun\n"
    "Week 1,Rest,5k easy,Intervals,Rest,5k easy,Rest,10k long\n"
    "Week 2,Rest,6k easy,Tempo,Rest,6k easy,Rest,12k long\n"
)


# ===========================================================================
# Helpers
# ===========================================================================


def _plan() -> TrainingPlan:
    rows = tuple(
        ScheduleRow(week_label=f"Week {i}", activities={d: f"W{i} {d}" for d in DAY_COLUMNS})
        for i in (1, 2)
    )
    return TrainingPlan(start_date=START, weeks=rows)


def _fields(**overrides) -> LogFormFields:
    values = dict(distance="8", duration="00:42:00", pace="5:15")
    values.update(overrides)
    return LogFormFields(**values)


class FailingBackend(MemoryStore):
    """Backend whose writes always fail."""

    def set(self, key: str, value: str) -> None:
        raise PersistenceError(f"disk full writing {key}", key=key)


@pytest.fixture
def backend() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def state(backend) -> AppState:
    s = AppState(TrainingStore(backend))
    s.replace_plan(_plan())
    return s


@pytest.fixture
def controller(state) -> ViewController:
    return ViewController(state, clock=lambda: TODAY)


def _log_day(controller: ViewController, d: date, **fields) -> None:
    """Log a workout for d via the full plan and acknowledge it."""
    controller.show_full_plan()
    controller.open_day(d)
    controller.submit_log(_fields(**fields))
    controller.dialog.dismiss()


# ===========================================================================
# Startup
# ===========================================================================


class TestStartup:
    def test_no_plan_starts_on_import(self, backend):
        controller = ViewController(AppState(TrainingStore(backend)), clock=lambda: TODAY)
        assert controller.view == Import()

    def test_plan_starts_on_dashboard(self, controller):
        assert controller.view == Dashboard()
        assert not controller.dialog.is_open

    def test_dashboard_without_plan_renders_import(self, backend):
        controller = ViewController(AppState(TrainingStore(backend)), clock=lambda: TODAY)
        controller.show_dashboard()
        assert controller.view == Dashboard()
        assert controller.rendered_view() == Import()

    def test_load_problems_notify_once(self, backend):
        backend.set(LOGS_KEY, "{broken")
        controller = ViewController(AppState.from_store(TrainingStore(backend)), clock=lambda: TODAY)
        assert controller.dialog.dialog.title == "Data Error"
        controller.dialog.dismiss()
        assert not controller.dialog.is_open

    def test_state_round_trips_through_store(self, backend, controller):
        _log_day(controller, OTHER_DAY)
        reloaded = AppState.from_store(TrainingStore(backend))
        assert reloaded.plan == _plan()
        assert reloaded.is_logged(OTHER_DAY)


# ===========================================================================
# Navigation
# ===========================================================================


class TestNavigation:
    def test_today_unlogged_opens_log_form(self, controller):
        assert controller.open_today() == LogEntry(TODAY)

    def test_today_logged_opens_detail(self, controller):
        controller.open_today()
        controller.submit_log(_fields())
        controller.dialog.dismiss()
        assert controller.view == Dashboard()
        assert controller.open_today() == Detail(TODAY)

    def test_open_today_only_from_dashboard(self, controller):
        controller.show_full_plan()
        with pytest.raises(RuntimeError):
            controller.open_today()

    def test_dated_actions_need_their_view(self, controller):
        controller.open_today()
        with pytest.raises(RuntimeError):
            controller.edit()
        with pytest.raises(RuntimeError):
            controller.request_delete()
        assert controller.view == LogEntry(TODAY)

    def test_full_plan_future_day(self, controller):
        controller.show_full_plan()
        assert controller.open_day(OTHER_DAY) == LogEntry(OTHER_DAY)
        assert controller.back() == FullPlan()

    def test_full_plan_past_day(self, controller):
        controller.show_full_plan()
        assert controller.open_day(START) == LogEntry(START)

    def test_full_plan_today_backs_to_dashboard(self, controller):
        controller.show_full_plan()
        controller.open_day(TODAY)
        assert controller.back() == Dashboard()

    def test_day_outside_plan_rejected(self, controller):
        controller.show_full_plan()
        with pytest.raises(ValueError):
            controller.open_day(date(2024, 1, 15))
        assert controller.view == FullPlan()

    def test_detail_edit_and_back(self, controller):
        _log_day(controller, OTHER_DAY)
        assert controller.view == FullPlan()
        assert controller.open_day(OTHER_DAY) == Detail(OTHER_DAY)
        assert controller.edit() == LogEntry(OTHER_DAY)
        assert controller.back() == FullPlan()

    def test_full_plan_back_to_dashboard(self, controller):
        controller.show_full_plan()
        assert controller.back() == Dashboard()

    def test_grid_reflects_logs(self, controller):
        _log_day(controller, OTHER_DAY)
        grid = controller.plan_grid()
        assert grid[1].cells[2].date == "2024-01-10"
        assert grid[1].cells[2].is_logged
        assert grid[0].cells[2].is_today


# ===========================================================================
# Log form
# ===========================================================================


class TestSubmitLog:
    def test_navigation_waits_for_acknowledgement(self, controller):
        controller.open_today()
        entry = controller.submit_log(_fields())

        assert entry is not None
        assert controller.view == LogEntry(TODAY)
        assert controller.dialog.dialog.title == "Success"
        assert "successfully logged" in controller.dialog.dialog.message

        controller.dialog.activate("Close")
        assert controller.view == Dashboard()

    def test_snapshot_of_planned_activity(self, controller):
        controller.open_today()
        entry = controller.submit_log(_fields())
        assert entry.planned_activity == "W1 Wed"

    def test_resubmit_overwrites_and_says_updated(self, controller):
        _log_day(controller, OTHER_DAY, distance="8")
        controller.open_day(OTHER_DAY)
        controller.edit()
        controller.submit_log(_fields(distance="12.5"))

        assert "successfully updated" in controller.dialog.dialog.message
        assert controller.entry_for(OTHER_DAY).log.distance_km == 12.5
        assert len(controller.state.logs) == 1

    def test_validation_blocks_before_mutation(self, controller, backend):
        controller.open_today()
        before = backend.get(LOGS_KEY)
        with pytest.raises(ValidationError):
            controller.submit_log(_fields(pace=""))
        assert controller.state.logs == {}
        assert backend.get(LOGS_KEY) == before
        assert controller.view == LogEntry(TODAY)
        assert not controller.dialog.is_open

    def test_storage_failure_is_one_notification(self):
        state = AppState(TrainingStore(FailingBackend()), plan=_plan())
        controller = ViewController(state, clock=lambda: TODAY)
        controller.open_today()

        assert controller.submit_log(_fields()) is None
        assert controller.dialog.dialog.title == "Storage Error"
        controller.dialog.dismiss()
        assert controller.view == LogEntry(TODAY)
        assert state.logs == {}

        controller.back()
        assert controller.open_today() == LogEntry(TODAY)


# ===========================================================================
# Delete confirmation
# ===========================================================================


class TestDeleteFlow:
    def _detail(self, controller) -> None:
        _log_day(controller, OTHER_DAY)
        controller.open_day(OTHER_DAY)

    def test_confirmation_swaps_actions(self, controller):
        self._detail(controller)
        controller.request_delete()
        assert controller.dialog.is_pending
        assert controller.dialog.dialog.labels() == ["Yes, Delete", "Cancel"]

    def test_cancel_keeps_log(self, controller):
        self._detail(controller)
        controller.request_delete()
        controller.dialog.activate("Cancel")

        assert controller.view == Detail(OTHER_DAY)
        assert controller.state.is_logged(OTHER_DAY)
        assert not controller.dialog.is_open
        assert not controller.dialog.is_pending

    def test_confirm_deletes_and_acknowledges(self, controller, backend):
        self._detail(controller)
        controller.request_delete()
        controller.dialog.activate("Yes, Delete")

        assert not controller.state.is_logged(OTHER_DAY)
        assert controller.position_for(OTHER_DAY).log is None
        assert "2024-01-10" not in backend.get(LOGS_KEY)
        assert controller.dialog.dialog.title == "Deleted"
        assert controller.dialog.dialog.labels() == ["Close"]
        assert not controller.dialog.is_pending
        assert controller.view == FullPlan()

    def test_delete_today_returns_to_dashboard(self, controller):
        controller.open_today()
        controller.submit_log(_fields())
        controller.dialog.dismiss()
        controller.open_today()
        controller.request_delete()
        controller.dialog.confirm()
        assert controller.view == Dashboard()

    def test_second_request_does_not_duplicate_actions(self, controller):
        self._detail(controller)
        controller.request_delete()
        controller.request_delete()
        labels = controller.dialog.dialog.labels()
        assert labels.count("Yes, Delete") == 1
        assert labels.count("Cancel") == 1

        controller.dialog.confirm()
        with pytest.raises(RuntimeError):
            controller.dialog.confirm()


class TestConfirmationFlow:
    def test_replacing_pending_drops_old_handler(self):
        calls: list[str] = []
        flow = ConfirmationFlow()
        flow.raise_confirmation("A", "first", lambda: calls.append("confirm A"), lambda: calls.append("cancel A"))
        flow.raise_confirmation("B", "second", lambda: calls.append("confirm B"), lambda: calls.append("cancel B"))
        flow.confirm()
        assert calls == ["confirm B"]
        assert not flow.is_pending

    def test_message_replaces_pending_confirmation(self):
        flow = ConfirmationFlow()
        flow.raise_confirmation("A", "first", lambda: None, lambda: None)
        flow.show_message("Note", "hello")
        assert not flow.is_pending
        assert flow.dialog.labels() == ["Close"]

    def test_dismiss_runs_callback_after_closing(self):
        seen: list[bool] = []
        flow = ConfirmationFlow()
        flow.show_message("Saved", "ok", on_dismiss=lambda: seen.append(flow.is_open))
        flow.dismiss()
        assert seen == [False]

    def test_dismiss_refused_while_pending(self):
        flow = ConfirmationFlow()
        flow.raise_confirmation("A", "first", lambda: None, lambda: None)
        with pytest.raises(RuntimeError):
            flow.dismiss()

    def test_unknown_action(self):
        flow = ConfirmationFlow()
        flow.show_message("Note", "hello")
        with pytest.raises(KeyError):
            flow.activate("Yes, Delete")


# ===========================================================================
# Import
# ===========================================================================


class TestImport:
    @pytest.fixture
    def empty(self, backend) -> ViewController:
        return ViewController(AppState(TrainingStore(backend)), clock=lambda: TODAY)

    def test_success_goes_to_dashboard(self, empty):
        assert empty.import_plan(CSV, START) == 2
        assert empty.view == Dashboard()
        assert "2 weeks" in empty.dialog.dialog.message
        assert empty.today_position().activity == "Intervals"

    def test_start_date_required(self, empty):
        with pytest.raises(ValidationError):
            empty.import_plan(CSV, None)

    def test_start_must_be_monday(self, empty):
        with pytest.raises(ValidationError):
            empty.import_plan(CSV, date(2024, 1, 2))
        assert empty.state.plan is None

    def test_unparsable_file_commits_nothing(self, empty, backend):
        assert empty.import_plan("Week,Mon\n", START) == 0
        assert empty.dialog.dialog.title == "Error"
        assert empty.view == Import()
        assert backend.get("schedule") is None

    def test_reimport_keeps_log_snapshots(self, controller):
        _log_day(controller, OTHER_DAY)
        controller.show_import()
        controller.import_plan(CSV, START)
        assert controller.position_for(OTHER_DAY).activity == "Tempo"
        assert controller.entry_for(OTHER_DAY).planned_activity == "W2 Wed"


# ===========================================================================
# Storage failures
# ===========================================================================


class TestStorageFailures:
    """A failed write shows one notification and leaves memory as it was."""

    def _entry(self, distance: float = 8.0) -> LoggedWorkoutEntry:
        return LoggedWorkoutEntry(
            planned_activity="W2 Wed",
            log=WorkoutLog(distance_km=distance, duration="00:42:00", pace="5:15"),
        )

    def _failing(self, **kwargs) -> ViewController:
        state = AppState(TrainingStore(FailingBackend()), **kwargs)
        return ViewController(state, clock=lambda: TODAY)

    def test_failed_update_keeps_previous_entry(self):
        controller = self._failing(plan=_plan(), logs={"2024-01-10": self._entry(8.0)})
        controller.show_full_plan()
        controller.open_day(OTHER_DAY)
        controller.edit()

        assert controller.submit_log(_fields(distance="15")) is None
        assert controller.dialog.dialog.title == "Storage Error"
        assert controller.entry_for(OTHER_DAY).log.distance_km == 8.0

    def test_failed_delete_keeps_log(self):
        controller = self._failing(plan=_plan(), logs={"2024-01-10": self._entry()})
        controller.show_full_plan()
        controller.open_day(OTHER_DAY)
        controller.request_delete()
        controller.dialog.activate("Yes, Delete")

        assert controller.dialog.dialog.title == "Storage Error"
        assert controller.dialog.dialog.labels() == ["Close"]
        assert not controller.dialog.is_pending
        assert controller.state.is_logged(OTHER_DAY)
        assert controller.view == Detail(OTHER_DAY)

    def test_failed_first_import_commits_nothing(self):
        controller = self._failing()

        assert controller.import_plan(CSV, START) == 0
        assert controller.dialog.dialog.title == "Storage Error"
        assert controller.state.plan is None
        assert controller.view == Import()

    def test_failed_reimport_keeps_current_plan(self):
        controller = self._failing(plan=_plan())
        controller.show_import()

        assert controller.import_plan(CSV, date(2024, 2, 5)) == 0
        assert controller.state.plan == _plan()
        assert controller.today_position().activity == "W1 Wed"
