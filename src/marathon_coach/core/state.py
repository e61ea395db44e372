"""
Process-wide application state.

AppState is built once from the persistence gateway and mutated only
through its methods, each of which writes the affected records to
storage before changing anything in memory.
"""

import logging
from datetime import date

from ..io.store import TrainingStore
from .dates import format_date
from .indexer import locate
from .models import LoggedWorkoutEntry, PlanPosition, TrainingPlan, WorkoutLog

logger = logging.getLogger(__name__)


class AppState:
    """
    Loaded plan and logs for the single local user.

    Attributes:
        store: Persistence gateway
        plan: Imported plan, or None before the first import
        logs: Logged workouts keyed by canonical date string
        load_problems: Records dropped at startup (reported once to the user)
    """

    def __init__(
        self,
        store: TrainingStore,
        plan: TrainingPlan | None = None,
        logs: dict[str, LoggedWorkoutEntry] | None = None,
        load_problems: list[str] | None = None,
    ):
        self.store = store
        self.plan = plan
        self.logs: dict[str, LoggedWorkoutEntry] = logs if logs is not None else {}
        self.load_problems: list[str] = load_problems or []

    @classmethod
    def from_store(cls, store: TrainingStore) -> "AppState":
        """Build state from whatever the store holds (empty on a fresh install)."""
        loaded = store.load()
        if not loaded.ok:
            logger.warning("Started with %d unreadable record(s)", len(loaded.problems))
        return cls(store, plan=loaded.plan, logs=loaded.logs, load_problems=loaded.problems)

    @property
    def has_plan(self) -> bool:
        return self.plan is not None and len(self.plan) > 0

    @property
    def start_date(self) -> date | None:
        return self.plan.start_date if self.plan is not None else None

    def locate(self, target: date) -> PlanPosition:
        """Plan position for a date, with its log attached if there is one."""
        weeks = self.plan.weeks if self.plan is not None else ()
        return locate(target, self.start_date, weeks, self.logs)

    def is_logged(self, target: date) -> bool:
        return format_date(target) in self.logs

    def get_entry(self, target: date) -> LoggedWorkoutEntry | None:
        return self.logs.get(format_date(target))

    def replace_plan(self, plan: TrainingPlan) -> None:
        """
        Replace the plan wholesale and persist it (logs are re-saved too).

        Raises:
            PersistenceError: If storage fails; the current plan is kept
        """
        self.store.save_schedule(plan, self.logs)
        self.plan = plan
        logger.info("Plan replaced: %d week(s) from %s", len(plan), format_date(plan.start_date))

    def upsert_log(self, target: date, log: WorkoutLog) -> LoggedWorkoutEntry:
        """
        Record a workout for a date, overwriting any previous entry.

        The planned activity text is snapshotted from the current plan.

        Returns:
            The stored entry

        Raises:
            PersistenceError: If storage fails; in-memory logs are unchanged
        """
        key = format_date(target)
        position = self.locate(target)
        entry = LoggedWorkoutEntry(
            planned_activity=position.activity or "N/A",
            log=log,
        )
        self.store.save_logs({**self.logs, key: entry})
        self.logs[key] = entry
        return entry

    def delete_log(self, target: date) -> bool:
        """
        Remove the log for a date.

        Returns:
            True if an entry was removed

        Raises:
            PersistenceError: If storage fails; the entry is kept
        """
        key = format_date(target)
        if key not in self.logs:
            return False
        self.store.save_logs({k: v for k, v in self.logs.items() if k != key})
        del self.logs[key]
        logger.info("Deleted log for %s", key)
        return True
