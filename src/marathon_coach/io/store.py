"""
Key-value persistence for the schedule, start date and workout logs.

Three independent records are kept under fixed keys:
- "schedule":   JSON list of week rows
- "start_date": plain YYYY-MM-DD string
- "logs":       JSON object keyed by date

Loading is best effort: a corrupt record is treated as absent and
reported in LoadResult.problems so the caller can notify the user once.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from ..core.config import LOGS_KEY, SCHEDULE_KEY, START_DATE_KEY
from ..core.dates import format_date, parse_date
from ..core.errors import FormatError, PersistenceError
from ..core.models import LoggedWorkoutEntry, TrainingPlan
from .serializers import logs_from_json, logs_to_json, schedule_from_json, schedule_to_json

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal string key-value storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-memory key-value store."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class DirectoryStore:
    """
    Key-value store with one UTF-8 file per key inside a directory.

    The directory is created on first write.
    """

    def __init__(self, root: str | Path):
        """
        Initialize the store.

        Args:
            root: Directory holding the record files
        """
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        return self.root / key

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Could not read {path}: {e}", key=key) from e

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp = path.with_name(path.name + ".tmp")
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            os.replace(tmp, path)
        except OSError as e:
            raise PersistenceError(f"Could not write {path}: {e}", key=key) from e


@dataclass
class LoadResult:
    """Everything read at startup, plus any records that had to be dropped."""

    plan: TrainingPlan | None = None
    logs: dict[str, LoggedWorkoutEntry] = field(default_factory=dict)
    problems: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.problems


class TrainingStore:
    """Load/save gateway between the app state and a KeyValueStore."""

    def __init__(self, backend: KeyValueStore):
        self.backend = backend

    def _read(self, key: str, problems: list[str]) -> str | None:
        try:
            return self.backend.get(key)
        except PersistenceError as e:
            logger.warning("Could not read %s record: %s", key, e)
            problems.append(str(e))
            return None

    def load(self) -> LoadResult:
        """
        Load schedule, start date and logs.

        Never raises.  A schedule without a start date (or the reverse) is
        treated as no plan; a missing log record is an empty map.

        Returns:
            LoadResult with the recovered plan/logs and a list of problems
        """
        result = LoadResult()

        schedule_raw = self._read(SCHEDULE_KEY, result.problems)
        start_raw = self._read(START_DATE_KEY, result.problems)
        logs_raw = self._read(LOGS_KEY, result.problems)

        weeks = None
        if schedule_raw is not None:
            try:
                weeks = schedule_from_json(schedule_raw)
            except FormatError as e:
                logger.warning("Discarding corrupt schedule record: %s", e)
                result.problems.append(f"schedule: {e}")

        start = None
        if start_raw is not None:
            try:
                start = parse_date(start_raw.strip())
            except FormatError as e:
                logger.warning("Discarding corrupt start date record: %s", e)
                result.problems.append(f"start date: {e}")

        if weeks and start is not None:
            result.plan = TrainingPlan(start_date=start, weeks=tuple(weeks))
        elif weeks or start is not None:
            logger.info("Schedule and start date are not both present; plan not loaded")

        if logs_raw is not None:
            try:
                result.logs = logs_from_json(logs_raw)
            except FormatError as e:
                logger.warning("Discarding corrupt log record: %s", e)
                result.problems.append(f"logs: {e}")

        return result

    def save_schedule(self, plan: TrainingPlan, logs: dict[str, LoggedWorkoutEntry]) -> None:
        """
        Persist schedule and start date, then re-save the logs.

        Re-saving the logs means a fresh install ends up with a well-formed
        empty log record instead of a missing key.

        Raises:
            PersistenceError: If any write fails
        """
        self.backend.set(SCHEDULE_KEY, schedule_to_json(plan.weeks))
        self.backend.set(START_DATE_KEY, format_date(plan.start_date))
        self.save_logs(logs)

    def save_logs(self, logs: dict[str, LoggedWorkoutEntry]) -> None:
        """
        Persist only the log map.

        Raises:
            PersistenceError: If the write fails
        """
        self.backend.set(LOGS_KEY, logs_to_json(logs))


def get_default_store(data_dir: str | Path) -> TrainingStore:
    """Get a TrainingStore backed by files in data_dir."""
    return TrainingStore(DirectoryStore(data_dir))
