"""
JSON serialization for training data models.

Handles conversion between dataclasses and JSON-compatible dicts, plus
validation of user-entered log fields.
"""

import json
import re
from typing import Any
from urllib.parse import urlparse

from ..core.config import DAY_COLUMNS, WEEK_COLUMN
from ..core.dates import is_valid_date
from ..core.errors import FormatError, ValidationError
from ..core.models import LoggedWorkoutEntry, ScheduleRow, WorkoutLog

_DURATION_RE = re.compile(r"^(\d{1,3}):([0-5]\d):([0-5]\d)$")


# =============================================================================
# USER INPUT VALIDATION
# =============================================================================


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_duration(duration: str) -> str:
    """
    Validate an HH:MM:SS duration.

    Raises:
        ValidationError: If the format is wrong or minutes/seconds exceed 59
    """
    duration = duration.strip()
    if not _DURATION_RE.match(duration):
        raise ValidationError(
            f"Invalid time: {duration!r}. Expected HH:MM:SS, e.g. 00:45:30", field="duration"
        )
    return duration


def validate_link(link: str) -> str:
    """
    Validate an optional activity link (http/https URL).

    Raises:
        ValidationError: If the link is not an absolute http(s) URL
    """
    link = link.strip()
    parsed = urlparse(link)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(f"Invalid link: {link!r}. Expected an http(s) URL", field="external_link")
    return link


def build_workout_log(
    distance: float | str | None,
    duration: str | None,
    pace: str | None,
    avg_heart_rate: int | str | None = None,
    external_link: str | None = None,
) -> WorkoutLog:
    """
    Build a WorkoutLog from raw form values.

    Distance, time and pace are required.  Heart rate is optional; blank or
    zero means "not recorded".  The link is optional.

    Raises:
        ValidationError: On the first missing or invalid field
    """
    if _blank(distance):
        raise ValidationError("Distance is required", field="distance")
    if _blank(duration):
        raise ValidationError("Time is required", field="duration")
    if _blank(pace):
        raise ValidationError("Pace is required", field="pace")

    try:
        distance_km = float(distance)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid distance: {distance!r}", field="distance") from e
    if distance_km < 0 or distance_km != distance_km:
        raise ValidationError(f"Distance must be non-negative, got {distance}", field="distance")

    hr: int | None = None
    if not _blank(avg_heart_rate):
        try:
            hr = int(avg_heart_rate)  # type: ignore[arg-type]
        except (TypeError, ValueError) as e:
            raise ValidationError(
                f"Invalid heart rate: {avg_heart_rate!r}", field="avg_heart_rate"
            ) from e
        if hr < 0:
            raise ValidationError(f"Heart rate must be positive, got {hr}", field="avg_heart_rate")
        if hr == 0:
            hr = None

    link = None if _blank(external_link) else validate_link(external_link)  # type: ignore[arg-type]

    return WorkoutLog(
        distance_km=distance_km,
        duration=validate_duration(duration),  # type: ignore[arg-type]
        pace=pace.strip(),  # type: ignore[union-attr]
        avg_heart_rate=hr,
        external_link=link,
    )


# =============================================================================
# SCHEDULE
# =============================================================================


def schedule_row_to_dict(row: ScheduleRow) -> dict[str, str]:
    """
    Convert ScheduleRow to a flat dict keyed like the import header.

    Args:
        row: ScheduleRow to convert

    Returns:
        {"Week": ..., "Mon": ..., ..., "Sun": ...}
    """
    d = {WEEK_COLUMN: row.week_label}
    for day in DAY_COLUMNS:
        d[day] = row.activities[day]
    return d


def dict_to_schedule_row(data: Any) -> ScheduleRow:
    """
    Convert dict to ScheduleRow.

    Raises:
        FormatError: If a column is missing or not a string
    """
    if not isinstance(data, dict):
        raise FormatError(f"Schedule row must be an object, got {type(data).__name__}")
    for key in (WEEK_COLUMN, *DAY_COLUMNS):
        if not isinstance(data.get(key), str):
            raise FormatError(f"Schedule row is missing column {key!r}")
    return ScheduleRow(
        week_label=data[WEEK_COLUMN],
        activities={day: data[day] for day in DAY_COLUMNS},
    )


def schedule_to_json(rows: tuple[ScheduleRow, ...] | list[ScheduleRow]) -> str:
    return json.dumps([schedule_row_to_dict(r) for r in rows], indent=2)


def schedule_from_json(text: str) -> list[ScheduleRow]:
    """
    Parse a persisted schedule record.

    Raises:
        FormatError: If the JSON is invalid or any row is malformed
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise FormatError(f"Schedule record is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise FormatError("Schedule record must be a list of rows")
    return [dict_to_schedule_row(item) for item in data]


# =============================================================================
# WORKOUT LOGS
# =============================================================================


def workout_log_to_dict(log: WorkoutLog) -> dict[str, Any]:
    """
    Convert WorkoutLog to JSON-compatible dict.

    Optional fields are written as null so the record shape is stable.
    """
    return {
        "distance_km": log.distance_km,
        "duration": log.duration,
        "pace": log.pace,
        "avg_heart_rate": log.avg_heart_rate,
        "external_link": log.external_link,
    }


def dict_to_workout_log(data: Any) -> WorkoutLog:
    """
    Convert dict to WorkoutLog.

    Raises:
        FormatError: If a field is missing or has the wrong type
    """
    if not isinstance(data, dict):
        raise FormatError("Workout log must be an object")
    try:
        hr = data.get("avg_heart_rate")
        return WorkoutLog(
            distance_km=float(data["distance_km"]),
            duration=str(data["duration"]),
            pace=str(data["pace"]),
            avg_heart_rate=int(hr) if hr is not None else None,
            external_link=data.get("external_link") or None,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise FormatError(f"Invalid workout log: {e}") from e


def logged_entry_to_dict(entry: LoggedWorkoutEntry) -> dict[str, Any]:
    return {
        "planned_activity": entry.planned_activity,
        "log": workout_log_to_dict(entry.log),
    }


def dict_to_logged_entry(data: Any) -> LoggedWorkoutEntry:
    """
    Convert dict to LoggedWorkoutEntry.

    Raises:
        FormatError: If the entry or its log is malformed
    """
    if not isinstance(data, dict) or "log" not in data:
        raise FormatError("Logged workout must be an object with a 'log' field")
    return LoggedWorkoutEntry(
        planned_activity=str(data.get("planned_activity") or "N/A"),
        log=dict_to_workout_log(data["log"]),
    )


def logs_to_json(logs: dict[str, LoggedWorkoutEntry]) -> str:
    """Serialize the log map with keys in date order."""
    return json.dumps(
        {d: logged_entry_to_dict(logs[d]) for d in sorted(logs)},
        indent=2,
    )


def logs_from_json(text: str) -> dict[str, LoggedWorkoutEntry]:
    """
    Parse a persisted log map.

    Raises:
        FormatError: If the JSON is invalid, a key is not a canonical date,
            or any entry is malformed
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise FormatError(f"Log record is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise FormatError("Log record must be an object keyed by date")

    logs: dict[str, LoggedWorkoutEntry] = {}
    for date_str, item in data.items():
        if not is_valid_date(date_str):
            raise FormatError(f"Log record has invalid date key {date_str!r}")
        logs[date_str] = dict_to_logged_entry(item)
    return logs
