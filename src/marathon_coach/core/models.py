"""
Data models for marathon-coach.

Core dataclasses for the imported schedule, the plan built from it and the
workouts the user logs against calendar days.
"""

from dataclasses import dataclass, field
from datetime import date

from .config import DAY_COLUMNS


@dataclass(frozen=True)
class ScheduleRow:
    """
    One imported week of the schedule.

    activities maps every label in DAY_COLUMNS to the planned activity text.
    """

    week_label: str
    activities: dict[str, str]

    def __post_init__(self) -> None:
        """Validate that exactly the seven day labels are present."""
        if set(self.activities) != set(DAY_COLUMNS):
            raise ValueError(
                f"activities must have exactly the keys {', '.join(DAY_COLUMNS)}"
            )

    def activity_for(self, day_label: str) -> str:
        return self.activities[day_label]


@dataclass(frozen=True)
class TrainingPlan:
    """
    An imported schedule anchored at a start date (Monday of week 1).

    Holding both together keeps "schedule without start date" unrepresentable.
    """

    start_date: date
    weeks: tuple[ScheduleRow, ...]

    def __len__(self) -> int:
        return len(self.weeks)


@dataclass
class WorkoutLog:
    """What the user actually did on a given day."""

    distance_km: float
    duration: str  # HH:MM:SS
    pace: str  # free text, e.g. "5:15" min/km
    avg_heart_rate: int | None = None
    external_link: str | None = None

    def __post_init__(self) -> None:
        """Validate log data."""
        if self.distance_km < 0:
            raise ValueError("distance_km must be non-negative")
        if self.avg_heart_rate is not None and self.avg_heart_rate <= 0:
            raise ValueError("avg_heart_rate must be positive")


@dataclass
class LoggedWorkoutEntry:
    """
    A workout log plus the planned activity text captured at log time.

    The snapshot keeps historical display stable if the plan is re-imported.
    """

    planned_activity: str
    log: WorkoutLog


@dataclass
class PlanPosition:
    """
    Where a calendar date falls in the plan.

    week_index/day_index are set only when the date lies inside the plan.
    """

    loaded: bool
    date: str
    week: str | None = None
    day_name: str | None = None
    activity: str | None = None
    log: WorkoutLog | None = None
    week_index: int | None = None
    day_index: int | None = None

    @property
    def in_plan(self) -> bool:
        return self.week_index is not None

    @property
    def is_logged(self) -> bool:
        return self.log is not None


@dataclass
class PlanCell:
    """One day of the full-plan grid."""

    date: str
    week_index: int
    day_index: int
    day_name: str
    activity: str
    is_today: bool = False
    is_logged: bool = False


@dataclass
class PlanGridRow:
    """One week of the full-plan grid."""

    week_label: str
    cells: list[PlanCell] = field(default_factory=list)
