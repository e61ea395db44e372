"""
Plan indexing: map a calendar date onto a week/day cell of the schedule.

Week 1 starts on the plan's start date (a Monday), so a day offset of 0
is always the Monday column.  Dates before the start fall into
"Before Plan"; dates past the last imported week fall into "Week N+".
"""

from collections.abc import Mapping, Sequence
from datetime import date, timedelta

from .config import (
    AFTER_PLAN_ACTIVITY,
    BEFORE_PLAN_ACTIVITY,
    BEFORE_PLAN_WEEK,
    DAY_COLUMNS,
    DAYS_PER_WEEK,
    after_plan_week_label,
)
from .dates import days_between, format_date, weekday_name
from .models import LoggedWorkoutEntry, PlanCell, PlanGridRow, PlanPosition, ScheduleRow


def locate(
    target_date: date,
    start_date: date | None,
    plan: Sequence[ScheduleRow],
    logs: Mapping[str, LoggedWorkoutEntry] | None = None,
) -> PlanPosition:
    """
    Find the plan cell for target_date.

    Args:
        target_date: Calendar date to look up
        start_date: Monday of week 1, or None when no plan is loaded
        plan: Imported weeks in order
        logs: Logged workouts keyed by canonical date string

    Returns:
        PlanPosition; loaded=False when there is no plan or no start date
    """
    date_str = format_date(target_date)

    if start_date is None or not plan:
        return PlanPosition(loaded=False, date=date_str)

    day_offset = days_between(start_date, target_date)

    if day_offset < 0:
        return PlanPosition(
            loaded=True,
            date=date_str,
            week=BEFORE_PLAN_WEEK,
            day_name=weekday_name(target_date),
            activity=BEFORE_PLAN_ACTIVITY,
        )

    # day_index 0 is Monday because start_date is a Monday
    week_index, day_index = divmod(day_offset, DAYS_PER_WEEK)

    if week_index >= len(plan):
        return PlanPosition(
            loaded=True,
            date=date_str,
            week=after_plan_week_label(len(plan)),
            day_name=weekday_name(target_date),
            activity=AFTER_PLAN_ACTIVITY,
        )

    row = plan[week_index]
    day_name = DAY_COLUMNS[day_index]
    entry = logs.get(date_str) if logs else None

    return PlanPosition(
        loaded=True,
        date=date_str,
        week=row.week_label,
        day_name=day_name,
        activity=row.activity_for(day_name),
        log=entry.log if entry is not None else None,
        week_index=week_index,
        day_index=day_index,
    )


def cell_date(start_date: date, week_index: int, day_index: int) -> date:
    """Calendar date of a grid cell (inverse of locate for in-plan dates)."""
    return start_date + timedelta(days=week_index * DAYS_PER_WEEK + day_index)


def plan_end_date(start_date: date, plan: Sequence[ScheduleRow]) -> date:
    """Last calendar day covered by the plan (the final Sunday)."""
    if not plan:
        raise ValueError("plan is empty")
    return cell_date(start_date, len(plan) - 1, DAYS_PER_WEEK - 1)


def is_in_plan(target_date: date, start_date: date, plan: Sequence[ScheduleRow]) -> bool:
    """True if target_date lies within [start_date, plan_end_date]."""
    if not plan:
        return False
    return start_date <= target_date <= plan_end_date(start_date, plan)


def build_plan_grid(
    start_date: date,
    plan: Sequence[ScheduleRow],
    logs: Mapping[str, LoggedWorkoutEntry],
    today: date,
) -> list[PlanGridRow]:
    """
    Lay the whole plan out as week rows of dated cells.

    Args:
        start_date: Monday of week 1
        plan: Imported weeks
        logs: Logged workouts keyed by canonical date string
        today: Date to highlight

    Returns:
        One PlanGridRow per week, cells in Mon..Sun order
    """
    rows: list[PlanGridRow] = []
    for week_index, week in enumerate(plan):
        grid_row = PlanGridRow(week_label=week.week_label)
        for day_index, day_name in enumerate(DAY_COLUMNS):
            d = cell_date(start_date, week_index, day_index)
            d_str = format_date(d)
            grid_row.cells.append(
                PlanCell(
                    date=d_str,
                    week_index=week_index,
                    day_index=day_index,
                    day_name=day_name,
                    activity=week.activity_for(day_name),
                    is_today=d == today,
                    is_logged=d_str in logs,
                )
            )
        rows.append(grid_row)
    return rows
