"""
Configuration constants for the training tracker.

Fixed labels, storage keys and defaults are centralized here.
User-adjustable settings are loaded by settings.py.
"""

from pathlib import Path
from typing import Final

# =============================================================================
# SCHEDULE LAYOUT
# =============================================================================

# Canonical day order, independent of locale and of the column order in the file
DAY_COLUMNS: Final[tuple[str, ...]] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
WEEK_COLUMN: Final[str] = "Week"
DAYS_PER_WEEK: Final[int] = 7

DEFAULT_DELIMITER: Final[str] = ","

# =============================================================================
# PLAN POSITION LABELS
# =============================================================================

BEFORE_PLAN_WEEK: Final[str] = "Before Plan"
BEFORE_PLAN_ACTIVITY: Final[str] = "Plan Not Started"
AFTER_PLAN_ACTIVITY: Final[str] = "Plan Finished"


def after_plan_week_label(plan_weeks: int) -> str:
    """Week label shown once the plan has run out, e.g. 'Week 25+'."""
    return f"Week {plan_weeks + 1}+"


# =============================================================================
# PERSISTENCE KEYS
# =============================================================================

SCHEDULE_KEY: Final[str] = "schedule"
START_DATE_KEY: Final[str] = "start_date"
LOGS_KEY: Final[str] = "logs"

# =============================================================================
# DIALOG LABELS
# =============================================================================

DISMISS_LABEL: Final[str] = "Close"
CONFIRM_DELETE_LABEL: Final[str] = "Yes, Delete"
CANCEL_LABEL: Final[str] = "Cancel"

# Answer that empties an optional log field when editing
CLEAR_ANSWER: Final[str] = "-"

# =============================================================================
# DEFAULTS
# =============================================================================

APP_DIR_NAME: Final[str] = ".marathon-coach"
HOME_ENV_VAR: Final[str] = "MARATHON_COACH_HOME"
CONFIG_FILE_NAME: Final[str] = "config.yaml"
DEFAULT_LOG_LEVEL: Final[str] = "WARNING"


def default_home() -> Path:
    """Return ~/.marathon-coach (not created)."""
    return Path.home() / APP_DIR_NAME
