"""Exception hierarchy for the training tracker."""

from __future__ import annotations


class TrackerError(Exception):
    """Base exception for all marathon-coach errors."""


class FormatError(TrackerError):
    """A date string or persisted record could not be parsed."""


class ScheduleImportError(TrackerError):
    """A schedule file produced no usable weeks (empty, header only, all rows malformed)."""


class ValidationError(TrackerError):
    """User input failed validation; nothing was changed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class PersistenceError(TrackerError):
    """The key-value store could not be read or written."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key
