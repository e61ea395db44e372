"""
Delimited-text schedule importer.

Expected layout (column order after the header is free):

    Week,Mon,Tue,Wed,Thu,Fri,Sat,Sun
    Week 1,Rest,5k easy,Intervals,Rest,5k easy,Rest,10k long

Known limitation: there is no quoting or escaping.  A cell that contains
the delimiter shifts the columns of its row; such a row then has the
wrong number of cells and is skipped.
"""

import logging
from datetime import date

from .config import DAY_COLUMNS, DEFAULT_DELIMITER, WEEK_COLUMN
from .errors import ScheduleImportError
from .models import ScheduleRow, TrainingPlan

logger = logging.getLogger(__name__)


def _valid_header(headers: list[str]) -> bool:
    """Header must be Week plus exactly the seven day labels, in any order."""
    expected = {WEEK_COLUMN, *DAY_COLUMNS}
    return len(headers) == len(expected) and set(headers) == expected


def parse_schedule(text: str, delimiter: str = DEFAULT_DELIMITER) -> list[ScheduleRow]:
    """
    Parse schedule text into week rows.

    Never raises on bad content: empty input, header-only input or an
    unrecognized header give an empty list, and rows whose cell count
    differs from the header are skipped.

    Args:
        text: File contents
        delimiter: Cell separator

    Returns:
        ScheduleRow list in file order
    """
    lines = [line for line in text.strip().splitlines() if line.strip()]
    if len(lines) < 2:
        logger.debug("Schedule has %d non-blank line(s); need header + rows", len(lines))
        return []

    headers = [h.strip() for h in lines[0].split(delimiter)]
    if not _valid_header(headers):
        logger.debug("Unrecognized schedule header: %s", headers)
        return []

    rows: list[ScheduleRow] = []
    for line_num, line in enumerate(lines[1:], 2):
        values = [v.strip() for v in line.split(delimiter)]
        if len(values) != len(headers):
            logger.debug(
                "Skipping line %d: %d cells, header has %d", line_num, len(values), len(headers)
            )
            continue

        cells = dict(zip(headers, values))
        rows.append(
            ScheduleRow(
                week_label=cells[WEEK_COLUMN],
                activities={day: cells[day] for day in DAY_COLUMNS},
            )
        )

    return rows


def import_schedule(
    text: str,
    start_date: date,
    delimiter: str = DEFAULT_DELIMITER,
) -> TrainingPlan:
    """
    Build a TrainingPlan from schedule text.

    Raises:
        ScheduleImportError: If no valid week rows were found
    """
    rows = parse_schedule(text, delimiter)
    if not rows:
        raise ScheduleImportError("The schedule file was empty or could not be parsed.")
    logger.info("Parsed %d week(s) from schedule", len(rows))
    return TrainingPlan(start_date=start_date, weeks=tuple(rows))
