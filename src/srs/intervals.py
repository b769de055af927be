"""Review interval policy: how far a level pushes the next review."""

from datetime import date, timedelta
from typing import Mapping, Optional

import structlog

from shared_types import ProficiencyLevel

logger = structlog.get_logger()

DATE_FORMAT = "%Y-%m-%d"

# Days until the next review, counted from the review (or creation) date
DEFAULT_INTERVALS: dict[ProficiencyLevel, int] = {
    ProficiencyLevel.AGAIN: 1,
    ProficiencyLevel.HARD: 3,
    ProficiencyLevel.GOOD: 7,
    ProficiencyLevel.EASY: 30,
}


def today_iso(today: Optional[date] = None) -> str:
    """Return today's date (or the given one) as YYYY-MM-DD."""
    return (today or date.today()).strftime(DATE_FORMAT)


def calculate_next_review(
    current_date: str,
    level: ProficiencyLevel,
    intervals: Optional[Mapping[ProficiencyLevel, int]] = None,
) -> str:
    """Calculate the next review date for a level.

    Args:
        current_date: Reference date as YYYY-MM-DD. Unparseable values fall
            back to today.
        level: Level the problem is (re)assigned.
        intervals: Optional override of the day counts per level.

    Returns:
        Next review date as YYYY-MM-DD
    """
    table = intervals or DEFAULT_INTERVALS
    try:
        start = date.fromisoformat(current_date)
    except (TypeError, ValueError):
        logger.warning("invalid_reference_date", value=current_date)
        start = date.today()

    days = table.get(level, DEFAULT_INTERVALS[level])
    return (start + timedelta(days=days)).strftime(DATE_FORMAT)
