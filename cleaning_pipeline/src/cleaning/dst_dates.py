"""
Daylight-saving transition dates (U.S. convention).

Clocks spring forward on the second Sunday of March and fall back on the
first Sunday of November. Wall-clock timestamps on those days are ambiguous,
so sessions starting on them are removed.
"""
from datetime import date, timedelta
from typing import FrozenSet

from .config import DST_FIRST_YEAR, DST_LAST_YEAR

SUNDAY = 6  # date.weekday()


def nth_sunday(year: int, month: int, n: int) -> date:
    """Return the n-th Sunday (1-based) of the given month."""
    first = date(year, month, 1)
    offset = (SUNDAY - first.weekday()) % 7
    return first + timedelta(days=offset, weeks=n - 1)


def dst_dates_for_year(year: int) -> tuple:
    """Return (spring_forward, fall_back) for one year."""
    return nth_sunday(year, 3, 2), nth_sunday(year, 11, 1)


def compute_dst_transition_dates(first_year: int = DST_FIRST_YEAR,
                                 last_year: int = DST_LAST_YEAR) -> FrozenSet[date]:
    """All transition dates for first_year..last_year inclusive."""
    dates = set()
    for year in range(first_year, last_year + 1):
        dates.update(dst_dates_for_year(year))
    return frozenset(dates)
