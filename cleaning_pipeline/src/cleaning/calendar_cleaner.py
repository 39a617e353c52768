"""
Boundary and calendar cleaning - the last stage before export.

Steps, in order:
  1. drop sessions without an end time
  2. move ends within the midnight second (00:00:00.xxx) to 23:59:59.999 of
     the previous day
  3. drop sessions that still span two calendar days
  4. drop each participant's first and last observed day (partial days)
  5. recompute duration_secs from the (corrected) timestamps
  6. drop sessions starting on a DST transition date
"""
import logging
from datetime import date
from typing import Iterable, Optional, Tuple

import pandas as pd

from core.errors import require_columns
from .config import OUTPUT_COLUMNS
from .ordering import sort_events

logger = logging.getLogger(__name__)

# Subtracted from midnight to give the corrected end (23:59:59.999)
MIDNIGHT_ADJUSTMENT = pd.Timedelta(milliseconds=1)

_REQUIRED_COLUMNS = [
    'participant_id', 'app_full_name', 'app_title',
    'start_datetime', 'end_datetime', 'fragment_count',
]


def correct_midnight_ends(end: pd.Series) -> pd.Series:
    """
    Replace ends at 00:00:00 with 23:59:59.999 of the day before.

    Compared at second resolution: 00:00:00.250 is corrected too.
    """
    midnight = end.dt.normalize()
    at_midnight = end.dt.floor('s') == midnight
    return end.where(~at_midnight, midnight - MIDNIGHT_ADJUSTMENT)


def _empty_output() -> pd.DataFrame:
    return pd.DataFrame({
        'participant_id': pd.Series(dtype=object),
        'app_full_name': pd.Series(dtype=object),
        'app_title': pd.Series(dtype=object),
        'start_datetime': pd.Series(dtype='datetime64[ns]'),
        'end_datetime': pd.Series(dtype='datetime64[ns]'),
        'duration_secs': pd.Series(dtype=float),
        'fragment_count': pd.Series(dtype=int),
    })


def clean_boundaries(
    sessions: pd.DataFrame,
    dst_dates: Iterable[date],
    logger: Optional[logging.Logger] = logger,
) -> Tuple[pd.DataFrame, dict]:
    """
    Apply midnight correction, day-boundary, first/last-day and DST cleaning.

    Args:
        sessions: Gap-cleaned sessions
        dst_dates: Calendar dates of DST transitions to exclude

    Returns:
        (cleaned, stats) - cleaned holds OUTPUT_COLUMNS sorted by
        (participant_id, start_datetime)
    """
    require_columns(sessions, _REQUIRED_COLUMNS, 'clean_boundaries')

    df = sessions[sessions['end_datetime'].notna()].copy()
    missing_end = len(sessions) - len(df)

    corrected_end = correct_midnight_ends(df['end_datetime'])
    midnight_corrected = int((corrected_end != df['end_datetime']).sum())
    df['end_datetime'] = corrected_end

    df['start_day'] = df['start_datetime'].dt.normalize()
    df['end_day'] = df['end_datetime'].dt.normalize()

    same_day = df['start_day'] == df['end_day']
    multi_day = int((~same_day).sum())
    df = df[same_day]

    # First/last observed day per participant, after the multi-day drop
    first_day = df.groupby('participant_id')['start_day'].transform('min')
    last_day = df.groupby('participant_id')['end_day'].transform('max')
    on_first_day = df['start_day'] == first_day
    on_last_day = df['end_day'] == last_day
    df = df[~on_first_day & ~on_last_day].copy()

    df['duration_secs'] = (df['end_datetime'] - df['start_datetime']).dt.total_seconds().round(1)

    transition_days = pd.to_datetime(sorted(dst_dates))
    on_dst = df['start_day'].isin(transition_days)
    df = df[~on_dst]

    cleaned = sort_events(df[OUTPUT_COLUMNS]) if len(df) > 0 else _empty_output()

    stats = {
        'missing_end_count': missing_end,
        'midnight_corrected_count': midnight_corrected,
        'multi_day_count': multi_day,
        'first_day_count': int(on_first_day.sum()),
        'last_day_count': int(on_last_day.sum()),
        'boundary_dropped_count': int((on_first_day | on_last_day).sum()),
        'dst_dropped_count': int(on_dst.sum()),
        'kept_count': len(cleaned),
    }

    if logger:
        logger.info(
            f"[Calendar] midnight-corrected {midnight_corrected}, dropped "
            f"{missing_end} without end, {multi_day} multi-day, "
            f"{stats['boundary_dropped_count']} on first/last days, "
            f"{stats['dst_dropped_count']} on DST dates -> {len(cleaned)} rows"
        )

    return cleaned, stats
