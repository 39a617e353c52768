"""
Improbable gap detection.

A participant whose phone reports nothing for more than GAP_THRESHOLD_HOURS
between two consecutive sessions most likely had the logger stopped. The
calendar days on both sides of such a gap are incomplete and get removed.

Two passes:
  1. find_gap_days() builds the set of (participant_id, date) pairs to drop
  2. exclude_gap_days() filters sessions against that set
"""
import logging
from typing import Optional, Set, Tuple

import pandas as pd

from core.errors import require_columns
from .config import GAP_THRESHOLD_HOURS
from .ordering import sort_events

logger = logging.getLogger(__name__)


def find_gap_days(sessions: pd.DataFrame,
                  gap_threshold_hours: float = GAP_THRESHOLD_HOURS) -> pd.DataFrame:
    """
    Find the boundary days of every gap longer than the threshold.

    For each participant, sessions are ordered by start; for every consecutive
    pair the gap is next.start - current.end. The date of current.end and the
    date of next.start are both marked.

    Args:
        sessions: Sessions with participant_id, start_datetime, end_datetime
        gap_threshold_hours: Gaps strictly longer than this are improbable

    Returns:
        DataFrame of distinct (participant_id, date) pairs
    """
    require_columns(sessions, ['participant_id', 'start_datetime', 'end_datetime'], 'find_gap_days')

    ordered = sort_events(sessions)
    next_start = ordered.groupby('participant_id', sort=False)['start_datetime'].shift(-1)
    gap_hours = (next_start - ordered['end_datetime']).dt.total_seconds() / 3600

    # NaN gap (last session of a participant) compares False
    is_gap = gap_hours > gap_threshold_hours

    before = pd.DataFrame({
        'participant_id': ordered.loc[is_gap, 'participant_id'],
        'date': ordered.loc[is_gap, 'end_datetime'].dt.date,
    })
    after = pd.DataFrame({
        'participant_id': ordered.loc[is_gap, 'participant_id'],
        'date': next_start[is_gap].dt.date,
    })

    return pd.concat([before, after], ignore_index=True).drop_duplicates().reset_index(drop=True)


def exclude_gap_days(sessions: pd.DataFrame, gap_days: pd.DataFrame) -> pd.DataFrame:
    """
    Drop every session whose (participant_id, date) is a gap boundary day.

    Uses the session's stored 'date' column (date of its first fragment's
    start), not a date recomputed from end_datetime.

    Returns:
        New DataFrame without the excluded sessions
    """
    require_columns(sessions, ['participant_id', 'date'], 'exclude_gap_days')

    excluded: Set[tuple] = set(zip(gap_days['participant_id'], gap_days['date']))
    if not excluded:
        return sessions.reset_index(drop=True)

    keep = pd.Series(
        [(participant, day) not in excluded
         for participant, day in zip(sessions['participant_id'], sessions['date'])],
        index=sessions.index,
        dtype=bool,
    )
    return sessions[keep].reset_index(drop=True)


def remove_gap_days(
    sessions: pd.DataFrame,
    gap_threshold_hours: float = GAP_THRESHOLD_HOURS,
    logger: Optional[logging.Logger] = logger,
) -> Tuple[pd.DataFrame, dict]:
    """
    Find improbable gaps and remove the days that border them.

    Returns:
        (filtered, stats)
    """
    gap_days = find_gap_days(sessions, gap_threshold_hours)
    filtered = exclude_gap_days(sessions, gap_days)

    stats = {
        'gap_threshold_hours': gap_threshold_hours,
        'excluded_day_count': len(gap_days),
        'participants_affected': int(gap_days['participant_id'].nunique()),
        'dropped_count': len(sessions) - len(filtered),
        'kept_count': len(filtered),
    }

    if logger:
        logger.info(
            f"[Gaps] {stats['excluded_day_count']} participant-days border gaps > "
            f"{gap_threshold_hours}h ({stats['participants_affected']} participants), "
            f"dropped {stats['dropped_count']} sessions"
        )

    return filtered, stats
