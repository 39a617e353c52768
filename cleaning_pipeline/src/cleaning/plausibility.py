"""
Plausibility filtering of merged sessions.

Two independent rules, either one drops a session:
  - denylisted app running longer than DENYLIST_DURATION_SECONDS
  - any session lasting LONG_DURATION_SECONDS or more, denylisted or not
"""
import logging
from typing import Iterable, Optional, Tuple

import pandas as pd

from core.errors import require_columns
from .config import DENYLISTED_APPS, LONG_DURATION_SECONDS, DENYLIST_DURATION_SECONDS

logger = logging.getLogger(__name__)


def _empty_plausibility_stats(long_duration_seconds: float, denylist_duration_seconds: float) -> dict:
    """Return empty plausibility stats structure."""
    return {
        'long_duration_threshold': long_duration_seconds,
        'denylist_duration_threshold': denylist_duration_seconds,
        'long_running_count': 0,
        'denylist_over_threshold_count': 0,
        'dropped_count': 0,
        'kept_count': 0,
        'denylist_by_app': {},
    }


def filter_implausible_sessions(
    sessions: pd.DataFrame,
    denylist: Iterable[str] = DENYLISTED_APPS,
    long_duration_seconds: float = LONG_DURATION_SECONDS,
    denylist_duration_seconds: float = DENYLIST_DURATION_SECONDS,
    logger: Optional[logging.Logger] = logger,
) -> Tuple[pd.DataFrame, dict]:
    """
    Remove sessions that are too long or come from unreliable apps.

    Args:
        sessions: Merged sessions (needs app_full_name, duration_seconds)
        denylist: App identifiers with unreliable durations
        long_duration_seconds: Sessions must be strictly shorter than this
        denylist_duration_seconds: Denylisted sessions must not exceed this

    Returns:
        (filtered, stats) - filtered is a new DataFrame, stats holds audit counts
    """
    require_columns(sessions, ['app_full_name', 'duration_seconds'], 'filter_implausible_sessions')

    stats = _empty_plausibility_stats(long_duration_seconds, denylist_duration_seconds)
    if sessions.empty:
        return sessions.copy(), stats

    denylisted = sessions['app_full_name'].isin(set(denylist))
    denylist_over = denylisted & (sessions['duration_seconds'] > denylist_duration_seconds)
    too_long = sessions['duration_seconds'] >= long_duration_seconds
    drop = denylist_over | too_long

    filtered = sessions[~drop].reset_index(drop=True)

    stats['long_running_count'] = int((too_long & ~denylisted).sum())
    stats['denylist_over_threshold_count'] = int(denylist_over.sum())
    stats['dropped_count'] = int(drop.sum())
    stats['kept_count'] = len(filtered)
    stats['denylist_by_app'] = {
        str(app): int(count)
        for app, count in sessions.loc[denylist_over, 'app_full_name'].value_counts().items()
    }

    if logger:
        logger.info(
            f"[Plausibility] dropped {stats['dropped_count']} of {len(sessions)} sessions "
            f"(long-running={stats['long_running_count']}, "
            f"denylisted over {denylist_duration_seconds}s={stats['denylist_over_threshold_count']})"
        )

    return filtered, stats
