"""
Session merging logic.

Chronicle splits long app usage into several rows (fragments). Fragments of
the same participant/app/record type that touch each other exactly (next
start == previous end) are merged back into one session.

Does NOT merge fragments with any gap between them, however small
(e.g., one ends at 10:30:00, next starts at 10:30:01).
"""
import logging
from typing import List, Optional

import pandas as pd
from tqdm import tqdm

from core.errors import require_columns
from .config import EVENT_COLUMNS, MERGE_KEYS, SESSION_COLUMNS
from .ordering import sort_events

logger = logging.getLogger(__name__)


def merge_group_fragments(group: pd.DataFrame) -> List[dict]:
    """
    Merge the time-adjacent fragments of one (participant, app, record type) group.

    The group must already be sorted by start_datetime.

    Args:
        group: Fragments of a single merge group (EVENT_COLUMNS)

    Returns:
        List of session dicts (SESSION_COLUMNS), in start order
    """
    sessions = []
    current = None

    for fragment in group.itertuples(index=False):
        if current is not None and fragment.start_datetime == current['end_datetime']:
            # Touching fragment: extend the open session
            current['end_datetime'] = fragment.end_datetime
            current['stop_timestamp'] = fragment.stop_timestamp
            current['duration_seconds'] += fragment.duration_seconds
            current['fragment_count'] += 1
            continue

        if current is not None:
            sessions.append(current)
        current = {
            'participant_id': fragment.participant_id,
            'app_record_type': fragment.app_record_type,
            'app_full_name': fragment.app_full_name,
            'app_title': fragment.app_title,
            'start_datetime': fragment.start_datetime,
            'end_datetime': fragment.end_datetime,
            'start_timestamp': fragment.start_timestamp,
            'stop_timestamp': fragment.stop_timestamp,
            'duration_seconds': fragment.duration_seconds,
            'date': fragment.date,
            'fragment_count': 1,
        }

    # Don't forget the last session
    if current is not None:
        sessions.append(current)

    return sessions


def merge_sessions(events: pd.DataFrame, show_progress: bool = False,
                   logger: Optional[logging.Logger] = logger) -> pd.DataFrame:
    """
    Collapse split fragments into sessions.

    Args:
        events: Normalized events (EVENT_COLUMNS)
        show_progress: Show tqdm progress bar over merge groups
        logger: Logger for diagnostics

    Returns:
        New DataFrame with SESSION_COLUMNS sorted by (participant_id, start_datetime)
    """
    require_columns(events, EVENT_COLUMNS, 'merge_sessions')

    ordered = sort_events(events)
    groups = ordered.groupby(MERGE_KEYS, sort=False, dropna=False)
    iterator = tqdm(groups, desc="Merging fragments", leave=False) if show_progress else groups

    records = []
    for _, group in iterator:
        records.extend(merge_group_fragments(group))

    sessions = _sessions_frame(records)

    if logger:
        merged_away = len(events) - len(sessions)
        multi = int((sessions['fragment_count'] > 1).sum())
        logger.info(
            f"[Merge] {len(events)} fragments -> {len(sessions)} sessions "
            f"({merged_away} fragments merged into {multi} multi-fragment sessions)"
        )

    return sessions


def _sessions_frame(records: List[dict]) -> pd.DataFrame:
    """Build a sorted Session DataFrame with stable dtypes, even when empty."""
    sessions = pd.DataFrame(records, columns=SESSION_COLUMNS)
    sessions['start_datetime'] = pd.to_datetime(sessions['start_datetime'])
    sessions['end_datetime'] = pd.to_datetime(sessions['end_datetime'])
    sessions['start_timestamp'] = pd.to_timedelta(sessions['start_timestamp'])
    sessions['stop_timestamp'] = pd.to_timedelta(sessions['stop_timestamp'])
    sessions['duration_seconds'] = sessions['duration_seconds'].astype(float)
    sessions['fragment_count'] = sessions['fragment_count'].astype(int)
    return sort_events(sessions)
