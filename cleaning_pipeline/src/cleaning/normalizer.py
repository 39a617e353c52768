"""
Event normalization.

Turns raw Chronicle export rows into typed events:
  - exact duplicate rows are dropped
  - rows from other timezones are dropped
  - start/end strings lose their UTC offset and become naive wall-clock times
  - durations are coerced to numbers

Rows that cannot be parsed are rejected one by one; they never abort the run.
"""
import logging
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from core.errors import require_columns
from .config import RAW_COLUMNS, EVENT_COLUMNS, UTC_OFFSET_PATTERN, RESIDUAL_ZONE_PATTERN
from .ordering import sort_events

_logger = logging.getLogger(__name__)

# Checked in order; a row is reported under the first reason it fails
REJECT_REASONS = ['missing_participant', 'bad_start', 'bad_end', 'bad_duration']


def drop_exact_duplicates(raw: pd.DataFrame) -> pd.DataFrame:
    """Drop rows whose values are equal across all columns (first kept)."""
    return raw.drop_duplicates(keep='first').reset_index(drop=True)


def parse_local_datetime(values: pd.Series) -> pd.Series:
    """
    Strip a trailing [+-]HH:MM offset and parse the rest as local time.

    Unparseable values become NaT, and so do values that still carry a zone
    designator after stripping. Parsing those would make the column mixed-zone,
    which pandas rejects for the whole column rather than per value.
    """
    stripped = values.astype('string').str.strip().str.replace(UTC_OFFSET_PATTERN, '', regex=True)
    zoned = stripped.str.contains(RESIDUAL_ZONE_PATTERN, regex=True, na=False)
    return pd.to_datetime(stripped.mask(zoned), errors='coerce', format='ISO8601')


def normalize_events(
    raw: pd.DataFrame,
    timezone: str,
    logger: Optional[logging.Logger] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame, dict]:
    """
    Normalize raw event rows.

    Parameters
    ----------
    raw : pd.DataFrame
        Rows from all input files, with at least RAW_COLUMNS.
    timezone : str
        Timezone name records must declare to be kept.
    logger : logging.Logger or None
        Optional logger for diagnostics (defaults to the module logger).

    Returns
    -------
    (events, rejected, stats)
        events: EVENT_COLUMNS sorted by (participant_id, start_datetime).
        rejected: raw rows that failed parsing, plus a 'reject_reason' column.
        stats: row counts for auditing.
    """
    logger = logger or _logger
    require_columns(raw, RAW_COLUMNS, 'normalize_events')

    deduped = drop_exact_duplicates(raw)
    in_zone = deduped[deduped['app_timezone'] == timezone].reset_index(drop=True)

    start = parse_local_datetime(in_zone['app_datetime_start'])
    end = parse_local_datetime(in_zone['app_datetime_end'])
    duration = pd.to_numeric(in_zone['app_duration_seconds'], errors='coerce')

    failures = pd.DataFrame({
        'missing_participant': in_zone['participant_id'].isna(),
        'bad_start': start.isna(),
        'bad_end': end.isna(),
        'bad_duration': duration.isna() | (duration < 0),
    })
    bad = failures.any(axis=1)

    reasons = np.array(REJECT_REASONS)[failures.to_numpy().argmax(axis=1)]
    rejected = in_zone[bad].copy()
    rejected['reject_reason'] = reasons[bad.to_numpy()]

    kept = in_zone[~bad]
    events = pd.DataFrame({
        'participant_id': kept['participant_id'],
        'app_record_type': kept['app_record_type'],
        'app_title': kept['app_title'],
        'app_full_name': kept['app_full_name'],
        'start_datetime': start[~bad],
        'end_datetime': end[~bad],
        'duration_seconds': duration[~bad].astype(float),
    })
    events['start_timestamp'] = events['start_datetime'] - events['start_datetime'].dt.normalize()
    events['stop_timestamp'] = events['end_datetime'] - events['end_datetime'].dt.normalize()
    events['date'] = events['start_datetime'].dt.date
    events = sort_events(events[EVENT_COLUMNS])

    stats = {
        'input_rows': len(raw),
        'duplicate_rows': len(raw) - len(deduped),
        'other_timezone_rows': len(deduped) - len(in_zone),
        'rejected_rows': len(rejected),
        'rejected_by_reason': {
            reason: int((rejected['reject_reason'] == reason).sum()) for reason in REJECT_REASONS
        },
        'output_rows': len(events),
    }

    if len(rejected) > 0:
        reasons_seen = {k: v for k, v in stats['rejected_by_reason'].items() if v}
        logger.warning(f"[Normalize] rejected {len(rejected)} unparseable records: {reasons_seen}")
    logger.info(
        f"[Normalize] {stats['input_rows']} raw rows -> {stats['output_rows']} events "
        f"(duplicates={stats['duplicate_rows']}, other timezone={stats['other_timezone_rows']})"
    )

    return events, rejected.reset_index(drop=True), stats
