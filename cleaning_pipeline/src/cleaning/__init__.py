"""
Cleaning stages for app-usage event logs.

Stages, in pipeline order:
- normalizer: raw rows -> typed, deduplicated, single-timezone events
- session_merger: split fragments -> sessions
- plausibility: drop overlong and denylisted-app sessions
- gap_days: drop days bordering improbable gaps
- calendar_cleaner: midnight fix, first/last day and DST removal
"""
from .normalizer import normalize_events, drop_exact_duplicates, parse_local_datetime
from .session_merger import merge_sessions, merge_group_fragments
from .plausibility import filter_implausible_sessions
from .gap_days import find_gap_days, exclude_gap_days, remove_gap_days
from .calendar_cleaner import clean_boundaries, correct_midnight_ends
from .dst_dates import compute_dst_transition_dates, dst_dates_for_year
from .ordering import sort_events

__all__ = [
    # Normalization
    'normalize_events',
    'drop_exact_duplicates',
    'parse_local_datetime',
    # Merging
    'merge_sessions',
    'merge_group_fragments',
    # Filtering
    'filter_implausible_sessions',
    'find_gap_days',
    'exclude_gap_days',
    'remove_gap_days',
    'clean_boundaries',
    'correct_midnight_ends',
    # Calendar
    'compute_dst_transition_dates',
    'dst_dates_for_year',
    'sort_events',
]
