"""
Unit tests for cleaning.session_merger — fragment -> session reconstruction.

Tests cover:
  1. merge_group_fragments() — accumulator scan over one sorted group
  2. merge_sessions() — grouping by participant/app/record type
  3. Exact adjacency (no tolerance window)
  4. Session attributes (first title/date, summed duration, fragment count)
"""
import pytest
import pandas as pd
import sys
from datetime import date
from pathlib import Path

_src_dir = str(Path(__file__).resolve().parent.parent / 'src')
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

from cleaning.session_merger import merge_sessions, merge_group_fragments
from cleaning.config import EVENT_COLUMNS, SESSION_COLUMNS
from core.errors import PipelineContractError

# ============================================================================
# Helpers
# ============================================================================

DAY = '2024-05-14'


def make_event(start, end, participant='p1', app='x', record_type='Usage Stat',
               title='X', duration=None):
    """Create one normalized event dict; times are 'HH:MM[:SS]' on DAY unless a full datetime."""
    start_ts = pd.Timestamp(start if ' ' in start else f"{DAY} {start}")
    end_ts = pd.Timestamp(end if ' ' in end else f"{DAY} {end}")
    if duration is None:
        duration = (end_ts - start_ts).total_seconds()
    return {
        'participant_id': participant,
        'app_record_type': record_type,
        'app_title': title,
        'app_full_name': app,
        'start_datetime': start_ts,
        'end_datetime': end_ts,
        'duration_seconds': float(duration),
    }


def make_events_df(rows):
    """Build an EVENT_COLUMNS DataFrame, deriving time-of-day and date fields."""
    df = pd.DataFrame(rows)
    df['start_datetime'] = pd.to_datetime(df['start_datetime'])
    df['end_datetime'] = pd.to_datetime(df['end_datetime'])
    df['start_timestamp'] = df['start_datetime'] - df['start_datetime'].dt.normalize()
    df['stop_timestamp'] = df['end_datetime'] - df['end_datetime'].dt.normalize()
    df['date'] = df['start_datetime'].dt.date
    return df[EVENT_COLUMNS]


# ============================================================================
# Adjacency
# ============================================================================

class TestAdjacency:
    """Fragments merge only when next start == previous end exactly."""

    def test_three_touching_fragments_merge(self):
        events = make_events_df([
            make_event('10:00', '10:30', duration=1790),
            make_event('10:30', '11:00', duration=1800),
            make_event('11:00', '11:30', duration=1805),
        ])
        sessions = merge_sessions(events)

        assert len(sessions) == 1
        session = sessions.iloc[0]
        assert session['start_datetime'] == pd.Timestamp(f'{DAY} 10:00')
        assert session['end_datetime'] == pd.Timestamp(f'{DAY} 11:30')
        assert session['fragment_count'] == 3
        # Declared durations are summed, not recomputed from timestamps
        assert session['duration_seconds'] == 1790 + 1800 + 1805

    def test_one_second_mismatch_starts_new_session(self):
        events = make_events_df([
            make_event('10:00', '10:30'),
            make_event('10:30:01', '11:00'),
            make_event('11:00', '11:30'),
        ])
        sessions = merge_sessions(events)

        assert len(sessions) == 2
        assert list(sessions['fragment_count']) == [1, 2]
        assert sessions.iloc[1]['start_datetime'] == pd.Timestamp(f'{DAY} 10:30:01')
        assert sessions.iloc[1]['end_datetime'] == pd.Timestamp(f'{DAY} 11:30')

    def test_overlapping_fragments_not_merged(self):
        """Overlap is not adjacency: 10:20 start != 10:30 end."""
        events = make_events_df([
            make_event('10:00', '10:30'),
            make_event('10:20', '10:40'),
        ])
        sessions = merge_sessions(events)
        assert len(sessions) == 2

    def test_single_fragment_session(self):
        sessions = merge_sessions(make_events_df([make_event('10:00', '10:05')]))
        assert len(sessions) == 1
        assert sessions.iloc[0]['fragment_count'] == 1
        assert sessions.iloc[0]['duration_seconds'] == 300.0

    def test_merge_across_midnight_keeps_first_date(self):
        events = make_events_df([
            make_event('2024-05-14 23:00', '2024-05-15 00:00', title='Maps'),
            make_event('2024-05-15 00:00', '2024-05-15 00:30', title='Maps - Navigation'),
        ])
        sessions = merge_sessions(events)

        assert len(sessions) == 1
        session = sessions.iloc[0]
        assert session['date'] == date(2024, 5, 14)
        assert session['app_title'] == 'Maps'
        assert session['end_datetime'] == pd.Timestamp('2024-05-15 00:30')
        assert session['start_timestamp'] == pd.Timedelta(hours=23)
        assert session['stop_timestamp'] == pd.Timedelta(minutes=30)


# ============================================================================
# Grouping
# ============================================================================

class TestGrouping:
    """Only fragments sharing participant, app and record type merge."""

    def test_different_apps_not_merged(self):
        events = make_events_df([
            make_event('10:00', '10:30', app='x'),
            make_event('10:30', '11:00', app='y'),
        ])
        assert len(merge_sessions(events)) == 2

    def test_different_record_types_not_merged(self):
        events = make_events_df([
            make_event('10:00', '10:30', record_type='Usage Stat'),
            make_event('10:30', '11:00', record_type='Move to Foreground'),
        ])
        assert len(merge_sessions(events)) == 2

    def test_different_participants_not_merged(self):
        events = make_events_df([
            make_event('10:00', '10:30', participant='p1'),
            make_event('10:30', '11:00', participant='p2'),
        ])
        assert len(merge_sessions(events)) == 2

    def test_interleaved_app_does_not_break_group(self):
        """Another app's event between two fragments does not split them."""
        events = make_events_df([
            make_event('10:00', '10:30', app='x'),
            make_event('10:10', '10:20', app='y'),
            make_event('10:30', '11:00', app='x'),
        ])
        sessions = merge_sessions(events)

        x_sessions = sessions[sessions['app_full_name'] == 'x']
        assert len(x_sessions) == 1
        assert x_sessions.iloc[0]['fragment_count'] == 2

    def test_missing_app_name_forms_own_group(self):
        events = make_events_df([
            make_event('10:00', '10:30', app=None),
            make_event('10:30', '11:00', app=None),
            make_event('11:00', '11:30', app='x'),
        ])
        sessions = merge_sessions(events)
        assert len(sessions) == 2
        assert sorted(sessions['fragment_count']) == [1, 2]


# ============================================================================
# merge_group_fragments()
# ============================================================================

class TestMergeGroupFragments:

    def test_returns_session_dicts(self):
        group = make_events_df([
            make_event('10:00', '10:30'),
            make_event('10:30', '10:45'),
            make_event('12:00', '12:10'),
        ])
        sessions = merge_group_fragments(group)

        assert len(sessions) == 2
        assert set(sessions[0].keys()) == set(SESSION_COLUMNS)
        assert sessions[0]['fragment_count'] == 2
        assert sessions[0]['duration_seconds'] == 2700.0
        assert sessions[1]['start_datetime'] == pd.Timestamp(f'{DAY} 12:00')

    def test_empty_group(self):
        assert merge_group_fragments(make_events_df([make_event('10:00', '10:05')]).iloc[0:0]) == []

    def test_does_not_modify_group(self):
        group = make_events_df([make_event('10:00', '10:30'), make_event('10:30', '11:00')])
        before = group.copy()
        merge_group_fragments(group)
        pd.testing.assert_frame_equal(group, before)


# ============================================================================
# merge_sessions() output
# ============================================================================

class TestMergeSessionsOutput:

    def test_output_columns(self):
        sessions = merge_sessions(make_events_df([make_event('10:00', '10:05')]))
        assert list(sessions.columns) == SESSION_COLUMNS

    def test_unsorted_input_is_sorted_before_merging(self):
        events = make_events_df([
            make_event('10:30', '11:00'),
            make_event('10:00', '10:30'),
        ])
        sessions = merge_sessions(events)
        assert len(sessions) == 1
        assert sessions.iloc[0]['fragment_count'] == 2

    def test_output_sorted_by_participant_and_start(self):
        events = make_events_df([
            make_event('09:00', '09:10', participant='p2', app='a'),
            make_event('11:00', '11:10', participant='p1', app='a'),
            make_event('08:00', '08:10', participant='p1', app='b'),
        ])
        sessions = merge_sessions(events)
        assert list(sessions['participant_id']) == ['p1', 'p1', 'p2']
        assert list(sessions['app_full_name']) == ['b', 'a', 'a']

    def test_empty_input_has_typed_columns(self):
        events = make_events_df([make_event('10:00', '10:05')]).iloc[0:0]
        sessions = merge_sessions(events)
        assert sessions.empty
        assert list(sessions.columns) == SESSION_COLUMNS
        assert pd.api.types.is_datetime64_any_dtype(sessions['start_datetime'])
        assert pd.api.types.is_datetime64_any_dtype(sessions['end_datetime'])

    def test_does_not_modify_input(self):
        events = make_events_df([make_event('10:00', '10:30'), make_event('10:30', '11:00')])
        before = events.copy()
        merge_sessions(events)
        pd.testing.assert_frame_equal(events, before)

    def test_missing_column_is_contract_error(self):
        events = make_events_df([make_event('10:00', '10:05')]).drop(columns=['app_record_type'])
        with pytest.raises(PipelineContractError):
            merge_sessions(events)
