"""
Configuration constants for app-usage cleaning.

All thresholds, the app denylist and the column contracts between stages
are centralised here for easy tuning.
"""

# ============================================================================
# Input filtering
# ============================================================================
DEFAULT_TIMEZONE = 'America/New_York'   # records declaring any other zone are dropped

# Trailing UTC offset on Chronicle datetime strings, e.g. "-04:00"
UTC_OFFSET_PATTERN = r'[-+][0-9]{2}:[0-9]{2}$'

# Zone designators left after stripping ("Z", "-0400", "-04"); such values are rejected
RESIDUAL_ZONE_PATTERN = r'[T ][0-9:.]+(?:[Zz]|[-+][0-9]{2}(?::?[0-9]{2})?)$'

# ============================================================================
# Plausibility filtering
# ============================================================================
LONG_DURATION_SECONDS = 21600       # 6 hours; sessions must be strictly shorter
DENYLIST_DURATION_SECONDS = 600     # 10 minutes; denylisted apps must not exceed

# Apps known to report unreliable durations (launchers, clocks, the
# Chronicle app itself, screensavers, ...)
DENYLISTED_APPS = (
    'com.openlattice.chronicle',
    'com.sec.android.app.clockpackage',
    'com.google.android.deskclock',
    'com.lge.launcher3',
    'com.motorola.launcher3',
    'bitpit.launcher',
    'com.sec.android.app.launcher',
    'com.android.dreams.basic',
    'com.google.android.googlequicksearchbox',
    'com.water.reminder.tracker',
)

# ============================================================================
# Gap detection
# ============================================================================
GAP_THRESHOLD_HOURS = 12            # silent stretches longer than this are implausible

# ============================================================================
# Calendar cleaning
# ============================================================================
DST_FIRST_YEAR = 2020
DST_LAST_YEAR = 2030

# ============================================================================
# Column contracts
# ============================================================================
RAW_COLUMNS = [
    'participant_id',
    'app_record_type',
    'app_title',
    'app_full_name',
    'app_datetime_start',
    'app_datetime_end',
    'app_duration_seconds',
    'app_timezone',
]

EVENT_COLUMNS = [
    'participant_id',
    'app_record_type',
    'app_title',
    'app_full_name',
    'start_datetime',
    'end_datetime',
    'start_timestamp',
    'stop_timestamp',
    'duration_seconds',
    'date',
]

MERGE_KEYS = ['participant_id', 'app_full_name', 'app_record_type']

SESSION_COLUMNS = [
    'participant_id',
    'app_record_type',
    'app_full_name',
    'app_title',
    'start_datetime',
    'end_datetime',
    'start_timestamp',
    'stop_timestamp',
    'duration_seconds',
    'date',
    'fragment_count',
]

OUTPUT_COLUMNS = [
    'participant_id',
    'app_full_name',
    'app_title',
    'start_datetime',
    'end_datetime',
    'duration_secs',
    'fragment_count',
]

# Tie-breakers appended after (participant_id, start_datetime) when sorting
ORDER_TIE_BREAKERS = ['end_datetime', 'app_full_name', 'app_record_type', 'app_title']
