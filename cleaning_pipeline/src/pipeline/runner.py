"""
Pipeline runner for app-usage cleaning.

Stages run strictly in order, each on the previous stage's output:
  1. normalize   - parse, dedupe, timezone filter
  2. merge       - split fragments -> sessions
  3. plausibility - overlong / denylisted sessions
  4. gaps        - days bordering improbable gaps
  5. calendar    - midnight fix, first/last days, DST days
then the cleaned table is exported.

Implementation is split across:
  - runner.py (this file) -- clean_events() and run_pipeline()
  - pipeline_setup.py -- _get_git_hash, _setup_logger
"""
import json
import logging
import time
import traceback
from pathlib import Path
from typing import Optional, Tuple

import pandas as pd

from core import (
    CleaningConfig,
    DEFAULT_CONFIG,
    PathManager,
    close_logger,
    get_config,
    load_raw_events,
    log_rejected_records,
    save_cleaned_events,
    save_config_metadata,
)
from cleaning import (
    normalize_events,
    merge_sessions,
    filter_implausible_sessions,
    remove_gap_days,
    clean_boundaries,
    compute_dst_transition_dates,
)
from .pipeline_setup import _get_git_hash, _setup_logger

_logger = logging.getLogger(__name__)


def clean_events(
    raw: pd.DataFrame,
    config: CleaningConfig,
    logger: Optional[logging.Logger] = None,
    show_progress: bool = False,
) -> Tuple[pd.DataFrame, pd.DataFrame, dict]:
    """
    Run all cleaning stages in memory.

    Args:
        raw: Raw rows from all input files
        config: Cleaning configuration
        logger: Logger for stage diagnostics (module logger if None)
        show_progress: Show tqdm progress bars

    Returns:
        (cleaned, rejected, report)
        cleaned: final table (OUTPUT_COLUMNS)
        rejected: raw rows that failed parsing, with 'reject_reason'
        report: per-stage statistics (JSON-serializable)
    """
    logger = logger or _logger

    # Computed once per run, reused for all participants
    dst_dates = compute_dst_transition_dates(config.dst_first_year, config.dst_last_year)

    events, rejected, normalize_stats = normalize_events(raw, config.timezone, logger=logger)

    sessions = merge_sessions(events, show_progress=show_progress, logger=logger)
    merge_stats = {
        'fragment_count': len(events),
        'session_count': len(sessions),
        'multi_fragment_sessions': int((sessions['fragment_count'] > 1).sum()),
    }

    plausible, plausibility_stats = filter_implausible_sessions(
        sessions,
        denylist=config.denylist,
        long_duration_seconds=config.long_duration_seconds,
        denylist_duration_seconds=config.denylist_duration_seconds,
        logger=logger,
    )

    gap_cleaned, gap_stats = remove_gap_days(
        plausible, gap_threshold_hours=config.gap_threshold_hours, logger=logger,
    )

    cleaned, calendar_stats = clean_boundaries(gap_cleaned, dst_dates, logger=logger)

    report = {
        'normalize': normalize_stats,
        'merge': merge_stats,
        'plausibility': plausibility_stats,
        'gaps': gap_stats,
        'calendar': calendar_stats,
        'output_rows': len(cleaned),
    }
    return cleaned, rejected, report


def run_pipeline(
    input_dir: str,
    output_dir: str,
    config_name: str = DEFAULT_CONFIG,
    timezone: str = None,
    quiet: bool = False,
    show_progress: bool = False,
) -> dict:
    """
    Load, clean and export one study's event files.

    Args:
        input_dir: Folder with Chronicle CSV exports
        output_dir: Where to save cleaned_data.csv, logs, metadata
        config_name: Preset name from core.config
        timezone: Optional timezone overriding the preset's
        quiet: If True, suppress console output
        show_progress: Show tqdm progress bars

    Returns:
        dict with results: {'success': bool, 'rows': int, 'output_file': str or None,
                            'error': str or None}
    """
    paths = PathManager(output_dir)
    paths.ensure_dirs()
    logger = _setup_logger(paths.log_file, quiet)

    try:
        try:
            config = get_config(config_name)
        except KeyError as e:
            logger.error(f"Unknown config: {e}")
            return {'success': False, 'rows': 0, 'output_file': None, 'error': f"Unknown config: {e}"}

        if timezone:
            config = config.with_timezone(timezone)

        save_config_metadata(config, str(paths.output_dir), _get_git_hash())

        logger.info(f"Starting cleaning pipeline: {config.config_id} - {config.description}")
        logger.info(f"Timezone: {config.timezone}")
        logger.info(f"Input: {input_dir}")
        logger.info(f"Output: {paths.output_dir}")

        t0 = time.time()
        try:
            raw = load_raw_events(input_dir, show_progress=show_progress, logger=logger)
            cleaned, rejected, report = clean_events(raw, config, logger, show_progress)
            log_rejected_records(rejected, str(paths.errors_dir), config.config_id, logger)
            output_file = save_cleaned_events(cleaned, paths.output_dir)
            _save_summary(report, paths.summary_file)
        except Exception as e:
            logger.error(f"Error in cleaning pipeline: {e}")
            logger.error(traceback.format_exc())
            return {'success': False, 'rows': 0, 'output_file': None, 'error': str(e)}

        logger.info(f"Cleaning completed: {len(cleaned)} rows ({time.time() - t0:.1f}s)")
        return {'success': True, 'rows': len(cleaned), 'output_file': str(output_file), 'error': None}
    finally:
        close_logger(logger)


def _save_summary(report: dict, summary_file: Path) -> None:
    """Write the per-stage statistics as JSON."""
    with open(summary_file, 'w') as f:
        json.dump(report, f, indent=2)
