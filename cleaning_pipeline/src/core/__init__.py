"""Core infrastructure for the cleaning pipeline."""

# Config
from .config import (
    CleaningConfig,
    get_config,
    list_configs,
    save_config_metadata,
    PRESETS,
    DEFAULT_CONFIG,
)

# Paths
from .paths import (
    PathManager,
    RAW_INPUT_DIRECTORY,
    OUTPUT_ROOT,
    CLEANED_FILENAME,
)

# Logging
from .logging_setup import (
    setup_pipeline_logger,
    close_logger,
)

# Errors
from .errors import PipelineContractError, require_columns, log_rejected_records

# Event I/O
from .event_io import load_raw_events, save_cleaned_events, list_event_files

__all__ = [
    # Config
    'CleaningConfig',
    'get_config',
    'list_configs',
    'save_config_metadata',
    'PRESETS',
    'DEFAULT_CONFIG',
    # Paths
    'PathManager',
    'RAW_INPUT_DIRECTORY',
    'OUTPUT_ROOT',
    'CLEANED_FILENAME',
    # Logging
    'setup_pipeline_logger',
    'close_logger',
    # Errors
    'PipelineContractError',
    'require_columns',
    'log_rejected_records',
    # Event I/O
    'load_raw_events',
    'save_cleaned_events',
    'list_event_files',
]
