"""
Error handling for the cleaning pipeline.

Contract errors (a stage handed a table without the columns it needs) abort
the run. Rejected input records are data-quality issues and are saved for
auditing instead.
"""
import os
from typing import Iterable

import pandas as pd


class PipelineContractError(ValueError):
    """A stage received a table that breaks the column contract."""


def require_columns(df: pd.DataFrame, columns: Iterable[str], stage: str) -> None:
    """
    Raise PipelineContractError if any of *columns* is missing from *df*.

    Args:
        df: Table handed to the stage
        columns: Column names the stage depends on
        stage: Stage name used in the error message
    """
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise PipelineContractError(
            f"{stage}: input table is missing required columns {missing}"
        )


def log_rejected_records(
    rejected: pd.DataFrame,
    errors_directory: str,
    run_label: str,
    logger
) -> None:
    """
    Append rejected input records to a CSV file.

    Args:
        rejected: Rejected rows, including a 'reject_reason' column
        errors_directory: Directory to save error logs
        run_label: Label used in the file name (e.g. the config id)
        logger: Logger instance
    """
    if rejected.empty:
        return

    os.makedirs(errors_directory, exist_ok=True)
    error_file_path = os.path.join(errors_directory, f"rejected_{run_label}.csv")

    try:
        file_exists = os.path.isfile(error_file_path)
        rejected.to_csv(error_file_path, index=False, mode='a', header=not file_exists)
        logger.warning(f"{len(rejected)} rejected records saved to {error_file_path}")
    except OSError as e:
        logger.error(f"Failed to save rejected records: {e}")
