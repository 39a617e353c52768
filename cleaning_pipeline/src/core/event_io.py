"""
Event file I/O.

Reads Chronicle preprocessed CSV exports from a folder and writes the
cleaned session table.
"""
import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd
from tqdm import tqdm

from cleaning.config import RAW_COLUMNS, OUTPUT_COLUMNS
from .errors import require_columns
from .paths import PathManager

logger = logging.getLogger(__name__)


def list_event_files(input_dir: Union[str, Path]) -> list:
    """Return all CSV files in *input_dir*, sorted by name."""
    return sorted(Path(input_dir).glob("*.csv"))


def load_raw_events(
    input_dir: Union[str, Path],
    show_progress: bool = False,
    logger: Optional[logging.Logger] = logger,
) -> pd.DataFrame:
    """
    Load and concatenate every CSV export in a folder.

    All values are read as strings; parsing happens in the normalizer.
    No deduplication is done here.

    Args:
        input_dir: Folder containing per-participant CSV files
        show_progress: Show tqdm progress bar
        logger: Logger for diagnostics

    Returns:
        DataFrame of raw rows (at least RAW_COLUMNS); empty if the folder has no CSVs

    Raises:
        FileNotFoundError: If *input_dir* does not exist
    """
    folder = Path(input_dir)
    if not folder.is_dir():
        raise FileNotFoundError(f"Input folder not found: {input_dir}")

    files = list_event_files(folder)
    if not files:
        logger.warning(f"No CSV files found in {folder}")
        return pd.DataFrame(columns=RAW_COLUMNS, dtype=str)

    iterator = tqdm(files, desc="Loading CSV files", leave=False) if show_progress else files

    dfs = []
    for csv_file in iterator:
        try:
            dfs.append(pd.read_csv(csv_file, dtype=str))
        except pd.errors.EmptyDataError:
            logger.warning(f"Skipping empty file {csv_file.name}")

    if not dfs:
        return pd.DataFrame(columns=RAW_COLUMNS, dtype=str)

    raw = pd.concat(dfs, ignore_index=True)
    logger.info(f"Loaded {len(raw)} rows from {len(files)} files in {folder}")
    return raw


def save_cleaned_events(
    cleaned: pd.DataFrame,
    output_dir: Union[str, Path],
) -> Path:
    """
    Write the cleaned table as CSV.

    Args:
        cleaned: Final cleaned events (OUTPUT_COLUMNS)
        output_dir: Output folder (created if missing)

    Returns:
        Path of the written file
    """
    require_columns(cleaned, OUTPUT_COLUMNS, 'save_cleaned_events')

    file_path = PathManager(output_dir).cleaned_file
    file_path.parent.mkdir(parents=True, exist_ok=True)

    cleaned[OUTPUT_COLUMNS].to_csv(file_path, index=False)
    logger.info(f"Saved {len(cleaned)} cleaned rows to {file_path}")
    return file_path
