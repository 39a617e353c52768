"""
Centralized path management for the cleaning pipeline.

Contains the default directory constants and the PathManager class for
organized output paths.
"""
from pathlib import Path
from typing import Union


# =============================================================================
# BASE DIRECTORIES - Defaults used when no directory is given
# =============================================================================

_BASE_DIR = Path(__file__).parent.parent.parent.absolute()  # cleaning_pipeline/

# Input paths (Chronicle preprocessed CSV exports)
RAW_INPUT_DIRECTORY = str(_BASE_DIR / "INPUT" / "ChronicleData")

# Output paths
OUTPUT_ROOT = str(_BASE_DIR / "OUTPUT")

CLEANED_FILENAME = "cleaned_data.csv"


# =============================================================================
# PATH MANAGER - Object-oriented path management for a run
# =============================================================================

class PathManager:
    """
    Manages all output paths for one cleaning run.

    Usage:
        paths = PathManager('/data/study_out')
        paths.ensure_dirs()
        cleaned.to_csv(paths.cleaned_file)
    """

    def __init__(self, output_dir: Union[str, Path] = OUTPUT_ROOT):
        self.output_dir = Path(output_dir)

    @property
    def cleaned_file(self) -> Path:
        return self.output_dir / CLEANED_FILENAME

    @property
    def logs_dir(self) -> Path:
        return self.output_dir / "logs"

    @property
    def errors_dir(self) -> Path:
        """Rejected input records are appended here."""
        return self.output_dir / "errors"

    @property
    def metadata_file(self) -> Path:
        return self.output_dir / "cleaning_metadata.json"

    @property
    def summary_file(self) -> Path:
        """Per-stage row counts of the last run."""
        return self.output_dir / "cleaning_summary.json"

    @property
    def log_file(self) -> Path:
        return self.logs_dir / "cleaning.log"

    def ensure_dirs(self):
        """Create all necessary directories."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def __repr__(self) -> str:
        return f"PathManager(output={self.output_dir})"
