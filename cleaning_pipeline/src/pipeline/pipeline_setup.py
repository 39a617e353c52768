"""
Pipeline setup helpers.

Handles git hash retrieval and logger configuration.
"""
import os
import subprocess
from pathlib import Path

from core import setup_pipeline_logger


def _get_git_hash():
    """Get current git commit hash, or None if unavailable."""
    try:
        return subprocess.check_output(
            ['git', 'rev-parse', 'HEAD'], stderr=subprocess.DEVNULL
        ).decode('ascii').strip()
    except (OSError, subprocess.CalledProcessError):
        return None


def _setup_logger(log_file: Path, quiet: bool):
    """Set up a per-run logger with file and optional console handlers."""
    return setup_pipeline_logger(
        f"cleaning_run_{os.getpid()}",
        log_file=log_file,
        console=not quiet,
    )
