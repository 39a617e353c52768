"""
Cleaning configuration management.

Each study setup has a unique identifier and a configuration that defines
the timezone, plausibility thresholds and the app denylist.
"""
from dataclasses import dataclass
from typing import Dict, Any, Tuple
import json
from datetime import datetime

from cleaning.config import (
    DEFAULT_TIMEZONE,
    GAP_THRESHOLD_HOURS,
    LONG_DURATION_SECONDS,
    DENYLIST_DURATION_SECONDS,
    DENYLISTED_APPS,
    DST_FIRST_YEAR,
    DST_LAST_YEAR,
)
from .paths import PathManager


@dataclass(frozen=True)
class CleaningConfig:
    """Configuration for a single cleaning run."""
    config_id: str
    description: str
    timezone: str = DEFAULT_TIMEZONE
    gap_threshold_hours: float = GAP_THRESHOLD_HOURS
    long_duration_seconds: float = LONG_DURATION_SECONDS
    denylist_duration_seconds: float = DENYLIST_DURATION_SECONDS
    denylist: Tuple[str, ...] = DENYLISTED_APPS
    dst_first_year: int = DST_FIRST_YEAR
    dst_last_year: int = DST_LAST_YEAR

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return {
            'config_id': self.config_id,
            'description': self.description,
            'timezone': self.timezone,
            'gap_threshold_hours': self.gap_threshold_hours,
            'long_duration_seconds': self.long_duration_seconds,
            'denylist_duration_seconds': self.denylist_duration_seconds,
            'denylist': list(self.denylist),
            'dst_first_year': self.dst_first_year,
            'dst_last_year': self.dst_last_year,
        }

    def to_json(self, file_path: str):
        """Save config to JSON file."""
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CleaningConfig':
        """Create config from dictionary."""
        data = dict(data)
        if 'denylist' in data:
            data['denylist'] = tuple(data['denylist'])
        return cls(**data)

    def with_timezone(self, timezone: str) -> 'CleaningConfig':
        """Return a copy of this config for another timezone."""
        data = self.to_dict()
        data['timezone'] = timezone
        return CleaningConfig.from_dict(data)


# ============================================================================
# Study presets (U.S. timezones - DST exclusion follows the U.S. calendar)
# ============================================================================

PRESETS = {
    'chronicle_eastern': CleaningConfig(
        config_id='chronicle_eastern',
        description='Chronicle export, participants in US Eastern time',
        timezone='America/New_York',
    ),

    'chronicle_central': CleaningConfig(
        config_id='chronicle_central',
        description='Chronicle export, participants in US Central time',
        timezone='America/Chicago',
    ),

    'chronicle_mountain': CleaningConfig(
        config_id='chronicle_mountain',
        description='Chronicle export, participants in US Mountain time (DST observed)',
        timezone='America/Denver',
    ),

    'chronicle_pacific': CleaningConfig(
        config_id='chronicle_pacific',
        description='Chronicle export, participants in US Pacific time',
        timezone='America/Los_Angeles',
    ),
}

DEFAULT_CONFIG = 'chronicle_eastern'


def get_config(config_name: str) -> CleaningConfig:
    """
    Get cleaning configuration by name.

    Args:
        config_name: Preset key, e.g. 'chronicle_eastern'

    Returns:
        CleaningConfig for that preset

    Raises:
        KeyError: If no preset has that name
    """
    if config_name in PRESETS:
        return PRESETS[config_name]

    available = list(PRESETS.keys())
    raise KeyError(f"Config '{config_name}' not found. Available: {available}")


def list_configs() -> Dict[str, str]:
    """List available presets with descriptions."""
    return {name: config.description for name, config in PRESETS.items()}


def save_config_metadata(config: CleaningConfig, output_dir: str, git_hash: str = None) -> str:
    """
    Save run metadata to output directory.

    Args:
        config: Cleaning configuration
        output_dir: Directory to save metadata
        git_hash: Optional git commit hash

    Returns:
        Path of the metadata file
    """
    metadata = {
        'timestamp': datetime.now().isoformat(),
        'config': config.to_dict(),
        'git_hash': git_hash,
    }

    metadata_path = str(PathManager(output_dir).metadata_file)
    with open(metadata_path, 'w') as f:
        json.dump(metadata, f, indent=2)
    return metadata_path
