"""
Tests for core.config — presets, serialization and run metadata.
"""
import json
import pytest
import sys
from dataclasses import FrozenInstanceError
from pathlib import Path

_src_dir = str(Path(__file__).resolve().parent.parent / 'src')
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

from core.config import (
    CleaningConfig,
    DEFAULT_CONFIG,
    PRESETS,
    get_config,
    list_configs,
    save_config_metadata,
)
from core.paths import PathManager
from cleaning.config import DENYLISTED_APPS


class TestPresets:

    def test_default_preset_exists(self):
        config = get_config(DEFAULT_CONFIG)
        assert config.config_id == DEFAULT_CONFIG
        assert config.timezone == 'America/New_York'

    def test_default_thresholds(self):
        config = get_config(DEFAULT_CONFIG)
        assert config.gap_threshold_hours == 12
        assert config.long_duration_seconds == 21600
        assert config.denylist_duration_seconds == 600
        assert config.denylist == DENYLISTED_APPS
        assert len(config.denylist) == 10

    def test_unknown_preset_raises(self):
        with pytest.raises(KeyError, match='not found'):
            get_config('no_such_study')

    def test_list_configs(self):
        configs = list_configs()
        assert set(configs) == set(PRESETS)
        assert all(isinstance(desc, str) and desc for desc in configs.values())

    def test_config_is_frozen(self):
        config = get_config(DEFAULT_CONFIG)
        with pytest.raises(FrozenInstanceError):
            config.timezone = 'UTC'


class TestSerialization:

    def test_dict_round_trip(self):
        config = get_config('chronicle_pacific')
        assert CleaningConfig.from_dict(config.to_dict()) == config

    def test_to_dict_is_json_serializable(self):
        data = get_config(DEFAULT_CONFIG).to_dict()
        assert json.loads(json.dumps(data)) == data
        assert isinstance(data['denylist'], list)

    def test_to_json(self, tmp_path):
        config = get_config(DEFAULT_CONFIG)
        file_path = tmp_path / 'config.json'
        config.to_json(str(file_path))
        with open(file_path) as f:
            assert CleaningConfig.from_dict(json.load(f)) == config

    def test_with_timezone(self):
        config = get_config(DEFAULT_CONFIG)
        chicago = config.with_timezone('America/Chicago')
        assert chicago.timezone == 'America/Chicago'
        assert chicago.denylist == config.denylist
        # Source config untouched
        assert config.timezone == 'America/New_York'


class TestMetadata:

    def test_save_config_metadata(self, tmp_path):
        path = save_config_metadata(get_config(DEFAULT_CONFIG), str(tmp_path), git_hash='abc123')
        with open(path) as f:
            metadata = json.load(f)

        assert Path(path) == PathManager(tmp_path).metadata_file
        assert metadata['git_hash'] == 'abc123'
        assert metadata['config']['config_id'] == DEFAULT_CONFIG
        assert 'timestamp' in metadata
