"""
Unit tests for configuration loading and caching.
"""

import logging
import tomllib

import pytest

from diskmon.config import (
    DEFAULT_CONFIG_FILE_PATH,
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    load_main_config,
    set_config_path,
)
from diskmon.models.config import AppConfig
from diskmon.validation import ValidationError


@pytest.mark.unit
class TestConfigManager:
    """Test cases for the cached configuration singleton."""

    def test_load_from_file(self, config_files):
        set_config_path(config_files["config"])

        config = get_config()

        assert config.monitor.interval_seconds == 0.5
        assert config.probe.allow_partial is True
        assert config.runner.terminate_timeout == 2.0

    def test_config_is_cached(self, config_files):
        set_config_path(config_files["config"])

        assert not is_config_loaded()
        first = get_config()
        assert is_config_loaded()
        assert get_config() is first

        clear_config_cache()
        assert get_config() is not first

    def test_explicit_missing_file(self, temp_dir):
        set_config_path(temp_dir / "absent.toml")

        with pytest.raises(FileNotFoundError):
            get_config()

    def test_missing_default_file_uses_defaults(self, temp_dir, monkeypatch):
        monkeypatch.setattr("diskmon.config.manager._CONFIG_FILE_PATH", temp_dir / "absent.toml")
        clear_config_cache()

        assert get_config() == AppConfig()

    def test_shipped_default_matches_builtin_defaults(self):
        if not DEFAULT_CONFIG_FILE_PATH.exists():
            pytest.skip("conf/config.toml not available")
        set_config_path(None)

        assert get_config() == AppConfig()

    def test_malformed_file(self, temp_dir):
        path = temp_dir / "bad.toml"
        path.write_text("[monitor\ninterval_seconds = ")
        set_config_path(path)

        with pytest.raises(tomllib.TOMLDecodeError):
            get_config()

    def test_invalid_value(self, temp_dir):
        path = temp_dir / "invalid.toml"
        path.write_text("[output]\nformat = \"xml\"\n")
        set_config_path(path)

        with pytest.raises(ValidationError, match="output.format"):
            get_config()

    def test_partial_file(self, temp_dir):
        path = temp_dir / "partial.toml"
        path.write_text("[monitor]\ninterval_seconds = 0.25\n")
        set_config_path(path)

        config = get_config()

        assert config.monitor.interval_seconds == 0.25
        assert config.output.format == "tsv"

    def test_config_info(self, config_files):
        set_config_path(config_files["config"])

        info = get_config_info()

        assert info["config_path"] == str(config_files["config"])
        assert info["config_path_explicit"] is True
        assert info["config_loaded"] is False


@pytest.mark.unit
class TestLoadMainConfig:
    """Test cases for load_main_config."""

    def test_unknown_section_ignored(self, temp_dir, caplog):
        path = temp_dir / "extra.toml"
        path.write_text("[plotting]\ntheme = \"dark\"\n[monitor]\nlog_level = \"INFO\"\n")

        with caplog.at_level(logging.WARNING):
            sections = load_main_config(path)

        assert set(sections) == {"monitor", "probe", "output", "runner"}
        assert sections["monitor"] == {"log_level": "INFO"}
        assert sections["probe"] == {}
        assert "plotting" in caplog.text
