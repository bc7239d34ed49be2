"""
Unit tests for configuration module.
"""

import pytest
from pathlib import Path
import tempfile
import yaml

from share_dedupe.config.settings import (
    Config,
    DeduplicationConfig,
    OrganizerConfig,
)
from share_dedupe.utils.exceptions import ConfigurationError, ErrorCode


class TestOrganizerConfig:
    """Tests for OrganizerConfig."""

    def test_default_values(self):
        """Test default configuration values."""
        config = OrganizerConfig()

        assert config.base_path is None
        assert config.create_if_absent is False
        assert config.journal_file is None

    def test_from_dict(self):
        """Test creation from dictionary."""
        data = {
            "base_path": "/share/Deleted Games and Apps",
            "create_if_absent": True,
            "journal_file": "~/moves.json",
        }
        config = OrganizerConfig.from_dict(data)

        assert config.base_path == Path("/share/Deleted Games and Apps")
        assert config.create_if_absent is True
        assert config.journal_file == Path.home() / "moves.json"


class TestDeduplicationConfig:
    """Tests for DeduplicationConfig."""

    def test_default_values(self):
        """Test default deduplication settings."""
        config = DeduplicationConfig()

        assert config.max_workers >= 1
        assert config.buffer_size == 65536
        assert config.hash_algorithm == "sha256"
        assert config.quarantine_directory is None

    def test_from_dict(self):
        config = DeduplicationConfig.from_dict({
            "max_workers": 2,
            "hash_algorithm": "MD5",
            "quarantine_directory": "/tmp/dupes",
        })

        assert config.max_workers == 2
        assert config.hash_algorithm == "md5"
        assert config.quarantine_directory == Path("/tmp/dupes")

    def test_zero_workers_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            DeduplicationConfig.from_dict({"max_workers": 0})

        assert exc_info.value.details["config_key"] == "deduplication.max_workers"

    def test_non_numeric_buffer_rejected(self):
        with pytest.raises(ConfigurationError):
            DeduplicationConfig.from_dict({"buffer_size": "lots"})

    def test_unknown_algorithm_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            DeduplicationConfig(hash_algorithm="crc-nope")

        assert exc_info.value.error_code == ErrorCode.CONFIGURATION_ERROR


class TestConfig:
    """Tests for main Config class."""

    def test_default_config(self):
        """Test default configuration."""
        config = Config()

        assert isinstance(config.organizer, OrganizerConfig)
        assert isinstance(config.deduplication, DeduplicationConfig)
        assert config.logging.level == "INFO"

    def test_load_from_file(self):
        """Test loading configuration from YAML file."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "share_dedupe.yaml"
            path.write_text(yaml.dump({
                "organizer": {"create_if_absent": True},
                "deduplication": {"max_workers": 3},
                "logging": {"level": "debug"},
            }))

            config = Config.load(path)

            assert config.organizer.create_if_absent is True
            assert config.deduplication.max_workers == 3
            assert config.logging.level == "DEBUG"

    def test_load_missing_file(self):
        """Test loading from non-existent file returns defaults."""
        config = Config.load(Path("/nonexistent/config.yaml"))

        assert config.organizer.base_path is None

    def test_load_empty_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "empty.yaml"
            path.write_text("")

            assert Config.load(path).organizer.create_if_absent is False

    def test_load_non_mapping(self):
        """Test a YAML list is rejected."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "list.yaml"
            path.write_text("- one\n- two\n")

            with pytest.raises(ConfigurationError):
                Config.load(path)

    def test_load_invalid_yaml(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "broken.yaml"
            path.write_text("organizer: [unclosed\n")

            with pytest.raises(ConfigurationError) as exc_info:
                Config.load(path)

            assert isinstance(exc_info.value.cause, yaml.YAMLError)

    def test_unknown_log_level(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "levels.yaml"
            path.write_text("logging:\n  level: chatty\n")

            with pytest.raises(ConfigurationError) as exc_info:
                Config.load(path)

            assert exc_info.value.details["config_key"] == "logging.level"

    def test_save_and_reload(self):
        """Test saved configuration loads back unchanged."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "saved.yaml"
            config = Config()
            config.organizer.base_path = Path(tmp) / "Deleted Games and Apps"
            config.deduplication.max_workers = 4
            config.logging.json_format = True

            config.save(path)
            loaded = Config.load(path)

            assert loaded.organizer == config.organizer
            assert loaded.deduplication == config.deduplication
            assert loaded.logging.json_format is True
