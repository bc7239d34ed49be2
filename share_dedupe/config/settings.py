"""
Configuration Management System
===============================

Provides dataclass-based configuration with YAML file loading support.
All settings are validated and have sensible defaults.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Any, Dict
import yaml
import logging

from share_dedupe.deduplication.deduplicator import default_max_workers
from share_dedupe.deduplication.hash_engine import (
    DEFAULT_ALGORITHM,
    DEFAULT_BUFFER_SIZE,
    validate_algorithm,
)
from share_dedupe.utils.exceptions import ConfigurationError
from share_dedupe.utils.logging_config import LoggingConfig

logger = logging.getLogger(__name__)


def _optional_path(value: Any) -> Optional[Path]:
    if value in (None, ""):
        return None
    return Path(value).expanduser()


@dataclass
class OrganizerConfig:
    """Reorganizer settings.

    Attributes:
        base_path: 'Deleted Games and Apps' directory. None means the
                   working directory at the time of the run.
        create_if_absent: Accept sibling directories that already exist.
        journal_file: Where to journal moves. None disables the journal.
    """
    base_path: Optional[Path] = None
    create_if_absent: bool = False
    journal_file: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrganizerConfig":
        """Create OrganizerConfig from dictionary."""
        if not data:
            return cls()
        return cls(
            base_path=_optional_path(data.get("base_path")),
            create_if_absent=bool(data.get("create_if_absent", cls.create_if_absent)),
            journal_file=_optional_path(data.get("journal_file")),
        )


@dataclass
class DeduplicationConfig:
    """Deduplication settings.

    Attributes:
        max_workers: Threads used for hashing.
        buffer_size: Bytes read per chunk while hashing.
        hash_algorithm: hashlib algorithm name.
        quarantine_directory: Where ``dedupe --quarantine`` moves duplicates.
    """
    max_workers: int = field(default_factory=default_max_workers)
    buffer_size: int = DEFAULT_BUFFER_SIZE
    hash_algorithm: str = DEFAULT_ALGORITHM
    quarantine_directory: Optional[Path] = None

    def __post_init__(self):
        if self.max_workers < 1:
            raise ConfigurationError(
                "max_workers must be at least 1",
                config_key="deduplication.max_workers",
                expected_type="positive int",
            )
        if self.buffer_size < 1:
            raise ConfigurationError(
                "buffer_size must be at least 1",
                config_key="deduplication.buffer_size",
                expected_type="positive int",
            )
        try:
            self.hash_algorithm = validate_algorithm(self.hash_algorithm)
        except ValueError as e:
            raise ConfigurationError(
                str(e),
                config_key="deduplication.hash_algorithm",
                cause=e,
            ) from e

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeduplicationConfig":
        """Create DeduplicationConfig from dictionary."""
        if not data:
            return cls()
        try:
            max_workers = data.get("max_workers")
            max_workers = default_max_workers() if max_workers is None else int(max_workers)
            buffer_size = int(data.get("buffer_size", DEFAULT_BUFFER_SIZE))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid deduplication setting: {e}",
                expected_type="int",
                cause=e,
            ) from e
        return cls(
            max_workers=max_workers,
            buffer_size=buffer_size,
            hash_algorithm=str(data.get("hash_algorithm", DEFAULT_ALGORITHM)),
            quarantine_directory=_optional_path(data.get("quarantine_directory")),
        )


def _logging_from_dict(data: Dict[str, Any]) -> LoggingConfig:
    if not data:
        return LoggingConfig()
    defaults = LoggingConfig()
    level = str(data.get("level", defaults.level)).upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ConfigurationError(
            f"Unknown log level: {level}",
            config_key="logging.level",
        )
    return LoggingConfig(
        level=level,
        log_dir=_optional_path(data.get("log_dir")) or defaults.log_dir,
        console_output=bool(data.get("console_output", defaults.console_output)),
        file_output=bool(data.get("file_output", defaults.file_output)),
        json_format=bool(data.get("json_format", defaults.json_format)),
    )


@dataclass
class Config:
    """Main configuration container.

    Aggregates all configuration sections and provides loading from YAML.
    """
    organizer: OrganizerConfig = field(default_factory=OrganizerConfig)
    deduplication: DeduplicationConfig = field(default_factory=DeduplicationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load configuration from YAML file.

        Args:
            config_path: Path to the configuration file. If None, looks for
                        share_dedupe.yaml in the current directory.

        Returns:
            Config instance with loaded settings.

        Raises:
            ConfigurationError: If the file is not valid YAML or a value is
                invalid.
        """
        if config_path is None:
            config_path = Path("share_dedupe.yaml")
        config_path = Path(config_path)

        if not config_path.exists():
            logger.warning(f"Config file not found at {config_path}, using defaults")
            return cls()

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse config file: {e}")
            raise ConfigurationError(
                f"Config file is not valid YAML: {config_path}",
                expected_type="YAML mapping",
                cause=e,
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file must contain a mapping: {config_path}",
                expected_type="mapping",
            )

        logger.info(f"Loaded configuration from {config_path}")
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        return cls(
            organizer=OrganizerConfig.from_dict(data.get("organizer", {})),
            deduplication=DeduplicationConfig.from_dict(data.get("deduplication", {})),
            logging=_logging_from_dict(data.get("logging", {})),
        )

    def save(self, config_path: Path) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path where to save the configuration.
        """
        def _str(path: Optional[Path]) -> Optional[str]:
            return str(path) if path is not None else None

        data = {
            "organizer": {
                "base_path": _str(self.organizer.base_path),
                "create_if_absent": self.organizer.create_if_absent,
                "journal_file": _str(self.organizer.journal_file),
            },
            "deduplication": {
                "max_workers": self.deduplication.max_workers,
                "buffer_size": self.deduplication.buffer_size,
                "hash_algorithm": self.deduplication.hash_algorithm,
                "quarantine_directory": _str(self.deduplication.quarantine_directory),
            },
            "logging": {
                "level": self.logging.level,
                "log_dir": str(self.logging.log_dir),
                "console_output": self.logging.console_output,
                "file_output": self.logging.file_output,
                "json_format": self.logging.json_format,
            },
        }

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Saved configuration to {config_path}")
