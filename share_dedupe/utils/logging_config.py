"""
Logging Configuration
=====================

Structured logging for share-dedupe runs. Every record carries the run's
correlation id, so the lines written by one ``sort`` or ``dedupe`` command
(including those from hashing worker threads) can be picked out of a
shared log file.

The library modules only obtain loggers through ``get_logger``; handlers are
installed by the command-line shell via ``setup_logging``.
"""

import logging
import logging.handlers
import json
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, TextIO
from dataclasses import dataclass, field


ROOT_LOGGER_NAME = "share_dedupe"

# Shared by all threads; one id per run.
_correlation_id: Optional[str] = None


def new_correlation_id() -> str:
    """Start a new run and return its correlation id."""
    set_correlation_id(uuid.uuid4().hex[:8])
    return _correlation_id


def get_correlation_id() -> str:
    """Correlation id of the current run, starting one if needed."""
    if _correlation_id is None:
        return new_correlation_id()
    return _correlation_id


def set_correlation_id(correlation_id: str) -> None:
    """Use a caller-supplied correlation id for the current run."""
    global _correlation_id
    _correlation_id = correlation_id


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for the rotating log file."""

    EXTRA_FIELDS = ("file_path", "prefix", "operation", "duration_ms")

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
            "correlation_id": get_correlation_id(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for name in self.EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        return json.dumps(log_data)


class ConsoleFormatter(logging.Formatter):
    """Short, optionally coloured lines for a terminal.

    Colour is only used when ``use_color`` is set; ``setup_logging`` sets it
    when stderr is a terminal.
    """

    LEVEL_COLORS = {
        logging.DEBUG: "\033[2m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = False):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:<8}"
        if self.use_color:
            level = f"{self.LEVEL_COLORS.get(record.levelno, '')}{level}{self.RESET}"

        name = record.name
        if name.startswith(ROOT_LOGGER_NAME + "."):
            name = name[len(ROOT_LOGGER_NAME) + 1:]

        line = (
            f"{datetime.now():%H:%M:%S} {level} "
            f"[{get_correlation_id()}] {name}: {record.getMessage()}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _is_terminal(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


@dataclass
class LoggingConfig:
    """Configuration for the logging system."""
    level: str = "INFO"
    log_dir: Path = field(default_factory=lambda: Path.home() / ".share_dedupe" / "logs")
    console_output: bool = True
    file_output: bool = False
    json_format: bool = False  # Use JSON for console
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


def setup_logging(config: Optional[LoggingConfig] = None) -> None:
    """Set up the logging system.

    Args:
        config: Logging configuration. Uses defaults if not provided.
    """
    if config is None:
        config = LoggingConfig()

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, config.level.upper()))

    root_logger.handlers.clear()

    if config.console_output:
        # stderr keeps stdout free for command output
        console_handler = logging.StreamHandler(sys.stderr)
        if config.json_format:
            console_handler.setFormatter(JSONFormatter())
        else:
            console_handler.setFormatter(ConsoleFormatter(use_color=_is_terminal(sys.stderr)))
        root_logger.addHandler(console_handler)

    if config.file_output:
        config.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = config.log_dir / "share_dedupe.log"

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    root_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        name: Name of the module (typically __name__).

    Returns:
        Logger instance under the package namespace.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class Timer:
    """Context manager for timing operations and logging duration."""

    def __init__(self, logger: logging.Logger, operation: str):
        """Initialize timer.

        Args:
            logger: Logger to log the duration to.
            operation: Name of the operation being timed.
        """
        self.logger = logger
        self.operation = operation
        self.start_time = None
        self.duration_ms = None

    def __enter__(self):
        """Start the timer."""
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Stop the timer and log the duration."""
        self.duration_ms = round((time.perf_counter() - self.start_time) * 1000, 2)
        self.logger.debug(
            f"Operation completed: {self.operation} ({self.duration_ms} ms)",
            extra={"operation": self.operation, "duration_ms": self.duration_ms},
        )
        return False
