"""Utilities module for share-dedupe."""

from .logging_config import (
    setup_logging,
    get_logger,
    new_correlation_id,
    LoggingConfig,
    Timer,
)
from .exceptions import (
    ErrorCode,
    ShareDedupeError,
    ConfigurationError,
    TargetDirectoryMisnomer,
    FileOperationError,
    DeduplicationError,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "new_correlation_id",
    "LoggingConfig",
    "Timer",
    "ErrorCode",
    "ShareDedupeError",
    "ConfigurationError",
    "TargetDirectoryMisnomer",
    "FileOperationError",
    "DeduplicationError",
]
