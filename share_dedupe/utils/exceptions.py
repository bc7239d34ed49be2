"""
Custom Exceptions
=================

Defines custom exception classes for share-dedupe.
All exceptions include error codes for programmatic handling.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Any, List


class ErrorCode(Enum):
    """Error codes for programmatic error handling."""

    # General errors (1000-1099)
    UNKNOWN_ERROR = 1000
    CONFIGURATION_ERROR = 1001
    TARGET_DIRECTORY_MISNOMER = 1002

    # Filesystem errors (1100-1199)
    FILE_NOT_FOUND = 1100
    PERMISSION_DENIED = 1101
    ALREADY_EXISTS = 1102
    NOT_A_DIRECTORY = 1103
    IO_ERROR = 1104
    JOURNAL_CORRUPTED = 1105

    # Deduplication errors (1400-1499)
    DEDUPLICATION_FAILED = 1400
    HASH_COMPUTATION_FAILED = 1401
    INVALID_STATE = 1402


class ShareDedupeError(Exception):
    """Base exception for all share-dedupe errors.

    Attributes:
        message: Human-readable error message.
        error_code: Programmatic error code.
        details: Additional error context.
        cause: Original exception that caused this error.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[dict] = None,
        cause: Optional[Exception] = None
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Programmatic error code.
            details: Additional context as key-value pairs.
            cause: Original exception if wrapping another error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """Return a formatted error string."""
        result = f"[{self.error_code.name}] {self.message}"
        if self.details:
            result += f" | Details: {self.details}"
        if self.cause:
            result += f" | Caused by: {type(self.cause).__name__}: {self.cause}"
        return result

    def to_dict(self) -> dict:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }


class ConfigurationError(ShareDedupeError):
    """Raised when there's a configuration problem.

    Examples:
        - Invalid configuration file format
        - Invalid configuration values
        - Base path that is not a 'Deleted Games and Apps' directory
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.CONFIGURATION_ERROR,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if expected_type:
            details["expected_type"] = expected_type
        super().__init__(
            message,
            error_code=error_code,
            details=details,
            **kwargs
        )


class TargetDirectoryMisnomer(ConfigurationError):
    """Raised when the base path is not named 'Deleted Games and Apps'.

    Never touches the filesystem; the check is on the path text alone.
    """

    def __init__(self, path: Any, expected_name: str = "Deleted Games and Apps"):
        self.path = Path(path)
        self.expected_name = expected_name
        super().__init__(
            f"target directory is not named '{expected_name}'",
            error_code=ErrorCode.TARGET_DIRECTORY_MISNOMER,
            details={"path": str(path), "name": self.path.name},
        )


class FileOperationError(ShareDedupeError):
    """Raised when a filesystem operation fails.

    Carries the offending path, the operation kind (list, mkdir, rename,
    open, stat) and, for multi-step operations, the steps that had already
    completed before the failure. Nothing in ``completed`` is rolled back.
    """

    _CODES = (
        (FileNotFoundError, ErrorCode.FILE_NOT_FOUND),
        (PermissionError, ErrorCode.PERMISSION_DENIED),
        (FileExistsError, ErrorCode.ALREADY_EXISTS),
        (NotADirectoryError, ErrorCode.NOT_A_DIRECTORY),
    )

    def __init__(
        self,
        message: str,
        path: Optional[Any] = None,
        operation: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.IO_ERROR,
        completed: Optional[List[Any]] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        if path is not None:
            details["path"] = str(path)
        if operation:
            details["operation"] = operation
        super().__init__(
            message,
            error_code=error_code,
            details=details,
            **kwargs
        )
        self.path = Path(path) if path is not None else None
        self.operation = operation
        self.completed = list(completed or [])

    @classmethod
    def code_for(cls, exc: BaseException) -> ErrorCode:
        """Map an OSError subclass to an error code."""
        for exc_type, code in cls._CODES:
            if isinstance(exc, exc_type):
                return code
        return ErrorCode.IO_ERROR

    @classmethod
    def from_os_error(
        cls,
        exc: OSError,
        path: Any,
        operation: str,
        message: Optional[str] = None,
        completed: Optional[List[Any]] = None,
        details: Optional[dict] = None,
    ) -> "FileOperationError":
        """Wrap an OSError with the path and operation that produced it."""
        return cls(
            message or f"could not {operation} '{path}': {exc.strerror or exc}",
            path=path,
            operation=operation,
            error_code=cls.code_for(exc),
            completed=completed,
            details=dict(details or {}),
            cause=exc,
        )


class DeduplicationError(ShareDedupeError):
    """Raised when deduplication operations fail.

    Examples:
        - Target directory missing
        - Scan requested on a closed deduplicator
        - Hash computation failure
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        hash_type: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.DEDUPLICATION_FAILED,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        if file_path:
            details["file_path"] = file_path
        if hash_type:
            details["hash_type"] = hash_type
        super().__init__(
            message,
            error_code=error_code,
            details=details,
            **kwargs
        )
