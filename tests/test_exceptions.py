"""
Unit tests for the error types and logging helpers.
"""

import errno
import json
import logging
import threading
from pathlib import Path

from share_dedupe.utils.exceptions import (
    ConfigurationError,
    ErrorCode,
    FileOperationError,
    ShareDedupeError,
    TargetDirectoryMisnomer,
)
from share_dedupe.utils.logging_config import (
    ConsoleFormatter,
    JSONFormatter,
    Timer,
    get_correlation_id,
    get_logger,
    new_correlation_id,
)


class TestShareDedupeError:
    """Tests for the base error."""

    def test_str_includes_code_details_and_cause(self):
        cause = ValueError("bad")
        error = ShareDedupeError(
            "Something failed",
            error_code=ErrorCode.IO_ERROR,
            details={"path": "/x"},
            cause=cause,
        )

        text = str(error)

        assert text.startswith("[IO_ERROR] Something failed")
        assert "'path': '/x'" in text
        assert "Caused by: ValueError: bad" in text

    def test_to_dict(self):
        error = ConfigurationError("Bad value", config_key="logging.level")

        data = error.to_dict()

        assert data["error_type"] == "ConfigurationError"
        assert data["error_code"] == 1001
        assert data["details"] == {"config_key": "logging.level"}
        assert data["cause"] is None


class TestTargetDirectoryMisnomer:
    """Tests for TargetDirectoryMisnomer."""

    def test_carries_path(self):
        error = TargetDirectoryMisnomer("/share/Screenshots")

        assert error.path == Path("/share/Screenshots")
        assert error.expected_name == "Deleted Games and Apps"
        assert error.error_code == ErrorCode.TARGET_DIRECTORY_MISNOMER
        assert isinstance(error, ConfigurationError)


class TestFileOperationError:
    """Tests for FileOperationError."""

    def test_code_mapping(self):
        assert FileOperationError.code_for(FileNotFoundError()) == ErrorCode.FILE_NOT_FOUND
        assert FileOperationError.code_for(PermissionError()) == ErrorCode.PERMISSION_DENIED
        assert FileOperationError.code_for(FileExistsError()) == ErrorCode.ALREADY_EXISTS
        assert FileOperationError.code_for(NotADirectoryError()) == ErrorCode.NOT_A_DIRECTORY
        assert FileOperationError.code_for(OSError(errno.EIO, "I/O error")) == ErrorCode.IO_ERROR

    def test_from_os_error(self):
        cause = PermissionError(errno.EACCES, "Permission denied", "/d/Zelda")

        error = FileOperationError.from_os_error(
            cause, Path("/d/Zelda"), "mkdir", completed=[Path("/d/Bugsnax")]
        )

        assert error.error_code == ErrorCode.PERMISSION_DENIED
        assert error.path == Path("/d/Zelda")
        assert error.operation == "mkdir"
        assert error.completed == [Path("/d/Bugsnax")]
        assert error.cause is cause
        assert error.message == "could not mkdir '/d/Zelda': Permission denied"

    def test_completed_is_copied(self):
        done = [Path("a")]
        error = FileOperationError("failed", completed=done)
        done.append(Path("b"))

        assert error.completed == [Path("a")]


class TestLogging:
    """Tests for logger naming and formatting."""

    def test_get_logger_namespace(self):
        assert get_logger("reorganize").name == "share_dedupe.reorganize"
        assert get_logger("share_dedupe.config").name == "share_dedupe.config"

    def test_json_formatter_extra_fields(self):
        record = logging.LogRecord(
            "share_dedupe.test", logging.INFO, __file__, 1, "moved", None, None
        )
        record.file_path = "/d/a.jpg"

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "moved"
        assert data["file_path"] == "/d/a.jpg"
        assert data["level"] == "INFO"

    def test_timer_records_duration(self):
        with Timer(get_logger("test"), "noop") as timer:
            pass

        assert timer.duration_ms is not None
        assert timer.duration_ms >= 0

    def test_console_formatter_plain(self):
        record = logging.LogRecord(
            "share_dedupe.deduplication", logging.WARNING, __file__, 1, "skipped", None, None
        )

        line = ConsoleFormatter(use_color=False).format(record)

        assert "\033[" not in line
        assert "WARNING" in line
        assert "deduplication: skipped" in line

    def test_correlation_id_shared_by_threads(self):
        """Test worker threads log under the run's correlation id."""
        run_id = new_correlation_id()
        seen = []

        worker = threading.Thread(target=lambda: seen.append(get_correlation_id()))
        worker.start()
        worker.join()

        assert seen == [run_id]
