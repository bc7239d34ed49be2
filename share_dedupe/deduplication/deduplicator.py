"""
Deduplicator
============

Walks a directory tree, checksums files with similar names and marks the
duplicate files. Scanning only reports; moving duplicates out of the way is
a separate, explicit call to ``quarantine``.
"""

import os
import threading
from concurrent.futures import CancelledError, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from share_dedupe.deduplication.grouping import candidate_groups
from share_dedupe.deduplication.hash_engine import (
    DEFAULT_ALGORITHM,
    DEFAULT_BUFFER_SIZE,
    FullHasher,
)
from share_dedupe.filesystem import FileSystem, OsFileSystem
from share_dedupe.utils.exceptions import (
    ConfigurationError,
    DeduplicationError,
    ErrorCode,
    FileOperationError,
)
from share_dedupe.utils.logging_config import Timer, get_logger

logger = get_logger(__name__)


def default_max_workers() -> int:
    """Worker count used when none is configured."""
    return min(32, (os.cpu_count() or 1) + 4)


class DeduplicatorState(Enum):
    """Lifecycle of a Deduplicator."""
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    CLOSED = "closed"


@dataclass
class ScanWarning:
    """A file or directory the scan had to skip."""
    path: Path
    message: str
    error_code: ErrorCode = ErrorCode.IO_ERROR

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "path": str(self.path),
            "message": self.message,
            "error_code": self.error_code.name,
        }


@dataclass
class DuplicateReport:
    """Result of a duplicate scan.

    Attributes:
        directory: The scanned directory.
        duplicates: Canonical file -> its duplicates, both sorted by path.
        checksums: Digest of every file that was hashed.
        files_scanned: Regular files found by the walk.
        files_hashed: Files whose digest was computed.
        warnings: Entries skipped because they could not be read.
        cancelled: Whether the scan stopped early.
    """
    directory: Path
    duplicates: Dict[Path, List[Path]] = field(default_factory=dict)
    checksums: Dict[Path, str] = field(default_factory=dict)
    files_scanned: int = 0
    files_hashed: int = 0
    warnings: List[ScanWarning] = field(default_factory=list)
    cancelled: bool = False

    @property
    def duplicate_count(self) -> int:
        return sum(len(dupes) for dupes in self.duplicates.values())

    def is_duplicate(self, path: Union[str, Path]) -> bool:
        """Whether a path was flagged as a duplicate (canonicals are not)."""
        path = Path(path)
        return any(path in dupes for dupes in self.duplicates.values())

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "directory": str(self.directory),
            "duplicates": {
                str(canonical): [str(d) for d in dupes]
                for canonical, dupes in self.duplicates.items()
            },
            "files_scanned": self.files_scanned,
            "files_hashed": self.files_hashed,
            "duplicate_count": self.duplicate_count,
            "warnings": [w.to_dict() for w in self.warnings],
            "cancelled": self.cancelled,
        }


class Deduplicator:
    """Finds content duplicates among similarly named files.

    Algorithm:
    1. Walk every regular file under the directory
    2. Group files by normalised name (counters and timestamps removed)
    3. Within a group, only files of equal size are candidates
    4. Hash candidates in a bounded thread pool
    5. Equal digests in a group form a duplicate set; the first path in
       sort order is canonical
    """

    def __init__(
        self,
        directory: Union[str, Path],
        filesystem: Optional[FileSystem] = None,
        max_workers: Optional[int] = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        algorithm: str = DEFAULT_ALGORITHM,
    ):
        """Create a Deduplicator for the given directory, ready to walk it.

        Args:
            directory: Root of the tree to scan.
            filesystem: Filesystem to operate on. Defaults to the host OS.
            max_workers: Hashing threads. Defaults to ``default_max_workers()``.
            buffer_size: Bytes read per chunk while hashing.
            algorithm: hashlib algorithm name.

        Raises:
            DeduplicationError: If the directory is missing or not a directory.
            ConfigurationError: If the worker count, buffer size or
                algorithm is invalid.
        """
        self.state = DeduplicatorState.UNINITIALIZED
        self.directory = Path(directory)
        self.filesystem = filesystem if filesystem is not None else OsFileSystem()

        try:
            st = self.filesystem.stat(self.directory)
        except OSError as e:
            raise DeduplicationError(
                f"Cannot open directory: {e.strerror or e}",
                file_path=str(self.directory),
                error_code=FileOperationError.code_for(e),
                cause=e,
            ) from e
        if not st.is_dir:
            raise DeduplicationError(
                "Not a directory",
                file_path=str(self.directory),
                error_code=ErrorCode.NOT_A_DIRECTORY,
            )

        if max_workers is not None and max_workers < 1:
            raise ConfigurationError(
                f"max_workers must be at least 1, got {max_workers}",
                config_key="max_workers",
                expected_type="positive int",
            )

        try:
            self.hasher = FullHasher(self.filesystem, algorithm=algorithm, buffer_size=buffer_size)
        except ValueError as e:
            raise ConfigurationError(str(e), cause=e) from e
        self.max_workers = max_workers or default_max_workers()
        self._executor: Optional[ThreadPoolExecutor] = None
        self.state = DeduplicatorState.READY

    def __enter__(self) -> "Deduplicator":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        """Release the worker pool. Safe to call more than once."""
        if self._executor is not None:
            self._executor.shutdown(wait=True, cancel_futures=True)
            self._executor = None
        self.state = DeduplicatorState.CLOSED

    def _require_ready(self) -> None:
        if self.state is not DeduplicatorState.READY:
            raise DeduplicationError(
                f"Deduplicator is {self.state.value}",
                file_path=str(self.directory),
                error_code=ErrorCode.INVALID_STATE,
            )

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix="dedupe-hash",
            )
        return self._executor

    def _walk(self, warnings: List[ScanWarning]) -> List[Path]:
        """Every regular file under the root, depth first.

        Symlinks are not followed and, like FIFOs and device nodes, are
        left out.
        """
        files: List[Path] = []
        stack = [self.directory]

        while stack:
            current = stack.pop()
            try:
                entries = self.filesystem.list_dir(current)
            except OSError as e:
                self._warn(warnings, current, e)
                continue

            subdirs = []
            for entry in entries:
                path = current / entry.name
                if entry.is_dir:
                    subdirs.append(path)
                elif entry.is_file:
                    files.append(path)
                else:
                    logger.debug(f"Skipping non-regular entry: {path}")
            stack.extend(reversed(subdirs))

        return files

    def _warn(
        self,
        warnings: List[ScanWarning],
        path: Path,
        error: Exception,
    ) -> None:
        if isinstance(error, DeduplicationError):
            code = error.error_code
            message = error.message
        else:
            code = FileOperationError.code_for(error)
            message = getattr(error, "strerror", None) or str(error)
        warnings.append(ScanWarning(path=path, message=message, error_code=code))
        logger.warning(f"Skipping {path}: {message}", extra={"file_path": str(path)})

    def _size_candidates(
        self,
        members: List[Path],
        warnings: List[ScanWarning],
    ) -> List[Path]:
        """Members that share their size with at least one other member."""
        by_size: Dict[int, List[Path]] = {}
        for path in members:
            try:
                st = self.filesystem.stat(path)
            except OSError as e:
                self._warn(warnings, path, e)
                continue
            if not st.is_file:
                continue
            by_size.setdefault(st.size, []).append(path)

        candidates = [
            path
            for paths in by_size.values() if len(paths) >= 2
            for path in paths
        ]
        return sorted(candidates, key=str)

    def _hash_one(
        self,
        path: Path,
        cancel_event: Optional[threading.Event],
    ) -> Optional[str]:
        if cancel_event is not None and cancel_event.is_set():
            return None
        return self.hasher.compute(path, cancel_event)

    def _hash_all(
        self,
        paths: List[Path],
        warnings: List[ScanWarning],
        cancel_event: Optional[threading.Event],
    ) -> Dict[Path, str]:
        checksums: Dict[Path, str] = {}
        if not paths:
            return checksums

        executor = self._get_executor()
        futures = {
            executor.submit(self._hash_one, path, cancel_event): path
            for path in paths
        }

        for future in as_completed(futures):
            path = futures[future]
            try:
                digest = future.result()
            except CancelledError:
                continue
            except DeduplicationError as e:
                self._warn(warnings, path, e)
                continue

            if digest is not None:
                checksums[path] = digest

            if cancel_event is not None and cancel_event.is_set():
                for pending in futures:
                    pending.cancel()

        return checksums

    def scan(self, cancel_event: Optional[threading.Event] = None) -> DuplicateReport:
        """Walk the directory and report duplicates.

        Unreadable files and directories are skipped and recorded as
        warnings. Setting ``cancel_event`` stops further hashing; the report
        then covers only files hashed completely and has ``cancelled`` set.

        Returns:
            The duplicate report.

        Raises:
            DeduplicationError: If the deduplicator has been closed.
        """
        self._require_ready()

        report = DuplicateReport(directory=self.directory)
        warnings: List[ScanWarning] = []

        with Timer(logger, "dedupe-scan"):
            files = self._walk(warnings)
            groups = candidate_groups(files)

            grouped: List[Tuple[str, List[Path]]] = []
            to_hash: List[Path] = []
            report.files_scanned = len(files)
            for key, members in groups:
                candidates = self._size_candidates(members, warnings)
                if candidates:
                    grouped.append((key, candidates))
                    to_hash.extend(candidates)

            checksums = self._hash_all(sorted(to_hash, key=str), warnings, cancel_event)

        report.checksums = dict(sorted(checksums.items(), key=lambda item: str(item[0])))
        report.files_hashed = len(checksums)
        report.cancelled = cancel_event is not None and cancel_event.is_set()

        for key, members in grouped:
            by_digest: Dict[str, List[Path]] = {}
            for path in members:
                digest = checksums.get(path)
                if digest is not None:
                    by_digest.setdefault(digest, []).append(path)

            for paths in by_digest.values():
                if len(paths) < 2:
                    continue
                canonical, *dupes = sorted(paths, key=str)
                report.duplicates[canonical] = dupes
                logger.info(
                    f"Duplicates of {canonical.name}: {', '.join(p.name for p in dupes)}",
                    extra={"file_path": str(canonical)},
                )

        report.duplicates = dict(sorted(report.duplicates.items(), key=lambda item: str(item[0])))
        report.warnings = sorted(warnings, key=lambda w: str(w.path))

        logger.info(
            f"Scanned {report.files_scanned} files, hashed {report.files_hashed}, "
            f"found {report.duplicate_count} duplicates"
            + (" (cancelled)" if report.cancelled else "")
        )
        return report

    def _ensure_dir(self, path: Path) -> None:
        try:
            self.filesystem.mkdir(path)
        except FileExistsError:
            pass

    def _exists(self, path: Path) -> bool:
        try:
            self.filesystem.stat(path)
        except FileNotFoundError:
            return False
        return True

    def quarantine(
        self,
        report: DuplicateReport,
        destination: Union[str, Path],
    ) -> List[Path]:
        """Move every flagged duplicate under ``destination``.

        Each duplicate keeps its path relative to the scanned directory.
        ``destination`` is created if missing; its parent must exist.
        Canonical files are never moved, and nothing already in
        ``destination`` is ever replaced.

        Returns:
            New locations of the moved files.

        Raises:
            DeduplicationError: If the deduplicator has been closed.
            FileOperationError: On the first failure, including
                ``ALREADY_EXISTS`` when the target path is taken; files
                already moved are listed in ``completed``.
        """
        self._require_ready()
        destination = Path(destination)
        moved: List[Path] = []

        for dupes in report.duplicates.values():
            for dup in dupes:
                target = destination / dup.relative_to(report.directory)
                step = "mkdir"
                current = destination
                try:
                    self._ensure_dir(destination)
                    for part in target.parent.relative_to(destination).parts:
                        current = current / part
                        self._ensure_dir(current)
                    step = "stat"
                    current = target
                    if self._exists(target):
                        raise FileOperationError(
                            f"could not quarantine '{dup}': '{target}' already exists",
                            path=target,
                            operation="rename",
                            error_code=ErrorCode.ALREADY_EXISTS,
                            completed=moved,
                            details={"source": str(dup)},
                        )
                    step = "rename"
                    current = dup
                    self.filesystem.rename(dup, target)
                except OSError as e:
                    raise FileOperationError.from_os_error(
                        e, current, step, completed=moved,
                        details={"destination": str(target)},
                    ) from e

                moved.append(target)
                logger.info(f"Quarantined duplicate: {dup} -> {target}")

        return moved
