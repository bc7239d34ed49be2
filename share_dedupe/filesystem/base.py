"""
Filesystem Capability
=====================

Abstract interface for the handful of filesystem primitives the reorganizer
and the deduplicator need. Implementations raise the standard ``OSError``
subclasses (``FileNotFoundError``, ``PermissionError``, ``FileExistsError``,
``NotADirectoryError``); callers wrap them with path and operation context.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, List


@dataclass(frozen=True)
class DirEntry:
    """A direct child of a listed directory.

    Attributes:
        name: Entry name (no directory component).
        is_dir: Whether the entry is a directory.
        is_file: Whether the entry is a regular file. Symlinks, FIFOs,
                 sockets and devices are neither a directory nor a file.
    """
    name: str
    is_dir: bool = False
    is_file: bool = False

    @property
    def is_hidden(self) -> bool:
        """Dot-files are hidden."""
        return self.name.startswith(".")


@dataclass(frozen=True)
class FileStat:
    """Subset of stat information used by the deduplicator."""
    size: int
    mtime: float = 0.0
    is_dir: bool = False
    is_file: bool = False


class FileSystem(ABC):
    """Filesystem operations consumed by the core."""

    @abstractmethod
    def list_dir(self, path: Path) -> List[DirEntry]:
        """List the direct children of a directory.

        The order of the returned entries is the listing order of the
        implementation; callers must not rely on any other ordering.

        Raises:
            FileNotFoundError: If the directory does not exist.
            NotADirectoryError: If the path is not a directory.
            PermissionError: If the directory cannot be read.
        """
        ...

    @abstractmethod
    def mkdir(self, path: Path, mode: int = 0o777) -> None:
        """Create a single directory. The parent must already exist.

        Raises:
            FileExistsError: If something already exists at ``path``.
            FileNotFoundError: If the parent does not exist.
            PermissionError: If the parent is not writable.
        """
        ...

    @abstractmethod
    def rename(self, source: Path, destination: Path) -> None:
        """Move an entry with a single rename."""
        ...

    @abstractmethod
    def open_read(self, path: Path) -> BinaryIO:
        """Open a file for streaming binary reads."""
        ...

    @abstractmethod
    def stat(self, path: Path) -> FileStat:
        """Return size, modification time and directory flag for a path."""
        ...
