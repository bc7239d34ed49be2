"""
share-dedupe
============

Sorts PlayStation screenshots and video clips out of the
'Deleted Games and Apps' directory and finds duplicated captures.

Features:
- Per-title sibling directories derived from filename prefixes
- Content deduplication of similarly named files
- Pluggable filesystem so everything can run against an in-memory tree
"""

__version__ = "0.1.0"

from share_dedupe.deduplication import Deduplicator, DuplicateReport
from share_dedupe.filesystem import FileSystem, MemoryFileSystem, OsFileSystem
from share_dedupe.reorganize import Reorganizer
from share_dedupe.utils.exceptions import (
    DeduplicationError,
    ErrorCode,
    FileOperationError,
    ShareDedupeError,
    TargetDirectoryMisnomer,
)

__all__ = [
    "Deduplicator",
    "DuplicateReport",
    "FileSystem",
    "MemoryFileSystem",
    "OsFileSystem",
    "Reorganizer",
    "DeduplicationError",
    "ErrorCode",
    "FileOperationError",
    "ShareDedupeError",
    "TargetDirectoryMisnomer",
]
