"""Filesystem capability and its implementations."""

from .base import DirEntry, FileStat, FileSystem
from .os_fs import OsFileSystem
from .memory_fs import MemoryFileSystem

__all__ = [
    "DirEntry",
    "FileStat",
    "FileSystem",
    "OsFileSystem",
    "MemoryFileSystem",
]
