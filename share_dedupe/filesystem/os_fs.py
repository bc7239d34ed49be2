"""
Host filesystem implementation of the filesystem capability.
"""

import os
import stat as stat_module
from pathlib import Path
from typing import BinaryIO, List

from share_dedupe.filesystem.base import DirEntry, FileStat, FileSystem


class OsFileSystem(FileSystem):
    """FileSystem backed by the operating system.

    ``list_dir`` returns entries sorted by name, so listings are stable
    across platforms whose native directory order differs.
    """

    def list_dir(self, path: Path) -> List[DirEntry]:
        entries = []
        with os.scandir(path) as it:
            for entry in it:
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                    is_file = entry.is_file(follow_symlinks=False)
                except OSError:
                    is_dir = is_file = False
                entries.append(DirEntry(name=entry.name, is_dir=is_dir, is_file=is_file))
        entries.sort(key=lambda e: e.name)
        return entries

    def mkdir(self, path: Path, mode: int = 0o777) -> None:
        os.mkdir(path, mode)

    def rename(self, source: Path, destination: Path) -> None:
        os.rename(source, destination)

    def open_read(self, path: Path) -> BinaryIO:
        return open(path, "rb")

    def stat(self, path: Path) -> FileStat:
        st = os.stat(path)
        return FileStat(
            size=st.st_size,
            mtime=st.st_mtime,
            is_dir=stat_module.S_ISDIR(st.st_mode),
            is_file=stat_module.S_ISREG(st.st_mode),
        )
