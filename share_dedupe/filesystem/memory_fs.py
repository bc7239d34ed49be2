"""
In-memory implementation of the filesystem capability.

Keeps entries in insertion order, so listings come back in the order files
were written. Used by the test-suite and for sandboxed dry runs. Permission
failures are simulated with ``deny`` rather than file modes, which lets the
same tests run as root.
"""

import errno
import io
import os
import threading
import time
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Set, Tuple, Union

from share_dedupe.filesystem.base import DirEntry, FileStat, FileSystem

PathLike = Union[str, Path]


class _File:
    __slots__ = ("data", "mtime")

    def __init__(self, data: bytes, mtime: float):
        self.data = data
        self.mtime = mtime


class _Dir:
    __slots__ = ("children", "mtime")

    def __init__(self, mtime: float):
        self.children: Dict[str, Union["_Dir", _File]] = {}
        self.mtime = mtime


def _os_error(cls, code: int, path: PathLike) -> OSError:
    return cls(code, os.strerror(code), str(path))


class MemoryFileSystem(FileSystem):
    """Dict-backed directory tree.

    Relative and absolute paths live in the same tree: ``a/b`` and ``/a/b``
    name the same node.
    """

    def __init__(self):
        self._root = _Dir(time.time())
        self._denied: Set[Tuple[str, ...]] = set()
        self._lock = threading.RLock()

    # Helpers

    @staticmethod
    def _parts(path: PathLike) -> Tuple[str, ...]:
        p = Path(path)
        return tuple(part for part in p.parts if part != p.anchor)

    def _check_traverse(self, parts: Tuple[str, ...], path: PathLike) -> None:
        for i in range(len(parts)):
            if parts[:i] in self._denied:
                raise _os_error(PermissionError, errno.EACCES, path)

    def _lookup(self, path: PathLike) -> Union[_Dir, _File]:
        parts = self._parts(path)
        self._check_traverse(parts, path)
        node: Union[_Dir, _File] = self._root
        for part in parts:
            if not isinstance(node, _Dir):
                raise _os_error(NotADirectoryError, errno.ENOTDIR, path)
            if part not in node.children:
                raise _os_error(FileNotFoundError, errno.ENOENT, path)
            node = node.children[part]
        return node

    def _parent_dir(self, path: PathLike) -> Tuple[_Dir, str]:
        parts = self._parts(path)
        if not parts:
            raise _os_error(FileExistsError, errno.EEXIST, path)
        parent_parts = parts[:-1]
        parent = self._lookup(Path(*parent_parts) if parent_parts else Path())
        if not isinstance(parent, _Dir):
            raise _os_error(NotADirectoryError, errno.ENOTDIR, path)
        if parent_parts in self._denied:
            raise _os_error(PermissionError, errno.EACCES, path)
        return parent, parts[-1]

    # Test helpers

    def deny(self, path: PathLike) -> None:
        """Make a path unreadable and unwritable, like ``chmod 000``."""
        with self._lock:
            self._denied.add(self._parts(path))

    def allow(self, path: PathLike) -> None:
        """Undo ``deny``."""
        with self._lock:
            self._denied.discard(self._parts(path))

    def makedirs(self, path: PathLike) -> None:
        """Create a directory and any missing parents."""
        with self._lock:
            node = self._root
            for part in self._parts(path):
                child = node.children.get(part)
                if child is None:
                    child = _Dir(time.time())
                    node.children[part] = child
                elif not isinstance(child, _Dir):
                    raise _os_error(NotADirectoryError, errno.ENOTDIR, path)
                node = child

    def write_file(
        self,
        path: PathLike,
        data: bytes = b"",
        mtime: Optional[float] = None,
    ) -> None:
        """Create or overwrite a file, creating parent directories."""
        with self._lock:
            parent = Path(path).parent
            self.makedirs(parent)
            node = self._lookup(parent)
            node.children[Path(path).name] = _File(
                bytes(data), time.time() if mtime is None else mtime
            )

    def exists(self, path: PathLike) -> bool:
        with self._lock:
            try:
                self._lookup(path)
            except OSError:
                return False
            return True

    def is_dir(self, path: PathLike) -> bool:
        with self._lock:
            try:
                return isinstance(self._lookup(path), _Dir)
            except OSError:
                return False

    def read_bytes(self, path: PathLike) -> bytes:
        with self._lock:
            node = self._lookup(path)
            if isinstance(node, _Dir):
                raise _os_error(IsADirectoryError, errno.EISDIR, path)
            return node.data

    # FileSystem

    def list_dir(self, path: Path) -> List[DirEntry]:
        with self._lock:
            node = self._lookup(path)
            if not isinstance(node, _Dir):
                raise _os_error(NotADirectoryError, errno.ENOTDIR, path)
            if self._parts(path) in self._denied:
                raise _os_error(PermissionError, errno.EACCES, path)
            return [
                DirEntry(
                    name=name,
                    is_dir=isinstance(child, _Dir),
                    is_file=isinstance(child, _File),
                )
                for name, child in node.children.items()
            ]

    def mkdir(self, path: Path, mode: int = 0o777) -> None:
        with self._lock:
            parent, name = self._parent_dir(path)
            if name in parent.children:
                raise _os_error(FileExistsError, errno.EEXIST, path)
            parent.children[name] = _Dir(time.time())

    def rename(self, source: Path, destination: Path) -> None:
        with self._lock:
            src_parent, src_name = self._parent_dir(source)
            if src_name not in src_parent.children:
                raise _os_error(FileNotFoundError, errno.ENOENT, source)
            dst_parent, dst_name = self._parent_dir(destination)
            node = src_parent.children[src_name]
            existing = dst_parent.children.get(dst_name)
            if isinstance(existing, _Dir) and existing is not node:
                raise _os_error(IsADirectoryError, errno.EISDIR, destination)
            del src_parent.children[src_name]
            dst_parent.children[dst_name] = node

    def open_read(self, path: Path) -> BinaryIO:
        with self._lock:
            node = self._lookup(path)
            if isinstance(node, _Dir):
                raise _os_error(IsADirectoryError, errno.EISDIR, path)
            if self._parts(path) in self._denied:
                raise _os_error(PermissionError, errno.EACCES, path)
            return io.BytesIO(node.data)

    def stat(self, path: Path) -> FileStat:
        with self._lock:
            node = self._lookup(path)
            if isinstance(node, _Dir):
                return FileStat(size=0, mtime=node.mtime, is_dir=True)
            return FileStat(size=len(node.data), mtime=node.mtime, is_file=True)
