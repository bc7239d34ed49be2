"""
Unit tests for the filesystem implementations.
"""

import os
import tempfile
from pathlib import Path

import pytest

from share_dedupe.filesystem import DirEntry, MemoryFileSystem, OsFileSystem


class TestMemoryFileSystem:
    """Tests for MemoryFileSystem."""

    def test_listing_keeps_insertion_order(self):
        fs = MemoryFileSystem()
        for name in ["b.jpg", "a.jpg", "c.jpg"]:
            fs.write_file(Path("/d") / name)

        assert [e.name for e in fs.list_dir(Path("/d"))] == ["b.jpg", "a.jpg", "c.jpg"]

    def test_entries_report_directories(self):
        fs = MemoryFileSystem()
        fs.makedirs("/d/sub")
        fs.write_file("/d/file.jpg")

        assert fs.list_dir(Path("/d")) == [
            DirEntry("sub", is_dir=True),
            DirEntry("file.jpg", is_file=True),
        ]

    def test_relative_and_absolute_share_tree(self):
        fs = MemoryFileSystem()
        fs.write_file("a/b.txt", b"x")

        assert fs.read_bytes("/a/b.txt") == b"x"

    def test_mkdir_is_not_recursive(self):
        fs = MemoryFileSystem()

        with pytest.raises(FileNotFoundError):
            fs.mkdir(Path("/missing/child"))

    def test_mkdir_existing(self):
        fs = MemoryFileSystem()
        fs.makedirs("/d")

        with pytest.raises(FileExistsError):
            fs.mkdir(Path("/d"))

    def test_rename_moves_node(self):
        fs = MemoryFileSystem()
        fs.write_file("/d/a.jpg", b"data")
        fs.makedirs("/e")

        fs.rename(Path("/d/a.jpg"), Path("/e/a.jpg"))

        assert not fs.exists("/d/a.jpg")
        assert fs.read_bytes("/e/a.jpg") == b"data"

    def test_rename_missing_source(self):
        fs = MemoryFileSystem()
        fs.makedirs("/d")

        with pytest.raises(FileNotFoundError):
            fs.rename(Path("/d/a.jpg"), Path("/d/b.jpg"))

    def test_rename_onto_directory(self):
        fs = MemoryFileSystem()
        fs.write_file("/d/a.jpg")
        fs.makedirs("/d/target")

        with pytest.raises(IsADirectoryError):
            fs.rename(Path("/d/a.jpg"), Path("/d/target"))

    def test_denied_directory(self):
        """Test a denied directory cannot be listed, entered or written."""
        fs = MemoryFileSystem()
        fs.write_file("/d/a.jpg")
        fs.deny("/d")

        with pytest.raises(PermissionError):
            fs.list_dir(Path("/d"))
        with pytest.raises(PermissionError):
            fs.open_read(Path("/d/a.jpg"))
        with pytest.raises(PermissionError):
            fs.mkdir(Path("/d/new"))

        assert fs.stat(Path("/d")).is_dir

        fs.allow("/d")
        assert len(fs.list_dir(Path("/d"))) == 1

    def test_stat(self):
        fs = MemoryFileSystem()
        fs.write_file("/d/a.jpg", b"12345", mtime=42.0)

        st = fs.stat(Path("/d/a.jpg"))

        assert st.size == 5
        assert st.mtime == 42.0
        assert st.is_dir is False
        assert st.is_file is True

    def test_open_directory(self):
        fs = MemoryFileSystem()
        fs.makedirs("/d")

        with pytest.raises(IsADirectoryError):
            fs.open_read(Path("/d"))

    def test_file_used_as_directory(self):
        fs = MemoryFileSystem()
        fs.write_file("/d/a.jpg")

        with pytest.raises(NotADirectoryError):
            fs.list_dir(Path("/d/a.jpg"))


class TestOsFileSystem:
    """Tests for OsFileSystem."""

    def test_listing_sorted_by_name(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for name in ["b.jpg", "c.jpg", "a.jpg"]:
                (root / name).write_bytes(b"")
            (root / "sub").mkdir()

            entries = OsFileSystem().list_dir(root)

            assert [e.name for e in entries] == ["a.jpg", "b.jpg", "c.jpg", "sub"]
            assert [e.is_dir for e in entries] == [False, False, False, True]

    def test_mkdir_rename_stat(self):
        fs = OsFileSystem()
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a.jpg").write_bytes(b"abc")

            fs.mkdir(root / "dir")
            fs.rename(root / "a.jpg", root / "dir" / "a.jpg")

            assert fs.stat(root / "dir").is_dir
            assert fs.stat(root / "dir" / "a.jpg").size == 3
            with fs.open_read(root / "dir" / "a.jpg") as f:
                assert f.read() == b"abc"

            with pytest.raises(FileExistsError):
                fs.mkdir(root / "dir")

    def test_list_missing_directory(self):
        with tempfile.TemporaryDirectory() as tmp:
            with pytest.raises(FileNotFoundError):
                OsFileSystem().list_dir(Path(tmp) / "missing")

    @pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="needs POSIX symlinks")
    def test_symlinks_are_neither_file_nor_directory(self):
        """Test links are reported without following them."""
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a.jpg").write_bytes(b"abc")
            (root / "dir").mkdir()
            os.symlink(root / "a.jpg", root / "link.jpg")
            os.symlink(root / "dir", root / "link-dir")

            entries = {e.name: e for e in OsFileSystem().list_dir(root)}

            assert entries["a.jpg"].is_file
            assert entries["dir"].is_dir
            for name in ("link.jpg", "link-dir"):
                assert not entries[name].is_file
                assert not entries[name].is_dir

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs os.mkfifo")
    def test_fifo_is_not_a_regular_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            fifo = Path(tmp) / "pipe"
            os.mkfifo(fifo)

            [entry] = OsFileSystem().list_dir(Path(tmp))

            assert entry.is_file is False
            assert OsFileSystem().stat(fifo).is_file is False
