"""
Unit tests for the move journal.
"""

import tempfile
from pathlib import Path

import pytest

from share_dedupe.filesystem import MemoryFileSystem
from share_dedupe.reorganize import MoveJournal, Reorganizer, plan_relocation, prepare
from share_dedupe.utils.exceptions import ErrorCode, FileOperationError

PARENT = Path("/share")
BASE = PARENT / "Deleted Games and Apps"
FILES = ["Bugsnax_1.jpg", "Bugsnax_2.jpg", "Zelda_1.jpg"]


def make_share() -> MemoryFileSystem:
    fs = MemoryFileSystem()
    for name in FILES:
        fs.write_file(BASE / name, name.encode())
    return fs


class TestMoveJournal:
    """Tests for MoveJournal."""

    def test_run_with_journal_marks_everything_done(self):
        """Test a completed run leaves nothing pending."""
        with tempfile.TemporaryDirectory() as tmp:
            journal = MoveJournal(Path(tmp) / "journal.json")
            fs = make_share()

            Reorganizer(BASE, fs).run(journal=journal)

            assert journal.pending() == []
            assert journal.get_stats() == {"total_moves": 3, "done": 3, "pending": 0}

    def test_plan_is_persisted(self):
        """Test planned moves survive a reload."""
        with tempfile.TemporaryDirectory() as tmp:
            journal_file = Path(tmp) / "journal.json"
            fs = make_share()
            moves = plan_relocation(BASE, ["Bugsnax", "Zelda"], fs)

            MoveJournal(journal_file).record_plan(moves)
            reloaded = MoveJournal(journal_file)

            assert reloaded.pending() == moves

    def test_resume_after_interruption(self):
        """Test resume finishes pending moves and skips ones already made."""
        with tempfile.TemporaryDirectory() as tmp:
            journal_file = Path(tmp) / "journal.json"
            fs = make_share()
            prepare(BASE, ["Bugsnax", "Zelda"], fs)
            moves = plan_relocation(BASE, ["Bugsnax", "Zelda"], fs)
            MoveJournal(journal_file).record_plan(moves)

            # interrupted after the first rename, before it was journalled
            fs.rename(moves[0].source, moves[0].destination)

            journal = MoveJournal(journal_file)
            performed = journal.resume(fs)

            assert performed == moves[1:]
            assert journal.pending() == []
            for move in moves:
                assert fs.exists(move.destination)
                assert not fs.exists(move.source)

    def test_resume_failure_keeps_progress(self):
        """Test a failing resume records the moves it did make."""
        with tempfile.TemporaryDirectory() as tmp:
            journal_file = Path(tmp) / "journal.json"
            fs = make_share()
            prepare(BASE, ["Bugsnax"], fs)
            moves = plan_relocation(BASE, ["Bugsnax", "Zelda"], fs)
            journal = MoveJournal(journal_file)
            journal.record_plan(moves)

            with pytest.raises(FileOperationError) as exc_info:
                journal.resume(fs)

            assert exc_info.value.path == BASE / "Zelda_1.jpg"
            assert MoveJournal(journal_file).pending() == moves[2:]

    def test_resume_unreadable_directory(self):
        """Test a permission failure while checking progress is wrapped."""
        with tempfile.TemporaryDirectory() as tmp:
            fs = make_share()
            prepare(BASE, ["Bugsnax", "Zelda"], fs)
            journal = MoveJournal(Path(tmp) / "journal.json")
            journal.record_plan(plan_relocation(BASE, ["Bugsnax", "Zelda"], fs))
            fs.deny(BASE)

            with pytest.raises(FileOperationError) as exc_info:
                journal.resume(fs)

            err = exc_info.value
            assert err.error_code == ErrorCode.PERMISSION_DENIED
            assert err.operation == "stat"
            assert err.path == BASE / "Bugsnax_1.jpg"
            assert isinstance(err.__cause__, PermissionError)
            assert journal.get_stats()["pending"] == 3

    def test_corrupted_journal(self):
        """Test an unreadable journal is reported, not silently reset."""
        with tempfile.TemporaryDirectory() as tmp:
            journal_file = Path(tmp) / "journal.json"
            journal_file.write_text("{not json")

            with pytest.raises(FileOperationError) as exc_info:
                MoveJournal(journal_file)

            assert exc_info.value.error_code == ErrorCode.JOURNAL_CORRUPTED

    def test_clear(self):
        with tempfile.TemporaryDirectory() as tmp:
            journal = MoveJournal(Path(tmp) / "journal.json")
            journal.record_plan(plan_relocation(BASE, ["Zelda"], make_share()))

            journal.clear()

            assert journal.get_stats()["total_moves"] == 0
