"""
Move Journal
============

Records planned relocations before any file is moved and marks each one as
it completes, so an interrupted run can be finished later.
Stores the journal in a JSON file. Nothing is ever moved back.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional
from dataclasses import dataclass, asdict
from datetime import datetime

from share_dedupe.filesystem import FileSystem
from share_dedupe.reorganize.relocator import Move, execute_moves
from share_dedupe.utils.exceptions import ErrorCode, FileOperationError
from share_dedupe.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class JournalEntry:
    """Record of a single planned move.

    Attributes:
        id: Unique identifier for this entry.
        timestamp: When the move was planned.
        source_path: Original file location.
        dest_path: Target file location.
        prefix: Title prefix the file matched.
        done: Whether the move has been carried out.
    """

    id: int
    timestamp: str
    source_path: str
    dest_path: str
    prefix: str = ""
    done: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "JournalEntry":
        """Create from dictionary."""
        return cls(**data)

    def to_move(self) -> Move:
        return Move(Path(self.source_path), Path(self.dest_path), self.prefix)


class MoveJournal:
    """Persists relocation plans and their progress.

    The journal file must live outside the directory being reorganized.
    """

    def __init__(self, journal_file: Path):
        """Initialize the journal, loading any existing entries.

        Args:
            journal_file: Path to the journal JSON file.

        Raises:
            FileOperationError: If an existing journal cannot be parsed.
        """
        self.journal_file = Path(journal_file)
        self._entries: List[JournalEntry] = []
        self._next_id = 1
        self._load()

    def _load(self) -> None:
        """Load entries from file."""
        if not self.journal_file.exists():
            return
        try:
            with open(self.journal_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._entries = [
                JournalEntry.from_dict(entry) for entry in data.get("entries", [])
            ]
            self._next_id = data.get("next_id", len(self._entries) + 1)
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            raise FileOperationError(
                f"journal is not readable: {e}",
                path=self.journal_file,
                operation="load",
                error_code=ErrorCode.JOURNAL_CORRUPTED,
                cause=e,
            ) from e
        logger.debug(f"Loaded {len(self._entries)} journal entries")

    def _save(self) -> None:
        """Save entries to file."""
        self.journal_file.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "next_id": self._next_id,
            "entries": [entry.to_dict() for entry in self._entries],
        }
        with open(self.journal_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def record_plan(self, moves: List[Move]) -> List[JournalEntry]:
        """Record moves that are about to be performed.

        Returns:
            The created entries.
        """
        timestamp = datetime.now().isoformat()
        created = []
        for move in moves:
            entry = JournalEntry(
                id=self._next_id,
                timestamp=timestamp,
                source_path=str(move.source),
                dest_path=str(move.destination),
                prefix=move.prefix,
            )
            self._next_id += 1
            self._entries.append(entry)
            created.append(entry)

        self._save()
        logger.debug(f"Journalled {len(created)} planned moves")
        return created

    def _find_pending(self, move: Move) -> Optional[JournalEntry]:
        for entry in self._entries:
            if (
                not entry.done
                and entry.source_path == str(move.source)
                and entry.dest_path == str(move.destination)
            ):
                return entry
        return None

    def mark_done(self, move: Move) -> None:
        """Mark a planned move as completed."""
        entry = self._find_pending(move)
        if entry is None:
            logger.warning(f"Move not in journal: {move.source}")
            return
        entry.done = True
        self._save()

    def pending(self) -> List[Move]:
        """Moves recorded but not yet completed, in plan order."""
        return [entry.to_move() for entry in self._entries if not entry.done]

    def resume(self, filesystem: FileSystem) -> List[Move]:
        """Carry out the pending moves.

        A move whose source is gone while its destination exists already
        happened before the journal was updated; it is marked done without
        touching the filesystem.

        Returns:
            Moves performed by this call.

        Raises:
            FileOperationError: If a recorded path cannot be checked, or on
                the first failed rename.
        """
        remaining = []
        for move in self.pending():
            if not _exists(filesystem, move.source) and _exists(filesystem, move.destination):
                logger.info(f"Already moved: {move.source.name}")
                self.mark_done(move)
            else:
                remaining.append(move)

        completed = execute_moves(remaining, filesystem, self)
        logger.info(f"Resumed {len(completed)} moves from {self.journal_file}")
        return completed

    def get_stats(self) -> Dict:
        """Get journal statistics."""
        return {
            "total_moves": len(self._entries),
            "done": sum(1 for e in self._entries if e.done),
            "pending": sum(1 for e in self._entries if not e.done),
        }

    def clear(self) -> None:
        """Forget all entries."""
        self._entries.clear()
        self._next_id = 1
        self._save()
        logger.info("Journal cleared")


def _exists(filesystem: FileSystem, path: Path) -> bool:
    try:
        filesystem.stat(path)
    except FileNotFoundError:
        return False
    except OSError as e:
        raise FileOperationError.from_os_error(e, path, "stat") from e
    return True
