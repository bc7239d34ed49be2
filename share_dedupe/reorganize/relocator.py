"""
File Relocation
===============

Moves media files out of the 'Deleted Games and Apps' directory and into the
per-title sibling directories created by ``prepare``.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional

from share_dedupe.filesystem import FileSystem
from share_dedupe.reorganize.preparer import sibling_path
from share_dedupe.utils.exceptions import FileOperationError
from share_dedupe.utils.logging_config import get_logger

if TYPE_CHECKING:
    from share_dedupe.reorganize.journal import MoveJournal

logger = get_logger(__name__)


@dataclass(frozen=True)
class Move:
    """A single planned or completed file move.

    Attributes:
        source: Current location inside the base path.
        destination: Location inside the sibling directory.
        prefix: Title prefix that matched the file.
    """
    source: Path
    destination: Path
    prefix: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "source": str(self.source),
            "destination": str(self.destination),
            "prefix": self.prefix,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Move":
        """Create from dictionary."""
        return cls(
            source=Path(data["source"]),
            destination=Path(data["destination"]),
            prefix=data.get("prefix", ""),
        )


def plan_relocation(
    base_path: Path,
    prefixes: Iterable[str],
    filesystem: FileSystem,
) -> List[Move]:
    """Work out which entries go where, without moving anything.

    The base path is listed afresh. For each prefix, in order, every entry
    whose name starts with the prefix is matched. The test is a plain string
    prefix test, so ``Control`` also matches ``Controller_1.jpg``.

    Raises:
        FileOperationError: If the base path cannot be listed.
    """
    base_path = Path(base_path)

    try:
        entries = filesystem.list_dir(base_path)
    except OSError as e:
        raise FileOperationError.from_os_error(
            e, base_path, "list",
            message=f"could not read directory '{base_path}': {e.strerror or e}",
        ) from e

    moves: List[Move] = []
    for prefix in prefixes:
        destination_dir = sibling_path(base_path, prefix)
        for entry in entries:
            if entry.name.startswith(prefix):
                moves.append(Move(
                    source=base_path / entry.name,
                    destination=destination_dir / entry.name,
                    prefix=prefix,
                ))

    return moves


def execute_moves(
    moves: Iterable[Move],
    filesystem: FileSystem,
    journal: Optional["MoveJournal"] = None,
) -> List[Move]:
    """Perform moves one rename at a time.

    Raises:
        FileOperationError: On the first failed rename. Moves already made
            stay made and are listed in ``completed``.
    """
    completed: List[Move] = []

    for move in moves:
        try:
            filesystem.rename(move.source, move.destination)
        except OSError as e:
            raise FileOperationError.from_os_error(
                e, move.source, "rename",
                message=f"could not move file '{move.source}': {e.strerror or e}",
                completed=completed,
                details={"destination": str(move.destination)},
            ) from e

        completed.append(move)
        if journal is not None:
            journal.mark_done(move)
        logger.debug(
            f"Moved: {move.source.name} -> {move.destination.parent}",
            extra={"file_path": str(move.source), "prefix": move.prefix},
        )

    return completed


def relocate(
    base_path: Path,
    prefixes: Iterable[str],
    filesystem: FileSystem,
    journal: Optional["MoveJournal"] = None,
) -> List[Move]:
    """Move every file matching a prefix into that prefix's sibling directory.

    Args:
        base_path: The 'Deleted Games and Apps' directory.
        prefixes: Title prefixes, usually from ``discover_prefixes``.
        filesystem: Filesystem to operate on.
        journal: Optional journal that records the plan before any move and
            each move as it completes.

    Returns:
        The moves performed, in order.

    Raises:
        FileOperationError: If listing or any rename fails.
    """
    moves = plan_relocation(base_path, prefixes, filesystem)

    if journal is not None:
        journal.record_plan(moves)

    completed = execute_moves(moves, filesystem, journal)
    logger.info(f"Relocated {len(completed)} files out of {base_path}")
    return completed
