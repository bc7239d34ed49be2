"""
Reorganizer
===========

Sorts screenshots and video clips from the 'Deleted Games and Apps'
directory into individual directories, created as siblings of the
'Deleted ...' directory, one per filename prefix found. The prefix in front
of the timestamp in each filename is the name of the game or app.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from share_dedupe.filesystem import FileSystem, OsFileSystem
from share_dedupe.reorganize.journal import MoveJournal
from share_dedupe.reorganize.preparer import prepare
from share_dedupe.reorganize.prefixes import discover_prefixes
from share_dedupe.reorganize.relocator import Move, plan_relocation, relocate
from share_dedupe.utils.exceptions import FileOperationError, TargetDirectoryMisnomer
from share_dedupe.utils.logging_config import Timer, get_logger

logger = get_logger(__name__)

BASE_DIRECTORY_NAME = "Deleted Games and Apps"


@dataclass
class ReorganizeResult:
    """Outcome of a full discover, prepare and relocate run."""
    base_path: Path
    prefixes: List[str] = field(default_factory=list)
    created: List[Path] = field(default_factory=list)
    moves: List[Move] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "base_path": str(self.base_path),
            "prefixes": list(self.prefixes),
            "created": [str(p) for p in self.created],
            "moves": [m.to_dict() for m in self.moves],
        }


def validate_base_path(base_path: Union[str, Path]) -> Path:
    """Check that a path names a 'Deleted Games and Apps' directory.

    Only the final path component is compared, exactly and case-sensitively.
    The filesystem is not touched.

    Raises:
        TargetDirectoryMisnomer: If the name does not match.
    """
    path = Path(base_path)
    if path.name != BASE_DIRECTORY_NAME:
        raise TargetDirectoryMisnomer(path, BASE_DIRECTORY_NAME)
    return path


class Reorganizer:
    """Organises media found under a 'Deleted Games and Apps' directory.

    Prefix discovery is lazy: nothing is read until the prefixes are first
    needed, after which they are cached until ``discover_prefixes`` is called
    with ``refresh=True``.
    """

    def __init__(
        self,
        base_path: Union[str, Path],
        filesystem: Optional[FileSystem] = None,
    ):
        """Bind a reorganizer to its base path.

        Args:
            base_path: The 'Deleted Games and Apps' directory.
            filesystem: Filesystem to operate on. Defaults to the host OS.

        Raises:
            TargetDirectoryMisnomer: If the base path is misnamed.
        """
        self._base_path = validate_base_path(base_path)
        self.filesystem = filesystem if filesystem is not None else OsFileSystem()
        self._prefixes: Optional[List[str]] = None

    @classmethod
    def from_working_directory(
        cls, filesystem: Optional[FileSystem] = None
    ) -> "Reorganizer":
        """Create a reorganizer for the current working directory.

        Raises:
            FileOperationError: If the working directory no longer exists.
            TargetDirectoryMisnomer: If it is misnamed.
        """
        try:
            cwd = Path.cwd()
        except OSError as e:
            raise FileOperationError.from_os_error(
                e, ".", "getcwd",
                message=f"could not get working directory: {e.strerror or e}",
            ) from e
        return cls(cwd, filesystem)

    @property
    def base_path(self) -> Path:
        return self._base_path

    def discover_prefixes(self, refresh: bool = False) -> List[str]:
        """Return the title prefixes found in the base path.

        Args:
            refresh: Re-list the directory instead of using the cached result.

        Returns:
            A copy of the ordered prefix list.
        """
        if self._prefixes is None or refresh:
            self._prefixes = discover_prefixes(self._base_path, self.filesystem)
        return list(self._prefixes)

    @property
    def names(self) -> List[str]:
        """All app/game name prefixes discovered in the base directory."""
        return self.discover_prefixes()

    def prepare(self, exist_ok: bool = False) -> List[Path]:
        """Create a sibling directory for each discovered prefix.

        See ``share_dedupe.reorganize.preparer.prepare``.
        """
        return prepare(self._base_path, self.names, self.filesystem, exist_ok=exist_ok)

    def plan(self) -> List[Move]:
        """The moves ``relocate`` would perform right now."""
        return plan_relocation(self._base_path, self.names, self.filesystem)

    def relocate(self, journal: Optional[MoveJournal] = None) -> List[Move]:
        """Move the media files into their sibling directories.

        See ``share_dedupe.reorganize.relocator.relocate``.
        """
        return relocate(self._base_path, self.names, self.filesystem, journal=journal)

    def run(
        self,
        exist_ok: bool = False,
        journal: Optional[MoveJournal] = None,
    ) -> ReorganizeResult:
        """Discover, prepare and relocate in one go.

        Prefixes are re-discovered so the run reflects the directory as it is
        now.
        """
        with Timer(logger, "reorganize"):
            result = ReorganizeResult(base_path=self._base_path)
            result.prefixes = self.discover_prefixes(refresh=True)
            result.created = self.prepare(exist_ok=exist_ok)
            result.moves = self.relocate(journal=journal)

        logger.info(
            f"Sorted {len(result.moves)} files into {len(result.prefixes)} directories"
        )
        return result
