"""
Directory Preparation
=====================

Creates one directory per title prefix alongside the base path.
"""

from pathlib import Path
from typing import Iterable, List

from share_dedupe.filesystem import FileSystem
from share_dedupe.utils.exceptions import FileOperationError
from share_dedupe.utils.logging_config import get_logger

logger = get_logger(__name__)

SIBLING_MODE = 0o777


def sibling_path(base_path: Path, prefix: str) -> Path:
    """Path of the sibling directory for a prefix."""
    return Path(base_path).parent / prefix


def prepare(
    base_path: Path,
    prefixes: Iterable[str],
    filesystem: FileSystem,
    exist_ok: bool = False,
) -> List[Path]:
    """Create a sibling directory of ``base_path`` for every prefix.

    Creation is attempted for every prefix on every call. With the default
    ``exist_ok=False`` a directory that already exists is an error, so a
    second call with the same prefixes fails. With ``exist_ok=True`` an
    existing entry is accepted and left alone.

    Args:
        base_path: The 'Deleted Games and Apps' directory.
        prefixes: Title prefixes to create directories for.
        filesystem: Filesystem to create them on.
        exist_ok: Treat already-existing directories as success.

    Returns:
        Directories created by this call, in prefix order.

    Raises:
        FileOperationError: On the first failure. Directories created before
            it are not removed and are listed in ``completed``.
    """
    created: List[Path] = []

    for prefix in prefixes:
        target = sibling_path(base_path, prefix)

        try:
            filesystem.mkdir(target, SIBLING_MODE)
        except FileExistsError as e:
            if exist_ok:
                logger.debug(f"Directory already present: {target}")
                continue
            raise FileOperationError.from_os_error(
                e, target, "mkdir",
                message=f"could not create directory '{target}': already exists",
                completed=created,
            ) from e
        except OSError as e:
            raise FileOperationError.from_os_error(
                e, target, "mkdir",
                message=f"could not create directory '{target}': {e.strerror or e}",
                completed=created,
            ) from e

        created.append(target)
        logger.info(f"Created directory: {target}", extra={"prefix": prefix})

    return created
