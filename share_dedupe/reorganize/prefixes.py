"""
Prefix Discovery
================

Finds the game/app title prefixes of the media files in a directory.
The prefix is everything in front of the first underscore, e.g.
``Bugsnax_20210717131548.jpg`` -> ``Bugsnax``.
"""

from pathlib import Path
from typing import List

from share_dedupe.filesystem import FileSystem
from share_dedupe.utils.exceptions import FileOperationError
from share_dedupe.utils.logging_config import get_logger

logger = get_logger(__name__)

PREFIX_DELIMITER = "_"


def extract_prefix(name: str) -> str:
    """Return the part of a filename before the first underscore.

    Names without an underscore are their own prefix. No case or
    punctuation normalisation is applied.
    """
    return name.split(PREFIX_DELIMITER, 1)[0]


def discover_prefixes(base_path: Path, filesystem: FileSystem) -> List[str]:
    """Discover the distinct title prefixes in a directory.

    Only direct children are considered; directories and hidden entries are
    skipped. Prefixes keep the order in which the filesystem listed them,
    and each prefix appears once.

    Args:
        base_path: Directory to scan.
        filesystem: Filesystem to list it with.

    Returns:
        Ordered list of unique prefixes. Empty for an empty directory.

    Raises:
        FileOperationError: If the directory cannot be listed.
    """
    try:
        entries = filesystem.list_dir(base_path)
    except OSError as e:
        raise FileOperationError.from_os_error(
            e, base_path, "list", message=f"could not read '{base_path}': {e.strerror or e}"
        ) from e

    seen = set()
    prefixes: List[str] = []

    for entry in entries:
        if entry.is_dir or entry.is_hidden:
            continue

        prefix = extract_prefix(entry.name)
        if prefix in seen:
            continue

        seen.add(prefix)
        prefixes.append(prefix)

    logger.debug(f"Discovered {len(prefixes)} prefixes in {base_path}")
    return prefixes
