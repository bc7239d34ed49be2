"""
Name-similarity grouping.

Files are considered similar when their names agree once trailing sequence
counters and timestamps are removed, so ``photo_001.jpg``, ``photo_002.jpg``
and ``photo (1).jpg`` all group as ``photo.jpg``.
"""

import re
from pathlib import PurePath
from typing import Dict, Iterable, List, Tuple

# One trailing token: optional separators then digits or "(n)", or a
# separated "copy".
_COUNTER_SUFFIX = re.compile(
    r"(?:[\s_.\-]*(?:\(\d+\)|\d+)|[\s_.\-]+copy)$",
    re.IGNORECASE,
)


def normalize_name(name: str) -> str:
    """Reduce a filename to its similarity key.

    Trailing counter tokens are removed one at a time until none is left or
    only the leading token remains. The stem keeps its case; the extension
    is lower-cased.
    """
    path = PurePath(name)
    suffix = path.suffix.lower()
    stem = path.stem if path.suffix else name

    while True:
        match = _COUNTER_SUFFIX.search(stem)
        if match is None or match.start() == 0:
            break
        stem = stem[:match.start()]

    return stem + suffix


def group_by_name(paths: Iterable[PurePath]) -> Dict[str, List[PurePath]]:
    """Bucket paths by ``normalize_name`` of their final component.

    Each bucket is sorted by path.
    """
    groups: Dict[str, List[PurePath]] = {}
    for path in paths:
        groups.setdefault(normalize_name(path.name), []).append(path)
    for members in groups.values():
        members.sort(key=str)
    return groups


def candidate_groups(
    paths: Iterable[PurePath],
) -> List[Tuple[str, List[PurePath]]]:
    """Groups with at least two members, ordered by key."""
    return sorted(
        ((key, members) for key, members in group_by_name(paths).items() if len(members) >= 2),
        key=lambda item: item[0],
    )
