"""Reorganize module: sort 'Deleted Games and Apps' into per-title directories."""

from .prefixes import discover_prefixes, extract_prefix
from .preparer import prepare, sibling_path
from .relocator import Move, plan_relocation, relocate, execute_moves
from .journal import MoveJournal, JournalEntry
from .reorganizer import (
    Reorganizer,
    ReorganizeResult,
    BASE_DIRECTORY_NAME,
    validate_base_path,
)

__all__ = [
    "discover_prefixes",
    "extract_prefix",
    "prepare",
    "sibling_path",
    "Move",
    "plan_relocation",
    "relocate",
    "execute_moves",
    "MoveJournal",
    "JournalEntry",
    "Reorganizer",
    "ReorganizeResult",
    "BASE_DIRECTORY_NAME",
    "validate_base_path",
]
