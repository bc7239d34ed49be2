"""Deduplication module."""

from .hash_engine import FullHasher, validate_algorithm
from .grouping import normalize_name, group_by_name, candidate_groups
from .deduplicator import (
    Deduplicator,
    DeduplicatorState,
    DuplicateReport,
    ScanWarning,
    default_max_workers,
)

__all__ = [
    "FullHasher",
    "validate_algorithm",
    "normalize_name",
    "group_by_name",
    "candidate_groups",
    "Deduplicator",
    "DeduplicatorState",
    "DuplicateReport",
    "ScanWarning",
    "default_max_workers",
]
