"""Configuration module for share-dedupe."""

from .settings import (
    Config,
    OrganizerConfig,
    DeduplicationConfig,
)

__all__ = [
    "Config",
    "OrganizerConfig",
    "DeduplicationConfig",
]
