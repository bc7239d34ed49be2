"""
Hash Engine
===========

Cryptographic content hashing for duplicate detection.
Files are streamed through the digest in fixed-size chunks, so memory use
does not depend on file size.
"""

import hashlib
import threading
from pathlib import Path
from typing import Optional

from share_dedupe.filesystem import FileSystem, OsFileSystem
from share_dedupe.utils.exceptions import DeduplicationError, ErrorCode
from share_dedupe.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_ALGORITHM = "sha256"
DEFAULT_BUFFER_SIZE = 65536  # 64KB buffer


def validate_algorithm(algorithm: str) -> str:
    """Check that hashlib knows the algorithm.

    Raises:
        ValueError: For unknown or variable-length digests.
    """
    name = algorithm.lower()
    if name not in hashlib.algorithms_available or name.startswith("shake"):
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")
    return name


class FullHasher:
    """Computes the full content digest of files.

    Uses buffered reading for memory efficiency with large files.
    """

    def __init__(
        self,
        filesystem: Optional[FileSystem] = None,
        algorithm: str = DEFAULT_ALGORITHM,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ):
        """Initialize the hasher.

        Args:
            filesystem: Filesystem to read from. Defaults to the host OS.
            algorithm: hashlib algorithm name.
            buffer_size: Bytes read per chunk.
        """
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")
        self.filesystem = filesystem if filesystem is not None else OsFileSystem()
        self.algorithm = validate_algorithm(algorithm)
        self.buffer_size = buffer_size

    def compute(
        self,
        file_path: Path,
        cancel_event: Optional[threading.Event] = None,
    ) -> Optional[str]:
        """Compute the digest of a file.

        Args:
            file_path: Path to the file.
            cancel_event: Checked between chunks; when set, hashing stops.

        Returns:
            Hexadecimal digest, or None if cancelled part-way.

        Raises:
            DeduplicationError: If the file cannot be read.
        """
        hasher = hashlib.new(self.algorithm)

        try:
            with self.filesystem.open_read(file_path) as f:
                while True:
                    if cancel_event is not None and cancel_event.is_set():
                        return None
                    data = f.read(self.buffer_size)
                    if not data:
                        break
                    hasher.update(data)
        except OSError as e:
            raise DeduplicationError(
                f"Cannot read file: {e.strerror or e}",
                file_path=str(file_path),
                hash_type=self.algorithm,
                error_code=ErrorCode.HASH_COMPUTATION_FAILED,
                cause=e,
            ) from e

        return hasher.hexdigest()
