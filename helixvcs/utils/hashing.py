"""SHA-256 helpers used for content addressing."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

SHORT_HASH_LENGTH = 8


def calculate_hash(data: bytes) -> str:
    """Return the lowercase hex SHA-256 digest of ``data``."""
    return hashlib.sha256(data).hexdigest()


def calculate_file_hash(path: str | os.PathLike[str]) -> str:
    """Return the SHA-256 digest of a file's contents."""
    return calculate_hash(Path(path).read_bytes())


def get_short_hash(hash_value: str) -> str:
    """Return the abbreviated form of a hash (its first eight characters)."""
    return hash_value[:SHORT_HASH_LENGTH]