"""Reading, writing and inspecting working-tree files."""

from __future__ import annotations

import os
import stat
from pathlib import Path

DEFAULT_MODE = 0o644
READONLY_MODE = 0o444


def read_file_content(path: str | os.PathLike[str]) -> bytes:
    """Return the raw bytes of a file."""
    return Path(path).read_bytes()


def write_file_content(path: str | os.PathLike[str], content: bytes) -> None:
    """Write bytes to a file, creating missing parent directories."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)


def get_file_mode(path: str | os.PathLike[str]) -> int:
    """Return 0o444 for read-only files and 0o644 otherwise."""
    mode = stat.S_IMODE(os.stat(path).st_mode)
    if mode & 0o222 == 0:
        return READONLY_MODE
    return DEFAULT_MODE


def is_executable(path: str | os.PathLike[str]) -> bool:
    """Return whether any execute permission bit is set on the file."""
    return os.stat(path).st_mode & 0o111 != 0