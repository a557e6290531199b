"""Path helpers and ignore-pattern matching."""

from __future__ import annotations

import os
from pathlib import Path

IGNORE_FILE_NAME = ".helixignore"

BUILT_IN_PATTERNS = (
    ".helix",
    ".git",
    "target",
    "node_modules",
    ".DS_Store",
    "*.tmp",
    "*.log",
    "*.swp",
    "*.swo",
    "*~",
    ".vscode",
    ".idea",
    "*.o",
    "*.so",
    "*.dylib",
    "*.dll",
    "*.exe",
    "*.pyc",
    "__pycache__",
    ".pytest_cache",
    "*.class",
    "*.jar",
    "*.war",
    "*.ear",
    "*.min.js",
    "*.min.css",
    "dist",
    "build",
    "out",
    "coverage",
    ".nyc_output",
    "*.lcov",
    ".env",
    ".env.local",
    ".env.*.local",
)


def normalize_path(path: str | os.PathLike[str]) -> Path:
    """Return the path as a ``Path`` object."""
    return Path(path)


def load_helixignore(repo_path: str | os.PathLike[str]) -> list[str]:
    """Return the non-empty, non-comment lines of the repository's ignore file."""
    try:
        content = (Path(repo_path) / IGNORE_FILE_NAME).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return []
    stripped = (line.strip() for line in content.splitlines())
    return [line for line in stripped if line and not line.startswith("#")]


def matches_pattern(path: str, pattern: str) -> bool:
    """Match a slash-separated relative path against a simple ignore pattern."""
    if pattern.startswith("*."):
        return path.endswith(pattern[2:])
    if pattern.endswith("/"):
        directory = pattern[:-1]
        return directory in path and any(part == directory for part in path.split("/"))
    if pattern.startswith("/"):
        return path.startswith(pattern[1:])
    if pattern.endswith("*"):
        return path.startswith(pattern[:-1])
    return path == pattern or pattern in path


def get_relative_path(
    base: str | os.PathLike[str], path: str | os.PathLike[str]
) -> str | None:
    """Return ``path`` relative to ``base`` with forward slashes, or None."""
    try:
        relative = Path(path).relative_to(Path(base))
    except ValueError:
        return None
    text = relative.as_posix()
    return "" if text == "." else text


def is_ignored(path: str | os.PathLike[str], repo_path: str | os.PathLike[str]) -> bool:
    """Return whether a path matches a built-in or repository ignore pattern."""
    relative = get_relative_path(repo_path, path) or ""
    if any(matches_pattern(relative, pattern) for pattern in BUILT_IN_PATTERNS):
        return True
    return any(matches_pattern(relative, pattern) for pattern in load_helixignore(repo_path))


def should_track_file(
    path: str | os.PathLike[str], repo_path: str | os.PathLike[str]
) -> bool:
    """Return whether a path is a non-empty, non-ignored file."""
    candidate = Path(path)
    if candidate.is_dir():
        return False
    if is_ignored(candidate, repo_path):
        return False
    try:
        if candidate.stat().st_size == 0:
            return False
    except OSError:
        pass
    return True


def collect_trackable_files(repo_path: str | os.PathLike[str]) -> list[Path]:
    """Return trackable files under a directory, descending into subdirectories."""
    root = Path(repo_path)
    try:
        children = sorted(root.iterdir())
    except OSError:
        return []
    files: list[Path] = []
    for child in children:
        if should_track_file(child, root):
            files.append(child)
        elif child.is_dir():
            files.extend(collect_trackable_files(child))
    return files