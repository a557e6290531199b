"""The ``add`` command."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator

import click

from helixvcs.core.index import IndexEntry
from helixvcs.core.objects import Object
from helixvcs.core.repository import Repository
from helixvcs.utils.fileio import get_file_mode, is_executable, read_file_content
from helixvcs.utils.paths import get_relative_path, is_ignored


def _walk_files(directory: Path) -> Iterator[Path]:
    for current, dirs, names in os.walk(directory):
        dirs.sort()
        for name in sorted(names):
            entry = Path(current) / name
            if entry.is_symlink() or not entry.is_file():
                continue
            yield entry


def _collect_files(
    paths: Iterable[str | os.PathLike[str]], repo_root: Path
) -> list[Path]:
    collected: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_file():
            candidates: Iterable[Path] = (path,)
        elif path.is_dir():
            candidates = _walk_files(path)
        else:
            continue
        collected.extend(c for c in candidates if not is_ignored(c, repo_root))
    return collected


def add_files(
    repo: Repository, paths: Iterable[str | os.PathLike[str]]
) -> tuple[int, int]:
    """Stage files and directories; return (added, skipped) counts."""
    files = _collect_files(paths, repo.path)
    if not files:
        click.echo(click.style("No files to add", fg="yellow"))
        return 0, 0

    added = skipped = 0
    for file_path in files:
        relative = get_relative_path(repo.path, file_path)
        if relative is None:
            relative = file_path.as_posix()
        try:
            content = read_file_content(file_path)
        except OSError:
            skipped += 1
            continue

        mode = get_file_mode(file_path)
        if is_executable(file_path):
            mode |= 0o111

        blob = Object.create("blob", content.decode("utf-8", errors="replace"))
        blob.save(repo.objects_dir)

        repo.index.add_file(
            relative,
            IndexEntry(path=relative, content_hash=blob.id, size=len(content), mode=mode),
        )
        added += 1

    repo.save()

    click.echo()
    click.echo(click.style("Files staged successfully!", fg="green", bold=True))
    click.echo(f"Added: {click.style(str(added), fg='cyan')} files")
    if skipped:
        click.echo(f"Skipped: {click.style(str(skipped), fg='yellow')} files")
    click.echo(f"Total staged: {click.style(str(len(repo.index)), fg='blue')} files")
    return added, skipped