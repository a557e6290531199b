"""The ``restore`` command."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

import click

from helixvcs.core.objects import Object
from helixvcs.core.repository import Repository
from helixvcs.utils.fileio import write_file_content
from helixvcs.utils.paths import get_relative_path


def restore_files(
    repo: Repository, paths: Iterable[str | os.PathLike[str]]
) -> tuple[int, int]:
    """Restore paths from the head commit; return (restored, skipped) counts."""
    branch = repo.active_branch
    if branch is None:
        raise ValueError("No current branch found")
    if branch.head_commit is None:
        raise ValueError("No commits found")
    commit = repo.get_commit(branch.head_commit)

    restored = skipped = 0
    for raw_path in paths:
        path = Path(raw_path)
        relative = get_relative_path(repo.path, path)
        if relative is None:
            relative = path.as_posix()

        change = commit.files.get(relative)
        if change is None:
            skipped += 1
            continue
        blob = Object.load(repo.objects_dir, change.content_hash)
        try:
            write_file_content(path, blob.data.encode("utf-8"))
        except OSError:
            skipped += 1
        else:
            restored += 1

    click.echo()
    click.echo(click.style("Files restored successfully!", fg="green", bold=True))
    click.echo(f"Restored: {click.style(str(restored), fg='cyan')} files")
    if skipped:
        click.echo(f"Skipped: {click.style(str(skipped), fg='yellow')} files")
    return restored, skipped