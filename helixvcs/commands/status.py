"""The ``status`` command."""

from __future__ import annotations

import os
from pathlib import Path

import click

from helixvcs.core.objects import ObjectError
from helixvcs.core.repository import Repository
from helixvcs.utils.hashing import calculate_file_hash, get_short_hash
from helixvcs.utils.paths import get_relative_path, is_ignored

UNTRACKED = "untracked"
MODIFIED = "modified"
STAGED = "staged"


def working_directory_files(repo_path: str | os.PathLike[str]) -> list[str]:
    """Return the relative paths of all non-ignored regular files under ``repo_path``."""
    root = Path(repo_path)
    files: list[str] = []
    for current, dirs, names in os.walk(root):
        dirs.sort()
        for name in sorted(names):
            entry = Path(current) / name
            if entry.is_symlink() or not entry.is_file():
                continue
            if is_ignored(entry, root):
                continue
            relative = get_relative_path(root, entry)
            if relative is not None:
                files.append(relative)
    return files


def _last_commit_files(repo: Repository) -> set[str]:
    branch = repo.active_branch
    if branch is None or branch.head_commit is None:
        return set()
    try:
        commit = repo.get_commit(branch.head_commit)
    except (ObjectError, OSError):
        return set()
    return set(commit.files)


def _print_staged_breakdown(repo: Repository) -> None:
    added = modified = deleted = 0
    for entry in repo.index.files():
        file_path = repo.path / entry.path
        if not file_path.exists():
            deleted += 1
            continue
        try:
            current_hash = calculate_file_hash(file_path)
        except OSError:
            added += 1
            continue
        if current_hash != entry.content_hash:
            modified += 1
        else:
            added += 1

    if added:
        click.echo(f"  📈 Added: {click.style(str(added), fg='green')} files")
    if modified:
        click.echo(f"  Modified: {click.style(str(modified), fg='yellow')} files")
    if deleted:
        click.echo(f"  Deleted: {click.style(str(deleted), fg='red')} files")


def show_status(repo: Repository) -> dict[str, str]:
    """Print the repository status and return each changed path's state."""
    click.echo(click.style("Repository Status", fg="blue", bold=True))
    click.echo(click.style("=" * 40, fg="blue"))
    click.echo(f"On branch: {click.style(repo.current_branch, fg='yellow', bold=True)}")

    branch = repo.active_branch
    if branch is not None:
        if branch.head_commit is not None:
            click.echo(f"HEAD: {click.style(get_short_hash(branch.head_commit), fg='cyan')}")
        else:
            click.echo(f"HEAD: {click.style('No commits yet', fg='red')}")
    click.echo()

    working_files = working_directory_files(repo.path)
    staged_files = repo.index.file_paths()
    staged_lookup = set(staged_files)
    staged_count = len(repo.index.files())
    last_commit_files = _last_commit_files(repo)

    changes: dict[str, str] = {}
    for file in working_files:
        if file not in last_commit_files and file not in staged_lookup:
            changes[file] = UNTRACKED
    for file in working_files:
        if file in last_commit_files and file not in staged_lookup:
            changes[file] = MODIFIED
    for file in staged_files:
        changes[file] = STAGED

    changes = dict(sorted(changes.items()))
    untracked = [f for f, state in changes.items() if state == UNTRACKED]
    modified = [f for f, state in changes.items() if state == MODIFIED]
    staged = [f for f, state in changes.items() if state == STAGED]

    if staged:
        _print_staged_breakdown(repo)
        click.echo(click.style("Changes to be committed:", fg="green", bold=True))
        for file in staged:
            click.echo("  " + click.style(f"  + {file}", fg="green"))
        click.echo()

    if modified:
        click.echo(click.style("Changes not staged for commit:", fg="yellow", bold=True))
        for file in modified:
            click.echo("  " + click.style(f"  ~ {file}", fg="yellow"))
        click.echo()

    if untracked:
        click.echo(click.style("❓ Untracked files:", fg="red", bold=True))
        for file in untracked:
            click.echo("  " + click.style(f"  ? {file}", fg="red"))
        click.echo()

    if not changes:
        click.echo(click.style("Working tree clean", fg="green", bold=True))
    else:
        click.echo("Summary:")
        click.echo(f"  Staged: {click.style(str(staged_count), fg='green')} files")
        click.echo(f"  Modified: {click.style(str(len(modified)), fg='yellow')} files")
        click.echo(f"  Untracked: {click.style(str(len(untracked)), fg='red')} files")

    return changes