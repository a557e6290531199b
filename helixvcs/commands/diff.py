"""The ``diff`` command: working files against the head commit."""

from __future__ import annotations

import os
from difflib import SequenceMatcher
from pathlib import Path
from typing import Iterator

import click

from helixvcs.core.commit import Commit
from helixvcs.core.objects import Object, ObjectError
from helixvcs.core.repository import Repository
from helixvcs.utils.paths import get_relative_path


def _read_working(path: Path) -> str:
    try:
        return path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError):
        return ""


def _committed_content(repo: Repository, commit: Commit | None, key: str) -> str:
    if commit is None:
        return ""
    change = commit.files.get(key)
    if change is None:
        return ""
    try:
        return Object.load(repo.objects_dir, change.content_hash).data
    except (ObjectError, OSError, ValueError):
        return ""


def _diff_lines(old: str, new: str) -> Iterator[tuple[str, str]]:
    """Yield (sign, line) for every line of a line diff, equal lines included."""
    old_lines = old.splitlines(keepends=True)
    new_lines = new.splitlines(keepends=True)
    matcher = SequenceMatcher(None, old_lines, new_lines, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            for line in old_lines[i1:i2]:
                yield " ", line
            continue
        for line in old_lines[i1:i2]:
            yield "-", line
        for line in new_lines[j1:j2]:
            yield "+", line


def _head_commit(repo: Repository) -> Commit | None:
    branch = repo.active_branch
    if branch is None or branch.head_commit is None:
        return None
    try:
        return repo.get_commit(branch.head_commit)
    except (ObjectError, OSError, ValueError, KeyError):
        return None


def show_diff(
    repo: Repository, path: str | os.PathLike[str] | None = None
) -> dict[str, str]:
    """Print differences from the head commit; return each differing path's diff text."""
    click.echo(click.style("Diff View", fg="blue", bold=True))
    click.echo(click.style("=" * 40, fg="blue"))

    commit = _head_commit(repo)
    if path is None:
        branch = repo.active_branch
        if branch is None:
            click.echo(click.style("No current branch found", fg="red"))
            return {}
        if branch.head_commit is None:
            click.echo(click.style("No HEAD commit found", fg="red"))
            return {}
        if commit is None:
            click.echo(click.style("Failed to load HEAD commit object", fg="red"))
            return {}
        targets = [(key, repo.path / key) for key in sorted(commit.files)]
    else:
        given = Path(path)
        relative = get_relative_path(repo.path, given)
        if relative is not None:
            targets = [(relative, given)]
        else:
            targets = [(given.as_posix(), repo.path / given)]

    diffs: dict[str, str] = {}
    for key, file_path in targets:
        working = _read_working(file_path)
        committed = _committed_content(repo, commit, key)
        if working == committed:
            continue
        click.echo()
        click.echo(f"File: {click.style(key, fg='cyan')}")
        rendered: list[str] = []
        for sign, line in _diff_lines(committed, working):
            text = sign + (line if line.endswith("\n") else line + "\n")
            rendered.append(text)
            if sign == "-":
                click.echo(click.style(text, fg="red"), nl=False)
            elif sign == "+":
                click.echo(click.style(text, fg="green"), nl=False)
            else:
                click.echo(text, nl=False)
        diffs[key] = "".join(rendered)

    if not diffs:
        click.echo()
        click.echo(click.style("No differences found", fg="green"))
        click.echo("Working directory is clean")
    return diffs