"""The ``log`` and ``dag`` commands, and ancestry verification."""

from __future__ import annotations

from collections import deque

import click

from helixvcs.core.commit import Commit, verify_ancestry
from helixvcs.core.objects import Object, ObjectError
from helixvcs.core.repository import Repository
from helixvcs.utils.hashing import get_short_hash


def _load_commit(repo: Repository, commit_id: str) -> Commit | None:
    try:
        return Commit.from_object(Object.load(repo.objects_dir, commit_id))
    except (ObjectError, OSError):
        return None


def _parents_text(commit: Commit) -> str:
    if not commit.parent_ids:
        return "(root)"
    return ", ".join(get_short_hash(parent) for parent in commit.parent_ids)


def _validity(valid: bool) -> str:
    return click.style("VALID", fg="green") if valid else click.style("INVALID", fg="red")


def _display_commit(commit: Commit, is_head: bool, valid: bool) -> None:
    indicator = "HEAD -> " if is_head else "     "
    click.echo(
        f"{indicator}{click.style(commit.short_id, fg='cyan')} "
        f"{_validity(valid)} {click.style(commit.message, bold=True)}"
    )
    click.echo(click.style(f"    Parents: {_parents_text(commit)}", dim=True))
    click.echo(click.style(f"    Author: {commit.author} <{commit.email}>", dim=True))
    stamp = commit.timestamp.strftime("%Y-%m-%d %H:%M:%S")
    click.echo(click.style(f"    Date:   {stamp}", dim=True))
    click.echo(click.style(f"    Files:  {len(commit.files)} files changed", dim=True))
    click.echo()


def _head_commit_id(repo: Repository) -> str | None:
    branch = repo.active_branch
    return None if branch is None else branch.head_commit


def show_log(repo: Repository, limit: int = 10) -> list[Commit]:
    """Print up to ``limit`` commits breadth-first from HEAD; return them."""
    click.echo(click.style("📜 Commit History", fg="blue", bold=True))
    click.echo(click.style("=" * 40, fg="blue"))

    head = _head_commit_id(repo)
    if head is None:
        click.echo(click.style("No commits yet", fg="yellow"))
        return []

    shown: list[Commit] = []
    visited: set[str] = set()
    queue = deque([head])
    while queue:
        commit_id = queue.popleft()
        if commit_id in visited or len(shown) >= limit:
            continue
        commit = _load_commit(repo, commit_id)
        if commit is None:
            continue
        _display_commit(commit, is_head=not shown, valid=commit.verify())
        queue.extend(commit.parent_ids)
        visited.add(commit_id)
        shown.append(commit)
    return shown


def verify_history(repo: Repository, commit_id: str | None = None) -> bool | None:
    """Verify a commit and its ancestry; None when there is nothing to verify."""
    target = commit_id if commit_id is not None else _head_commit_id(repo)
    if target is None:
        click.echo("No commits yet")
        return None

    click.echo(click.style(f"Verifying ancestry for commit: {target}", fg="blue", bold=True))

    def report(commit: Commit, valid: bool) -> None:
        click.echo(
            f"{click.style(commit.short_id, fg='cyan')} {_validity(valid)} "
            f"{click.style(commit.message, bold=True)}"
        )

    all_valid = verify_ancestry(repo.objects_dir, target, report)
    if all_valid:
        click.echo(click.style("All commits in ancestry are valid!", fg="green", bold=True))
    else:
        click.echo(click.style("Some commits failed verification!", fg="red", bold=True))
    return all_valid


def show_dag(repo: Repository) -> list[str]:
    """Print the commit graph from HEAD as indented lines; return the plain lines."""
    click.echo(click.style("Commit DAG Visualization", fg="blue", bold=True))
    click.echo(click.style("=" * 40, fg="blue"))

    head = _head_commit_id(repo)
    if head is None:
        click.echo(click.style("No commits yet", fg="yellow"))
        return []

    lines: list[str] = []
    visited: set[str] = set()
    queue = deque([(head, 0)])
    while queue:
        commit_id, depth = queue.popleft()
        if commit_id in visited:
            continue
        commit = _load_commit(repo, commit_id)
        if commit is None:
            continue
        indent = "  " * depth
        parents = _parents_text(commit)
        lines.append(f"{indent}{commit.short_id} -> {parents}")
        click.echo(f"{indent}{click.style(commit.short_id, fg='cyan')} -> {parents}")
        queue.extend((parent, depth + 1) for parent in commit.parent_ids)
        visited.add(commit_id)
    return lines