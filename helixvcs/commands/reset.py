"""The ``reset`` command."""

from __future__ import annotations

import click

from helixvcs.core.index import IndexEntry
from helixvcs.core.objects import Object
from helixvcs.core.repository import Repository

RESET_MODES = ("soft", "mixed", "hard")


def _move_head(repo: Repository, commit_id: str) -> None:
    try:
        repo.set_head(commit_id)
    except ValueError:
        pass


def reset_repository(repo: Repository, target: str, mode: str = "mixed") -> bool:
    """Reset the current branch to ``target``; return False for an unknown mode."""
    if target == "HEAD":
        branch = repo.branches.get(repo.current_branch)
        if branch is None:
            raise ValueError("No current branch")
        if branch.head_commit is None:
            raise ValueError("No HEAD commit")
        commit_id = branch.head_commit
    else:
        commit_id = target
    commit = repo.get_commit(commit_id)

    if mode not in RESET_MODES:
        click.echo(
            click.style(f"Unknown reset mode: {mode}. Use soft, mixed, or hard.", fg="red")
        )
        return False

    _move_head(repo, commit_id)
    if mode in ("mixed", "hard"):
        repo.index.clear()
        for path, change in commit.files.items():
            repo.index.entries[path] = IndexEntry(
                path=path,
                content_hash=change.content_hash,
                size=change.size,
                mode=change.mode,
            )
            if mode == "hard":
                blob = Object.load(repo.objects_dir, change.content_hash)
                (repo.path / path).write_bytes(blob.data.encode("utf-8"))

    repo.save()

    click.echo()
    click.echo(click.style("Repository reset successfully!", fg="green", bold=True))
    click.echo(f"Target: {click.style(target, fg='cyan')}")
    click.echo(f"Current branch: {click.style(repo.current_branch, fg='yellow', bold=True)}")
    click.echo(f"Reset mode: {click.style(mode, fg='cyan')}")
    return True