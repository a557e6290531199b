"""The ``checkout`` command."""

from __future__ import annotations

import click

from helixvcs.core.repository import Repository
from helixvcs.utils.hashing import get_short_hash


def checkout_branch(repo: Repository, branch_name: str) -> bool:
    """Switch to ``branch_name``; return whether the branch changed."""
    if branch_name not in repo.branches:
        click.echo(click.style(f"Branch '{branch_name}' does not exist", fg="red"))
        return False
    if branch_name == repo.current_branch:
        click.echo(click.style(f"Already on branch '{branch_name}'", fg="yellow"))
        return False

    repo.checkout_branch(branch_name)

    click.echo(click.style(f"Switched to branch '{branch_name}'", fg="green", bold=True))
    click.echo(f"Current branch: {click.style(repo.current_branch, fg='yellow', bold=True)}")
    branch = repo.active_branch
    if branch is not None and branch.head_commit is not None:
        click.echo(f"HEAD: {click.style(get_short_hash(branch.head_commit), fg='cyan')}")
    return True