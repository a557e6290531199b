"""The ``branch`` command."""

from __future__ import annotations

from datetime import timedelta

import click

from helixvcs.core.repository import Repository
from helixvcs.utils.hashing import get_short_hash

_AGE_THRESHOLD = timedelta(hours=1)
_UPDATE_THRESHOLD = timedelta(minutes=5)


def format_duration(duration: timedelta) -> str:
    """Describe a duration in its largest whole unit of days, hours or minutes."""
    seconds = duration.total_seconds()
    days = int(seconds / 86400)
    if days > 0:
        return f"{days} days"
    hours = int(seconds / 3600)
    if hours > 0:
        return f"{hours} hours"
    minutes = int(seconds / 60)
    if minutes > 0:
        return f"{minutes} minutes"
    return "just now"


def list_branches(repo: Repository) -> list[str]:
    """Print every branch with its details; return the names in printed order."""
    click.echo(click.style("Branches", fg="blue", bold=True))
    click.echo(click.style("=" * 40, fg="blue"))

    names = sorted(repo.branches)
    for name in names:
        branch = repo.branches[name]
        if name == repo.current_branch:
            click.echo("* " + click.style(name, fg="yellow", bold=True))
        else:
            click.echo("  " + name)

        if branch.head_commit is not None:
            click.echo(f"    HEAD: {click.style(get_short_hash(branch.head_commit), fg='cyan')}")
        if branch.upstream is not None:
            click.echo(f"    Upstream: {click.style(branch.upstream, fg='magenta')}")

        age = branch.age
        if age > _AGE_THRESHOLD:
            click.echo(f"    Age: {format_duration(age)} old")
        if branch.is_main:
            click.echo("    🌟 Main branch")

        last_update = branch.last_update_age
        if last_update > _UPDATE_THRESHOLD:
            click.echo(f"    Last update: {format_duration(last_update)} ago")
    return names


def create_branch(repo: Repository, name: str) -> bool:
    """Create a branch; return False when it already exists."""
    if name in repo.branches:
        click.echo(click.style(f"Branch '{name}' already exists", fg="red"))
        return False

    repo.create_branch(name)

    click.echo(click.style(f"Created branch '{name}'", fg="green", bold=True))
    click.echo(f"Current branch: {click.style(repo.current_branch, fg='yellow', bold=True)}")
    return True