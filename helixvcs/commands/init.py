"""The ``init`` command."""

from __future__ import annotations

import os

import click

from helixvcs.core.branch import Branch
from helixvcs.core.repository import DEFAULT_BRANCH, Repository


def init_repository(path: str | os.PathLike[str]) -> Repository:
    """Create a repository with an empty main branch at ``path``."""
    repo = Repository.create(path)
    repo.branches[DEFAULT_BRANCH] = Branch(DEFAULT_BRANCH)
    repo.objects_dir.mkdir(parents=True, exist_ok=True)
    repo.refs_dir.mkdir(parents=True, exist_ok=True)
    repo.save()

    click.echo()
    click.echo(click.style("Helix repository initialized successfully!", fg="green", bold=True))
    click.echo(f"Repository location: {click.style(str(repo.path), fg='cyan')}")
    click.echo(f"Current branch: {click.style(DEFAULT_BRANCH, fg='yellow', bold=True)}")
    return repo