"""The ``commit`` command."""

from __future__ import annotations

import click
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from helixvcs.core.commit import Commit
from helixvcs.core.objects import Tree
from helixvcs.core.repository import DEFAULT_AUTHOR, DEFAULT_EMAIL, Repository
from helixvcs.utils.config import GlobalConfig


def _load_global_config() -> GlobalConfig | None:
    try:
        return GlobalConfig.load()
    except (OSError, ValueError):
        return None


def _identity(repo: Repository) -> tuple[str, str]:
    config = _load_global_config()
    author = repo.config.author
    if author in (DEFAULT_AUTHOR, ""):
        author = (config.user_name if config else None) or DEFAULT_AUTHOR
    email = repo.config.email
    if email in (DEFAULT_EMAIL, ""):
        email = (config.user_email if config else None) or DEFAULT_EMAIL
    return author, email


def commit_changes(
    repo: Repository, message: str, keypair: Ed25519PrivateKey | None
) -> Commit | None:
    """Commit the staged files to the current branch; None when nothing is staged."""
    if repo.index.is_empty:
        click.echo(click.style("No changes to commit", fg="yellow"))
        click.echo("Use 'hx add' to stage files first")
        return None

    branch = repo.active_branch
    parent_ids = [branch.head_commit] if branch and branch.head_commit else []

    tree = Tree()
    for entry in repo.index.files():
        tree.add_entry(entry.path, entry.content_hash, "blob", entry.mode)
    tree_object = tree.to_object()
    tree_object.save(repo.objects_dir)

    author, email = _identity(repo)
    commit = Commit.create(
        parent_ids,
        tree_object.id,
        author,
        email,
        message,
        repo.index.to_file_changes(),
        keypair,
    )

    commit_object = commit.to_object()
    commit_object.save(repo.objects_dir)
    if commit_object.is_commit:
        click.echo(
            f"Commit object saved with ID: {click.style(commit_object.short_id, fg='cyan')}"
        )

    if branch is not None:
        branch.update_head(commit_object.id)

    repo.index.clear()
    repo.save()

    click.echo()
    click.echo(click.style("Commit created successfully!", fg="green", bold=True))
    click.echo(f"Commit ID: {click.style(commit.short_id, fg='cyan')}")
    click.echo(f"Message: {click.style(message, fg='blue')}")
    click.echo(f"Author: {author} <{email}>")
    stamp = commit.timestamp.strftime("%Y-%m-%d %H:%M:%S")
    click.echo(f"Date: {click.style(stamp, fg='yellow')}")
    click.echo(f"Files: {click.style(str(len(commit.files)), fg='magenta')} files changed")
    click.echo(f"Branch: {click.style(repo.current_branch, fg='yellow', bold=True)}")
    return commit