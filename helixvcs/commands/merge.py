"""The ``merge`` command and a line-based three-way merge."""

from __future__ import annotations

from collections import deque
from difflib import SequenceMatcher
from enum import Enum

import click

from helixvcs.core.commit import ChangeType, Commit
from helixvcs.core.index import Index, IndexEntry
from helixvcs.core.objects import Object, ObjectError, Tree
from helixvcs.core.repository import Repository

CONFLICT_START = "<<<<<<<"
MERGE_FILE_MODE = 0o100644


class MergeStrategy(str, Enum):
    """How conflicting files are resolved."""

    OURS = "ours"
    THEIRS = "theirs"
    MANUAL = "manual"

    def __str__(self) -> str:
        return self.value


def _load_commit(repo: Repository, commit_id: str) -> Commit | None:
    try:
        return Commit.from_object(Object.load(repo.objects_dir, commit_id))
    except (ObjectError, OSError, ValueError, KeyError):
        return None


def _load_blob(repo: Repository, blob_id: str) -> str | None:
    try:
        return Object.load(repo.objects_dir, blob_id).data
    except (ObjectError, OSError, ValueError):
        return None


def find_merge_base(repo: Repository, commit1: str, commit2: str) -> str | None:
    """Return the first ancestor of ``commit2``, breadth-first, that is an ancestor of ``commit1``."""
    ancestors: set[str] = set()
    queue = deque([commit1])
    while queue:
        current = queue.popleft()
        if current in ancestors:
            continue
        ancestors.add(current)
        commit = _load_commit(repo, current)
        if commit is not None:
            queue.extend(commit.parent_ids)

    visited: set[str] = set()
    queue = deque([commit2])
    while queue:
        current = queue.popleft()
        if current in ancestors:
            return current
        if current in visited:
            continue
        visited.add(current)
        commit = _load_commit(repo, current)
        if commit is not None:
            queue.extend(commit.parent_ids)
    return None


def _root_commit(repo: Repository, start: str) -> str:
    """Follow first parents from ``start`` to the root commit."""
    current = start
    while True:
        commit = _load_commit(repo, current)
        if commit is None or not commit.parent_ids:
            return current
        current = commit.parent_ids[0]


def _sync_regions(
    base: list[str], ours: list[str], theirs: list[str]
) -> list[tuple[int, int, int, int, int, int]]:
    """Return base ranges unchanged on both sides, with their positions in each side."""
    ours_blocks = SequenceMatcher(None, base, ours, autojunk=False).get_matching_blocks()
    theirs_blocks = SequenceMatcher(None, base, theirs, autojunk=False).get_matching_blocks()
    regions = []
    oi = ti = 0
    while oi < len(ours_blocks) and ti < len(theirs_blocks):
        o_base, o_match, o_len = ours_blocks[oi]
        t_base, t_match, t_len = theirs_blocks[ti]
        start = max(o_base, t_base)
        end = min(o_base + o_len, t_base + t_len)
        if start < end:
            length = end - start
            o_start = o_match + (start - o_base)
            t_start = t_match + (start - t_base)
            regions.append((start, end, o_start, o_start + length, t_start, t_start + length))
        if o_base + o_len < t_base + t_len:
            oi += 1
        else:
            ti += 1
    regions.append((len(base), len(base), len(ours), len(ours), len(theirs), len(theirs)))
    return regions


def _terminated(lines: list[str]) -> list[str]:
    if lines and not lines[-1].endswith("\n"):
        return [*lines[:-1], lines[-1] + "\n"]
    return list(lines)


def _conflict(ours: list[str], base: list[str], theirs: list[str]) -> list[str]:
    return [
        f"{CONFLICT_START} ours\n",
        *_terminated(ours),
        "||||||| original\n",
        *_terminated(base),
        "=======\n",
        *_terminated(theirs),
        ">>>>>>> theirs\n",
    ]


def diff3_merge(base: str, ours: str, theirs: str) -> str:
    """Merge two edits of ``base`` line by line; conflicts carry diff3-style markers."""
    base_lines = base.splitlines(keepends=True)
    ours_lines = ours.splitlines(keepends=True)
    theirs_lines = theirs.splitlines(keepends=True)

    merged: list[str] = []
    base_pos = ours_pos = theirs_pos = 0
    for b_start, b_end, o_start, o_end, t_start, t_end in _sync_regions(
        base_lines, ours_lines, theirs_lines
    ):
        base_chunk = base_lines[base_pos:b_start]
        ours_chunk = ours_lines[ours_pos:o_start]
        theirs_chunk = theirs_lines[theirs_pos:t_start]
        if ours_chunk or theirs_chunk:
            if ours_chunk == theirs_chunk:
                merged.extend(ours_chunk)
            elif ours_chunk == base_chunk:
                merged.extend(theirs_chunk)
            elif theirs_chunk == base_chunk:
                merged.extend(ours_chunk)
            else:
                merged.extend(_conflict(ours_chunk, base_chunk, theirs_chunk))
        merged.extend(base_lines[b_start:b_end])
        base_pos, ours_pos, theirs_pos = b_end, o_end, t_end
    return "".join(merged)


def _write(repo: Repository, relative: str, text: str, failure: str) -> None:
    target = repo.path / relative
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(text.encode("utf-8"))
    except OSError as exc:
        click.echo(click.style(f"{failure} {relative}: {exc}", fg="red"))


def _renamed_from(change) -> str | None:
    return getattr(change, "old_path", None)


def _create_merge_commit(
    repo: Repository, branch_name: str, ours: str, theirs: str
) -> str:
    index = Index()
    for entry in sorted(repo.path.iterdir()):
        if not entry.is_file():
            continue
        data = entry.read_bytes().decode("utf-8")
        blob = Object.create("blob", data)
        blob.save(repo.objects_dir)
        index.add_file(
            entry.name,
            IndexEntry(
                path=entry.name,
                content_hash=blob.id,
                size=len(data.encode("utf-8")),
                mode=MERGE_FILE_MODE,
            ),
        )

    tree = Tree()
    for staged in index.files():
        tree.add_entry(staged.path, staged.content_hash, "blob", staged.mode)
    tree_object = tree.to_object()
    tree_object.save(repo.objects_dir)

    commit = Commit.create(
        [ours, theirs],
        tree_object.id,
        repo.config.author,
        repo.config.email,
        f"Merge branch '{branch_name}' into '{repo.current_branch}'",
        index.to_file_changes(),
        None,
    )
    commit_object = commit.to_object()
    commit_object.save(repo.objects_dir)
    branch = repo.active_branch
    if branch is not None:
        branch.update_head(commit_object.id)
    repo.save()
    return commit_object.id


def merge_branch(
    repo: Repository, branch_name: str, strategy: MergeStrategy | None = None
) -> list[str] | None:
    """Merge ``branch_name`` into the current branch.

    Returns the conflicted paths, or None when the merge could not start.
    """
    strategy = MergeStrategy(strategy) if strategy is not None else MergeStrategy.MANUAL
    if branch_name not in repo.branches:
        click.echo(click.style(f"Branch '{branch_name}' does not exist", fg="red"))
        return None
    if branch_name == repo.current_branch:
        click.echo(click.style("Cannot merge branch into itself", fg="red"))
        return None

    click.echo(
        click.style(
            f"Merging branch '{branch_name}' into '{repo.current_branch}' "
            f"with strategy: {strategy}",
            fg="blue",
            bold=True,
        )
    )

    main = repo.branches.get("main")
    current = repo.active_branch
    ours = current.head_commit if current is not None else None
    theirs = repo.branches[branch_name].head_commit
    if main is None or main.head_commit is None or ours is None or theirs is None:
        click.echo(click.style("Could not find merge base or commits", fg="red"))
        click.echo("Make sure both branches have commits and try again.")
        return None

    base_id = find_merge_base(repo, ours, theirs)
    if base_id is None:
        click.echo(
            click.style("Warning: No common ancestor found, using root commit as base", fg="yellow")
        )
        base_id = _root_commit(repo, ours)

    commits = {}
    for label, commit_id in (("base", base_id), ("our", ours), ("their", theirs)):
        commit = _load_commit(repo, commit_id)
        if commit is None:
            click.echo(click.style(f"Failed to load {label} commit: {commit_id}", fg="red"))
            return None
        commits[label] = commit
    base_commit, ours_commit, theirs_commit = commits["base"], commits["our"], commits["their"]

    all_paths: set[str] = set()
    for commit in (base_commit, ours_commit, theirs_commit):
        all_paths.update(commit.files)
        for change in commit.files.values():
            old_path = _renamed_from(change)
            if old_path:
                all_paths.add(old_path)

    conflicted: list[str] = []
    for path in sorted(all_paths):
        base_fc = base_commit.files.get(path)
        ours_fc = ours_commit.files.get(path)
        theirs_fc = theirs_commit.files.get(path)

        if any(fc is not None and fc.change_type is ChangeType.DELETED for fc in (ours_fc, theirs_fc)):
            target = repo.path / path
            if target.exists():
                try:
                    target.unlink()
                except OSError:
                    pass
            continue

        if ours_fc is None and theirs_fc is None:
            continue
        if theirs_fc is None or ours_fc is None:
            side, fc = ("our", ours_fc) if theirs_fc is None else ("their", theirs_fc)
            data = _load_blob(repo, fc.content_hash)
            if data is None:
                click.echo(click.style(f"Failed to load {side} blob: {fc.content_hash}", fg="red"))
            else:
                _write(repo, path, data, "Failed to write file")
            continue

        base_content = (_load_blob(repo, base_fc.content_hash) if base_fc else None) or ""
        ours_content = _load_blob(repo, ours_fc.content_hash)
        if ours_content is None:
            click.echo(click.style(f"Failed to load our content for: {path}", fg="red"))
            continue
        theirs_content = _load_blob(repo, theirs_fc.content_hash)
        if theirs_content is None:
            click.echo(click.style(f"Failed to load their content for: {path}", fg="red"))
            continue

        merged = diff3_merge(base_content, ours_content, theirs_content)
        if CONFLICT_START in merged:
            conflicted.append(path)
            if strategy is MergeStrategy.OURS:
                _write(repo, path, ours_content, "Failed to write our version to")
            elif strategy is MergeStrategy.THEIRS:
                _write(repo, path, theirs_content, "Failed to write their version to")
            else:
                _write(repo, path, merged, "Failed to write conflict markers to")
        else:
            _write(repo, path, merged, "Failed to write merged content to")

    if conflicted:
        if strategy is MergeStrategy.MANUAL:
            click.echo(
                click.style(
                    f"Merge completed with {len(conflicted)} conflicts.", fg="yellow", bold=True
                )
            )
            click.echo("Conflicted files:")
            for path in conflicted:
                click.echo("  " + click.style(path, fg="red", bold=True))
            click.echo("Please resolve conflicts and commit the result.")
        else:
            click.echo(
                click.style(
                    f"Merge completed with {len(conflicted)} conflicts, "
                    f"resolved automatically using '{strategy}'.",
                    fg="yellow",
                    bold=True,
                )
            )
    else:
        click.echo(click.style("Merge completed successfully", fg="green", bold=True))
    click.echo(f"Current branch: {click.style(repo.current_branch, fg='yellow', bold=True)}")

    if base_id != ours and base_id != theirs:
        merge_id = _create_merge_commit(repo, branch_name, ours, theirs)
        click.echo(click.style(f"Created merge commit: {merge_id}", fg="green", bold=True))
    return conflicted