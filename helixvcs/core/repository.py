"""A repository: its metadata directory, staging area, branches and remotes."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from helixvcs.core.branch import Branch, _now, _timestamp_from_json, _timestamp_to_json
from helixvcs.core.commit import Commit
from helixvcs.core.index import Index
from helixvcs.core.objects import Object
from helixvcs.core.remote import Remote

META_DIR_NAME = ".helix"
DEFAULT_BRANCH = "main"
DEFAULT_AUTHOR = "Unknown"
DEFAULT_EMAIL = "unknown@example.com"


class NotARepositoryError(Exception):
    """Raised when a directory holds no repository metadata."""


@dataclass
class RepositoryConfig:
    """Per-repository settings."""

    name: str
    author: str = DEFAULT_AUTHOR
    email: str = DEFAULT_EMAIL
    description: str | None = None
    created_at: datetime = field(default_factory=_now)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "author": self.author,
            "email": self.email,
            "created_at": _timestamp_to_json(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RepositoryConfig":
        return cls(
            name=data["name"],
            description=data.get("description"),
            author=data["author"],
            email=data["email"],
            created_at=_timestamp_from_json(data["created_at"]),
        )


def _read_json(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


def _write_json(path: Path, document) -> None:
    path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")


@dataclass
class Repository:
    """In-memory state of a repository rooted at ``path``."""

    path: Path
    git_dir: Path
    config: RepositoryConfig
    index: Index = field(default_factory=Index)
    branches: dict[str, Branch] = field(default_factory=dict)
    current_branch: str = DEFAULT_BRANCH
    remotes: dict[str, Remote] = field(default_factory=dict)

    @classmethod
    def create(cls, path: str | os.PathLike[str]) -> "Repository":
        """Build a fresh, unsaved repository; author details come from the environment."""
        root = Path(path)
        config = RepositoryConfig(
            name=root.name,
            author=os.environ.get("HX_AUTHOR", DEFAULT_AUTHOR),
            email=os.environ.get("HX_EMAIL", DEFAULT_EMAIL),
        )
        return cls(path=root, git_dir=root / META_DIR_NAME, config=config)

    @classmethod
    def open(cls, path: str | os.PathLike[str]) -> "Repository":
        """Load a repository from disk."""
        root = Path(path)
        git_dir = root / META_DIR_NAME
        if not git_dir.exists():
            raise NotARepositoryError("Not a Helix repository")

        config = RepositoryConfig.from_dict(_read_json(git_dir / "config.json"))

        index_path = git_dir / "index.json"
        index = Index.from_dict(_read_json(index_path)) if index_path.exists() else Index()

        branches_path = git_dir / "branches.json"
        if branches_path.exists():
            branches = {
                name: Branch.from_dict(data) for name, data in _read_json(branches_path).items()
            }
        else:
            branches = {DEFAULT_BRANCH: Branch(DEFAULT_BRANCH)}

        head_path = git_dir / "HEAD"
        if head_path.exists():
            current_branch = head_path.read_text(encoding="utf-8").strip()
        else:
            current_branch = DEFAULT_BRANCH

        remotes_path = git_dir / "remotes.json"
        remotes = (
            {name: Remote.from_dict(data) for name, data in _read_json(remotes_path).items()}
            if remotes_path.exists()
            else {}
        )

        return cls(
            path=root,
            git_dir=git_dir,
            config=config,
            index=index,
            branches=branches,
            current_branch=current_branch,
            remotes=remotes,
        )

    def save(self) -> None:
        """Write all repository state to the metadata directory."""
        self.git_dir.mkdir(parents=True, exist_ok=True)
        _write_json(self.git_dir / "config.json", self.config.to_dict())
        _write_json(self.git_dir / "index.json", self.index.to_dict())
        _write_json(
            self.git_dir / "branches.json",
            {name: branch.to_dict() for name, branch in self.branches.items()},
        )
        (self.git_dir / "HEAD").write_text(self.current_branch, encoding="utf-8")
        _write_json(
            self.git_dir / "remotes.json",
            {name: remote.to_dict() for name, remote in self.remotes.items()},
        )

    @property
    def objects_dir(self) -> Path:
        return self.git_dir / "objects"

    @property
    def refs_dir(self) -> Path:
        return self.git_dir / "refs"

    @property
    def active_branch(self) -> Branch | None:
        """The branch object named by ``current_branch``, if it exists."""
        return self.branches.get(self.current_branch)

    def create_branch(self, name: str) -> None:
        """Add an empty branch and save."""
        if name in self.branches:
            raise ValueError(f"Branch '{name}' already exists")
        self.branches[name] = Branch(name)
        self.save()

    def checkout_branch(self, name: str) -> None:
        """Make ``name`` the current branch and save."""
        if name not in self.branches:
            raise ValueError(f"Branch '{name}' does not exist")
        self.current_branch = name
        self.save()

    def add_remote(self, name: str, url: str) -> None:
        """Add or replace a remote and save."""
        self.remotes[name] = Remote(name, url)
        self.save()

    def get_commit(self, commit_id: str) -> Commit:
        """Load a commit from the object store."""
        return Commit.from_object(Object.load(self.objects_dir, commit_id))

    def set_head(self, commit_id: str) -> None:
        """Point the current branch at ``commit_id`` and save."""
        branch = self.active_branch
        if branch is None:
            raise ValueError("Current branch not found")
        branch.update_head(commit_id)
        self.save()