"""Signed commits, their file changes and ancestry verification."""

from __future__ import annotations

import enum
import hashlib
import json
import math
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from helixvcs.core.objects import Object, ObjectError
from helixvcs.utils.hashing import get_short_hash
from helixvcs.utils.keys import public_key_bytes


class ChangeType(enum.Enum):
    ADDED = "Added"
    MODIFIED = "Modified"
    DELETED = "Deleted"
    RENAMED = "Renamed"


@dataclass
class FileChange:
    """A file recorded in a commit; ``old_path`` is set only for renames."""

    path: str
    change_type: ChangeType
    content_hash: str
    size: int
    mode: int
    old_path: str | None = None

    def __post_init__(self) -> None:
        if (self.change_type is ChangeType.RENAMED) != (self.old_path is not None):
            raise ValueError("old_path is required for, and only for, renames")

    def to_dict(self) -> dict:
        if self.change_type is ChangeType.RENAMED:
            change = {"Renamed": {"old_path": self.old_path}}
        else:
            change = self.change_type.value
        return {
            "path": self.path,
            "change_type": change,
            "content_hash": self.content_hash,
            "size": self.size,
            "mode": self.mode,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FileChange":
        raw = data["change_type"]
        old_path = None
        if isinstance(raw, str):
            change_type = ChangeType(raw)
            if change_type is ChangeType.RENAMED:
                raise ValueError("Renamed change requires old_path")
        elif isinstance(raw, dict) and set(raw) == {"Renamed"}:
            change_type = ChangeType.RENAMED
            old_path = raw["Renamed"]["old_path"]
            if not isinstance(old_path, str):
                raise ValueError("old_path must be a string")
        else:
            raise ValueError(f"Unknown change type {raw!r}")
        return cls(
            path=data["path"],
            change_type=change_type,
            content_hash=data["content_hash"],
            size=int(data["size"]),
            mode=int(data["mode"]),
            old_path=old_path,
        )


def _format_timestamp(ts: datetime) -> str:
    ts = ts.astimezone(timezone.utc)
    micro = ts.microsecond
    if micro == 0:
        fraction = ""
    elif micro % 1000 == 0:
        fraction = f".{micro // 1000:03d}"
    else:
        fraction = f".{micro:06d}"
    return ts.strftime("%Y-%m-%dT%H:%M:%S") + fraction + "Z"


def _parse_timestamp(text: str) -> datetime:
    if not isinstance(text, str):
        raise TypeError("timestamp must be a string")
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _optional_bytes(value) -> bytes | None:
    return None if value is None else bytes(value)


def calculate_commit_id(
    parent_ids: list[str],
    tree_id: str,
    author: str,
    email: str,
    message: str,
    timestamp: datetime,
) -> str:
    """Return the SHA-256 id of a commit's identifying fields."""
    seconds = math.floor(timestamp.timestamp())
    text = (
        f"tree {tree_id}\nparents {','.join(parent_ids)}\n"
        f"author {author} <{email}> {seconds}\n\n{message}"
    )
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


@dataclass
class Commit:
    """A snapshot with parents, author details and an optional signature."""

    id: str
    parent_ids: list[str]
    tree_id: str
    author: str
    email: str
    message: str
    timestamp: datetime
    files: dict[str, FileChange] = field(default_factory=dict)
    public_key: bytes | None = None
    signature: bytes | None = None

    @classmethod
    def create(
        cls,
        parent_ids: list[str],
        tree_id: str,
        author: str,
        email: str,
        message: str,
        files: dict[str, FileChange],
        keypair: Ed25519PrivateKey | None = None,
    ) -> "Commit":
        """Build a commit stamped now, signed when a key is given."""
        timestamp = datetime.now(timezone.utc)
        parents = list(parent_ids)
        commit = cls(
            id=calculate_commit_id(parents, tree_id, author, email, message, timestamp),
            parent_ids=parents,
            tree_id=tree_id,
            author=author,
            email=email,
            message=message,
            timestamp=timestamp,
            files=dict(files),
        )
        if keypair is not None:
            commit.sign(keypair)
        return commit

    @property
    def short_id(self) -> str:
        return get_short_hash(self.id)

    def sign(self, keypair: Ed25519PrivateKey) -> None:
        """Sign the commit id with ``keypair``."""
        self.signature = keypair.sign(self.id.encode("utf-8"))
        self.public_key = public_key_bytes(keypair)

    def verify(self) -> bool:
        """Return whether the commit carries a valid signature of its id."""
        if self.public_key is None or self.signature is None:
            return False
        if len(self.public_key) != 32 or len(self.signature) != 64:
            return False
        try:
            key = Ed25519PublicKey.from_public_bytes(bytes(self.public_key))
            key.verify(bytes(self.signature), self.id.encode("utf-8"))
        except (InvalidSignature, ValueError):
            return False
        return True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "parent_ids": list(self.parent_ids),
            "tree_id": self.tree_id,
            "author": self.author,
            "email": self.email,
            "message": self.message,
            "timestamp": _format_timestamp(self.timestamp),
            "files": {path: change.to_dict() for path, change in self.files.items()},
            "public_key": None if self.public_key is None else list(self.public_key),
            "signature": None if self.signature is None else list(self.signature),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Commit":
        return cls(
            id=data["id"],
            parent_ids=list(data["parent_ids"]),
            tree_id=data["tree_id"],
            author=data["author"],
            email=data["email"],
            message=data["message"],
            timestamp=_parse_timestamp(data["timestamp"]),
            files={path: FileChange.from_dict(fc) for path, fc in data["files"].items()},
            public_key=_optional_bytes(data.get("public_key")),
            signature=_optional_bytes(data.get("signature")),
        )

    def to_object(self) -> Object:
        """Encode the commit as a ``commit`` object holding compact JSON."""
        return Object.create(
            "commit",
            json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False),
        )

    @classmethod
    def from_object(cls, obj: Object) -> "Commit":
        """Decode a commit from an object's JSON data."""
        try:
            return cls.from_dict(json.loads(obj.data))
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise ObjectError(f"Invalid commit data: {exc}") from exc


def verify_ancestry(
    objects_dir: str | os.PathLike[str],
    commit_id: str,
    on_commit: Callable[[Commit, bool], None] | None = None,
) -> bool:
    """Verify a commit and all its ancestors; unreadable commits count as invalid."""
    visited: set[str] = set()
    stack = [commit_id]
    all_valid = True
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        try:
            commit = Commit.from_object(Object.load(objects_dir, current))
        except (ObjectError, OSError):
            all_valid = False
            continue
        valid = commit.verify()
        if on_commit is not None:
            on_commit(commit, valid)
        if not valid:
            all_valid = False
        stack.extend(commit.parent_ids)
    return all_valid