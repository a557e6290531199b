"""The staging area, kept as a tree of directories and file entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, Union

from helixvcs.core.branch import _now, _timestamp_from_json, _timestamp_to_json
from helixvcs.core.commit import ChangeType, FileChange

INDEX_VERSION = 2


@dataclass
class IndexEntry:
    """A staged file."""

    path: str
    content_hash: str
    size: int
    mode: int
    timestamp: datetime = field(default_factory=_now)
    stage: int = 0

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "content_hash": self.content_hash,
            "size": self.size,
            "mode": self.mode,
            "timestamp": _timestamp_to_json(self.timestamp),
            "stage": self.stage,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "IndexEntry":
        return cls(
            path=data["path"],
            content_hash=data["content_hash"],
            size=int(data["size"]),
            mode=int(data["mode"]),
            timestamp=_timestamp_from_json(data["timestamp"]),
            stage=int(data["stage"]),
        )


# A node is either a staged file or a directory mapping names to nodes.
Node = Union[IndexEntry, dict]


def _iter_entries(nodes: dict) -> Iterator[IndexEntry]:
    for node in nodes.values():
        if isinstance(node, IndexEntry):
            yield node
        else:
            yield from _iter_entries(node)


def _node_to_dict(node: Node) -> dict:
    if isinstance(node, IndexEntry):
        return {"File": node.to_dict()}
    return {"Directory": {name: _node_to_dict(child) for name, child in node.items()}}


def _node_from_dict(data: dict) -> Node:
    if not isinstance(data, dict) or len(data) != 1:
        raise ValueError(f"Invalid index node {data!r}")
    (kind, payload), = data.items()
    if kind == "File":
        return IndexEntry.from_dict(payload)
    if kind == "Directory":
        return {name: _node_from_dict(child) for name, child in payload.items()}
    raise ValueError(f"Unknown index node kind {kind!r}")


@dataclass
class Index:
    """Staged files, nested by the directories of their slash-separated paths."""

    entries: dict = field(default_factory=dict)
    version: int = INDEX_VERSION

    def _parent(self, path: str, create: bool) -> tuple[dict | None, str]:
        *dirs, leaf = path.split("/")
        nodes = self.entries
        for part in dirs:
            child = nodes.get(part)
            if child is None and create:
                child = nodes[part] = {}
            if not isinstance(child, dict):
                if create:
                    raise ValueError(f"'{part}' in '{path}' is a staged file, not a directory")
                return None, leaf
            nodes = child
        return nodes, leaf

    def add_file(self, path: str, entry: IndexEntry) -> None:
        """Stage ``entry`` under ``path``, creating intermediate directories."""
        nodes, leaf = self._parent(path, create=True)
        nodes[leaf] = entry

    def remove_file(self, path: str) -> None:
        """Unstage ``path``; missing paths are ignored."""
        nodes, leaf = self._parent(path, create=False)
        if nodes is not None:
            nodes.pop(leaf, None)

    def get_file(self, path: str) -> IndexEntry | None:
        nodes, leaf = self._parent(path, create=False)
        if nodes is None:
            return None
        node = nodes.get(leaf)
        return node if isinstance(node, IndexEntry) else None

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.get_file(path) is not None

    def files(self) -> list[IndexEntry]:
        """Return every staged entry."""
        return list(_iter_entries(self.entries))

    def file_paths(self) -> list[str]:
        """Return the recorded path of every staged entry."""
        return [entry.path for entry in _iter_entries(self.entries)]

    def __len__(self) -> int:
        return sum(1 for _ in _iter_entries(self.entries))

    @property
    def is_empty(self) -> bool:
        """True when nothing at all is held at the top level."""
        return not self.entries

    def clear(self) -> None:
        self.entries.clear()

    def to_file_changes(self) -> dict[str, FileChange]:
        """Describe every staged entry as an added file, keyed by path."""
        return {
            entry.path: FileChange(
                path=entry.path,
                change_type=ChangeType.ADDED,
                content_hash=entry.content_hash,
                size=entry.size,
                mode=entry.mode,
            )
            for entry in _iter_entries(self.entries)
        }

    def to_dict(self) -> dict:
        return {
            "entries": {name: _node_to_dict(node) for name, node in self.entries.items()},
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Index":
        return cls(
            entries={name: _node_from_dict(node) for name, node in data["entries"].items()},
            version=int(data["version"]),
        )