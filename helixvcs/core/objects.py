"""Content-addressed objects stored as raw-deflate files, and trees."""

from __future__ import annotations

import hashlib
import json
import os
import re
import zlib
from dataclasses import asdict, dataclass, field
from pathlib import Path

from helixvcs.utils.hashing import get_short_hash

_SIZE_RE = re.compile(r"\+?[0-9]+")


class ObjectError(ValueError):
    """Raised when an object is missing or cannot be decoded."""


def _serialize(object_type: str, data: str) -> bytes:
    body = data.encode("utf-8")
    return f"{object_type} {len(body)}\0".encode("utf-8") + body


def _compress(payload: bytes) -> bytes:
    compressor = zlib.compressobj(6, zlib.DEFLATED, -15)
    return compressor.compress(payload) + compressor.flush()


def _object_path(objects_dir: str | os.PathLike[str], object_id: str) -> Path:
    if len(object_id) < 3:
        raise ObjectError(f"Invalid object id {object_id!r}")
    return Path(objects_dir) / object_id[:2] / object_id[2:]


@dataclass
class Object:
    """A stored object: its id, type, textual data and byte size."""

    id: str
    object_type: str
    data: str
    size: int

    @classmethod
    def create(cls, object_type: str, data: str) -> "Object":
        """Build an object, deriving its id from type and content."""
        object_id = hashlib.sha256(_serialize(object_type, data)).hexdigest()
        return cls(object_id, object_type, data, len(data.encode("utf-8")))

    @property
    def short_id(self) -> str:
        return get_short_hash(self.id)

    @property
    def is_commit(self) -> bool:
        return self.object_type == "commit"

    @property
    def is_tree(self) -> bool:
        return self.object_type == "tree"

    @property
    def is_blob(self) -> bool:
        return self.object_type == "blob"

    def save(self, objects_dir: str | os.PathLike[str]) -> None:
        """Write the object under ``objects_dir/<id[:2]>/<id[2:]>``."""
        target = _object_path(objects_dir, self.id)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(_compress(_serialize(self.object_type, self.data)))

    @classmethod
    def load(cls, objects_dir: str | os.PathLike[str], object_id: str) -> "Object":
        """Read and validate a stored object."""
        target = _object_path(objects_dir, object_id)
        if not target.exists():
            raise ObjectError(f"Object {object_id} not found")
        raw = target.read_bytes()
        try:
            text = zlib.decompress(raw, -15).decode("utf-8")
        except (zlib.error, UnicodeDecodeError) as exc:
            raise ObjectError(f"Corrupt object {object_id}") from exc

        header, sep, content = text.partition("\0")
        if not sep:
            raise ObjectError("Invalid object format")
        header_parts = header.split()
        if len(header_parts) != 2:
            raise ObjectError("Invalid object header")
        object_type, size_text = header_parts
        if not _SIZE_RE.fullmatch(size_text):
            raise ObjectError("Invalid object size")
        size = int(size_text)
        if len(content.encode("utf-8")) != size:
            raise ObjectError("Object size mismatch")
        return cls(object_id, object_type, content, size)


@dataclass
class TreeEntry:
    """One named entry of a tree."""

    name: str
    object_id: str
    object_type: str
    mode: int


@dataclass
class Tree:
    """A flat list of named object references."""

    entries: list[TreeEntry] = field(default_factory=list)

    def add_entry(self, name: str, object_id: str, object_type: str, mode: int) -> None:
        self.entries.append(TreeEntry(name, object_id, object_type, mode))

    def to_object(self) -> Object:
        """Encode the tree as a ``tree`` object holding compact JSON."""
        document = {"entries": [asdict(entry) for entry in self.entries]}
        return Object.create(
            "tree", json.dumps(document, separators=(",", ":"), ensure_ascii=False)
        )

    @classmethod
    def from_object(cls, obj: Object) -> "Tree":
        """Decode a tree from an object's JSON data."""
        try:
            document = json.loads(obj.data)
            entries = [
                TreeEntry(
                    name=_require(item["name"], str),
                    object_id=_require(item["object_id"], str),
                    object_type=_require(item["object_type"], str),
                    mode=_require(item["mode"], int),
                )
                for item in document["entries"]
            ]
        except (ValueError, KeyError, TypeError) as exc:
            raise ObjectError(f"Invalid tree data: {exc}") from exc
        return cls(entries)


def _require(value, kind):
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise TypeError(f"expected {kind.__name__}, got {type(value).__name__}")
    return value