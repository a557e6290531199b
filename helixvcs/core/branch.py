"""Branches: named pointers to a head commit."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

MAIN_BRANCH_NAMES = ("main", "master")

_EXCESS_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp_to_json(ts: datetime) -> str:
    """Render a timestamp as RFC 3339 in UTC with a ``Z`` suffix."""
    return ts.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _timestamp_from_json(text: str) -> datetime:
    """Parse an RFC 3339 timestamp, tolerating sub-microsecond digits."""
    if not isinstance(text, str):
        raise TypeError("timestamp must be a string")
    cleaned = _EXCESS_FRACTION_RE.sub(r"\1", text.strip())
    if cleaned.endswith(("Z", "z")):
        cleaned = cleaned[:-1] + "+00:00"
    parsed = datetime.fromisoformat(cleaned)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _optional_timestamp_from_json(value) -> datetime | None:
    return None if value is None else _timestamp_from_json(value)


def _optional_timestamp_to_json(value: datetime | None) -> str | None:
    return None if value is None else _timestamp_to_json(value)


@dataclass
class Branch:
    """A named branch with an optional head commit and upstream."""

    name: str
    head_commit: str | None = None
    upstream: str | None = None
    created_at: datetime = field(default_factory=_now)
    last_updated: datetime | None = None

    def __post_init__(self) -> None:
        if self.last_updated is None:
            self.last_updated = self.created_at

    def update_head(self, commit_id: str) -> None:
        """Point the branch at ``commit_id`` and record the update time."""
        self.head_commit = commit_id
        self.last_updated = _now()

    @property
    def is_main(self) -> bool:
        return self.name in MAIN_BRANCH_NAMES

    @property
    def age(self) -> timedelta:
        return _now() - self.created_at

    @property
    def last_update_age(self) -> timedelta:
        return _now() - self.last_updated

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "head_commit": self.head_commit,
            "upstream": self.upstream,
            "created_at": _timestamp_to_json(self.created_at),
            "last_updated": _timestamp_to_json(self.last_updated),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Branch":
        return cls(
            name=data["name"],
            head_commit=data.get("head_commit"),
            upstream=data.get("upstream"),
            created_at=_timestamp_from_json(data["created_at"]),
            last_updated=_timestamp_from_json(data["last_updated"]),
        )