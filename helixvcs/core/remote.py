"""Remote repository descriptions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from helixvcs.core.branch import (
    _now,
    _optional_timestamp_from_json,
    _optional_timestamp_to_json,
    _timestamp_from_json,
    _timestamp_to_json,
)


@dataclass
class Remote:
    """A named remote with optional distinct fetch and push URLs."""

    name: str
    url: str
    fetch_url: str | None = None
    push_url: str | None = None
    created_at: datetime = field(default_factory=_now)
    last_fetch: datetime | None = None
    last_push: datetime | None = None

    @classmethod
    def with_urls(cls, name: str, fetch_url: str, push_url: str) -> "Remote":
        """Build a remote whose main URL is the fetch URL."""
        return cls(name=name, url=fetch_url, fetch_url=fetch_url, push_url=push_url)

    @property
    def resolved_fetch_url(self) -> str:
        return self.fetch_url if self.fetch_url is not None else self.url

    @property
    def resolved_push_url(self) -> str:
        return self.push_url if self.push_url is not None else self.url

    @property
    def is_origin(self) -> bool:
        return self.name == "origin"

    @property
    def age(self) -> timedelta:
        return _now() - self.created_at

    @property
    def last_fetch_age(self) -> timedelta | None:
        return None if self.last_fetch is None else _now() - self.last_fetch

    @property
    def last_push_age(self) -> timedelta | None:
        return None if self.last_push is None else _now() - self.last_push

    def mark_fetched(self) -> None:
        """Record that a fetch happened now."""
        self.last_fetch = _now()

    def mark_pushed(self) -> None:
        """Record that a push happened now."""
        self.last_push = _now()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "url": self.url,
            "fetch_url": self.fetch_url,
            "push_url": self.push_url,
            "created_at": _timestamp_to_json(self.created_at),
            "last_fetch": _optional_timestamp_to_json(self.last_fetch),
            "last_push": _optional_timestamp_to_json(self.last_push),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Remote":
        return cls(
            name=data["name"],
            url=data["url"],
            fetch_url=data.get("fetch_url"),
            push_url=data.get("push_url"),
            created_at=_timestamp_from_json(data["created_at"]),
            last_fetch=_optional_timestamp_from_json(data.get("last_fetch")),
            last_push=_optional_timestamp_from_json(data.get("last_push")),
        )