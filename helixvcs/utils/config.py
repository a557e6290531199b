"""Global user configuration stored in the home directory as TOML."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

import tomli_w

CONFIG_FILE_NAME = ".helixconfig"


def config_path() -> Path:
    """Return the location of the global configuration file."""
    return Path.home() / CONFIG_FILE_NAME


def _optional_str(table: dict, key: str) -> str | None:
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"user.{key} must be a string")
    return value


@dataclass
class GlobalConfig:
    """User identity settings shared by all repositories."""

    user_name: str | None = None
    user_email: str | None = None

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> "GlobalConfig":
        """Read the configuration; a missing file yields an empty configuration."""
        target = Path(path) if path is not None else config_path()
        if not target.exists():
            return cls()
        with target.open("rb") as handle:
            document = tomllib.load(handle)
        user = document.get("user")
        if user is None:
            return cls()
        if not isinstance(user, dict):
            raise ValueError("user must be a table")
        return cls(user_name=_optional_str(user, "name"), user_email=_optional_str(user, "email"))

    def save(self, path: str | os.PathLike[str] | None = None) -> None:
        """Write the configuration as TOML."""
        target = Path(path) if path is not None else config_path()
        user = {
            key: value
            for key, value in (("name", self.user_name), ("email", self.user_email))
            if value is not None
        }
        document = {"user": user} if user else {}
        target.write_text(tomli_w.dumps(document), encoding="utf-8")