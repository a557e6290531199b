"""Storage of the user's Ed25519 signing key."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

SECRET_KEY_LENGTH = 32
KEY_FILE_NAME = "ed25519.key"


def key_dir() -> Path:
    """Return the directory that holds the signing key."""
    try:
        home = Path.home()
    except RuntimeError:
        return Path(".helix") / "keys"
    return home / ".helix" / "keys"


def keypair_path() -> Path:
    """Return the path of the signing key file."""
    return key_dir() / KEY_FILE_NAME


def _secret_bytes(keypair: Ed25519PrivateKey) -> bytes:
    return keypair.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )


def public_key_bytes(keypair: Ed25519PrivateKey) -> bytes:
    """Return the raw 32-byte public key of a signing key."""
    return keypair.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


def generate_and_save_keypair() -> Ed25519PrivateKey:
    """Create a new signing key and store it, replacing any existing one."""
    keypair = Ed25519PrivateKey.generate()
    key_dir().mkdir(parents=True, exist_ok=True)
    keypair_path().write_bytes(_secret_bytes(keypair))
    return keypair


def load_keypair() -> Ed25519PrivateKey:
    """Load the stored signing key."""
    with keypair_path().open("rb") as handle:
        secret = handle.read(SECRET_KEY_LENGTH)
    if len(secret) < SECRET_KEY_LENGTH:
        raise ValueError("key file is truncated")
    return Ed25519PrivateKey.from_private_bytes(secret)


def keypair_exists() -> bool:
    """Return whether a signing key has been stored."""
    return keypair_path().exists()


def export_keypair(path: str | os.PathLike[str]) -> None:
    """Copy the stored signing key to ``path``."""
    shutil.copy(keypair_path(), path)


def import_keypair(path: str | os.PathLike[str]) -> None:
    """Install the key file at ``path`` as the signing key."""
    key_dir().mkdir(parents=True, exist_ok=True)
    shutil.copy(path, keypair_path())