from datetime import datetime, timezone

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from helixvcs.core.commit import (
    ChangeType,
    Commit,
    FileChange,
    calculate_commit_id,
    verify_ancestry,
)
from helixvcs.core.objects import Object, ObjectError


def _files():
    return {
        "a.txt": FileChange("a.txt", ChangeType.ADDED, "1" * 64, 3, 0o644),
        "b.txt": FileChange(
            "b.txt", ChangeType.RENAMED, "2" * 64, 4, 0o644, old_path="old.txt"
        ),
    }


def _make(parents, message, keypair=None):
    return Commit.create(
        parents, "t" * 64, "Alice", "alice@example.com", message, _files(), keypair
    )


def test_id_matches_calculated_id():
    commit = _make([], "first")
    assert commit.id == calculate_commit_id(
        [], commit.tree_id, "Alice", "alice@example.com", "first", commit.timestamp
    )


def test_id_depends_on_fields():
    ts = datetime(2024, 1, 1, tzinfo=timezone.utc)
    base = calculate_commit_id(["p"], "t", "A", "a@example.com", "m", ts)
    assert base == calculate_commit_id(["p"], "t", "A", "a@example.com", "m", ts)
    assert base != calculate_commit_id(["p"], "t", "A", "a@example.com", "other", ts)
    assert base != calculate_commit_id(["q"], "t", "A", "a@example.com", "m", ts)


def test_signed_commit_verifies():
    commit = _make([], "signed", Ed25519PrivateKey.generate())
    assert commit.verify() is True
    assert len(commit.public_key) == 32
    assert len(commit.signature) == 64


def test_unsigned_commit_does_not_verify():
    assert _make([], "unsigned").verify() is False


def test_tampered_id_does_not_verify():
    commit = _make([], "signed", Ed25519PrivateKey.generate())
    commit.id = "0" * 64
    assert commit.verify() is False


def test_sign_after_creation():
    commit = _make([], "later")
    commit.sign(Ed25519PrivateKey.generate())
    assert commit.verify() is True


def test_short_id():
    commit = _make([], "x")
    assert commit.short_id == commit.id[:8]


def test_renamed_file_change_dict_form():
    change = _files()["b.txt"]
    assert change.to_dict() == {
        "path": "b.txt",
        "change_type": {"Renamed": {"old_path": "old.txt"}},
        "content_hash": "2" * 64,
        "size": 4,
        "mode": 0o644,
    }
    assert FileChange.from_dict(change.to_dict()) == change


def test_plain_change_type_is_a_string():
    assert _files()["a.txt"].to_dict()["change_type"] == "Added"


def test_renamed_requires_old_path():
    with pytest.raises(ValueError):
        FileChange("x", ChangeType.RENAMED, "h", 1, 0o644)


def test_object_round_trip(tmp_path):
    commit = _make(["p" * 64], "round trip", Ed25519PrivateKey.generate())
    obj = commit.to_object()
    assert obj.is_commit
    obj.save(tmp_path)
    restored = Commit.from_object(Object.load(tmp_path, obj.id))
    assert restored == commit
    assert restored.verify() is True


def test_timestamp_round_trips_through_dict():
    commit = _make([], "ts")
    assert Commit.from_dict(commit.to_dict()).timestamp == commit.timestamp


def test_from_object_rejects_invalid_data():
    with pytest.raises(ObjectError):
        Commit.from_object(Object.create("commit", "not json"))
    with pytest.raises(ObjectError):
        Commit.from_object(Object.create("commit", '{"id": "x"}'))


def test_verify_ancestry_all_signed(tmp_path):
    key = Ed25519PrivateKey.generate()
    root = _make([], "root", key)
    root.to_object().save(tmp_path)
    child = _make([root.to_object().id], "child", key)
    child_obj = child.to_object()
    child_obj.save(tmp_path)

    seen = []
    result = verify_ancestry(tmp_path, child_obj.id, lambda c, ok: seen.append((c.message, ok)))
    assert result is True
    assert sorted(seen) == [("child", True), ("root", True)]


def test_verify_ancestry_detects_unsigned_parent(tmp_path):
    root = _make([], "root")
    root_obj = root.to_object()
    root_obj.save(tmp_path)
    child_obj = _make([root_obj.id], "child", Ed25519PrivateKey.generate()).to_object()
    child_obj.save(tmp_path)
    assert verify_ancestry(tmp_path, child_obj.id) is False


def test_verify_ancestry_missing_parent_is_invalid(tmp_path):
    child_obj = _make(["9" * 64], "orphan", Ed25519PrivateKey.generate()).to_object()
    child_obj.save(tmp_path)
    assert verify_ancestry(tmp_path, child_obj.id) is False