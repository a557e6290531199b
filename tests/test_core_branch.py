from datetime import timedelta

import pytest

from helixvcs.core.branch import Branch


def test_new_branch_has_no_head_and_equal_timestamps():
    branch = Branch("feature")
    assert branch.head_commit is None
    assert branch.upstream is None
    assert branch.created_at == branch.last_updated


def test_update_head_sets_commit_and_moves_update_time():
    branch = Branch("feature")
    branch.update_head("abc123def456")
    assert branch.head_commit == "abc123def456"
    assert branch.last_updated >= branch.created_at


@pytest.mark.parametrize(
    "name, expected", [("main", True), ("master", True), ("dev", False), ("mainline", False)]
)
def test_is_main(name, expected):
    assert Branch(name).is_main is expected


def test_ages_are_non_negative():
    branch = Branch("x")
    assert branch.age >= timedelta(0)
    assert branch.last_update_age >= timedelta(0)


def test_dict_round_trip():
    branch = Branch("topic", head_commit="deadbeef" * 8, upstream="origin/topic")
    branch.update_head("cafebabe" * 8)
    restored = Branch.from_dict(branch.to_dict())
    assert restored == branch


def test_to_dict_keys_and_utc_suffix():
    data = Branch("main").to_dict()
    assert set(data) == {"name", "head_commit", "upstream", "created_at", "last_updated"}
    assert data["created_at"].endswith("Z")
    assert data["head_commit"] is None


def test_from_dict_accepts_nanosecond_timestamps():
    branch = Branch.from_dict(
        {
            "name": "main",
            "head_commit": None,
            "upstream": None,
            "created_at": "2024-01-02T03:04:05.123456789Z",
            "last_updated": "2024-01-02T03:04:05Z",
        }
    )
    assert branch.created_at.year == 2024
    assert branch.created_at.microsecond == 123456
    assert branch.created_at > branch.last_updated


def test_from_dict_missing_name_raises():
    with pytest.raises(KeyError):
        Branch.from_dict({"created_at": "2024-01-02T03:04:05Z", "last_updated": "2024-01-02T03:04:05Z"})