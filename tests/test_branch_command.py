from datetime import timedelta

import pytest

from helixvcs.commands.branch import create_branch, format_duration, list_branches
from helixvcs.commands.init import init_repository
from helixvcs.core.repository import Repository


@pytest.fixture
def repo(tmp_path, monkeypatch):
    monkeypatch.delenv("HX_AUTHOR", raising=False)
    monkeypatch.delenv("HX_EMAIL", raising=False)
    return init_repository(tmp_path)


@pytest.mark.parametrize(
    "duration, expected",
    [
        (timedelta(days=2, hours=5), "2 days"),
        (timedelta(hours=3, minutes=10), "3 hours"),
        (timedelta(minutes=5), "5 minutes"),
        (timedelta(seconds=30), "just now"),
    ],
)
def test_format_duration(duration, expected):
    assert format_duration(duration) == expected


def test_create_branch_adds_and_persists(repo, tmp_path):
    assert create_branch(repo, "feature") is True
    assert "feature" in repo.branches
    assert repo.current_branch == "main"
    assert "feature" in Repository.open(tmp_path).branches


def test_create_existing_branch_is_refused(repo):
    create_branch(repo, "feature")
    before = set(repo.branches)

    assert create_branch(repo, "feature") is False
    assert set(repo.branches) == before


def test_list_branches_marks_current(repo, capsys):
    create_branch(repo, "feature")
    capsys.readouterr()

    names = list_branches(repo)
    output = capsys.readouterr().out

    assert names == ["feature", "main"]
    assert "* main" in output
    assert "  feature" in output
    assert "Main branch" in output


def test_list_branches_shows_head(repo, capsys):
    repo.branches["main"].update_head("f" * 64)
    list_branches(repo)
    assert "HEAD: " + "f" * 8 in capsys.readouterr().out