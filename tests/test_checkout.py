import pytest

from helixvcs.commands.checkout import checkout_branch
from helixvcs.commands.init import init_repository
from helixvcs.core.repository import Repository


@pytest.fixture
def repo(tmp_path):
    repository = init_repository(tmp_path / "proj")
    repository.create_branch("dev")
    return repository


def test_missing_branch_is_reported(repo, capsys):
    capsys.readouterr()
    assert checkout_branch(repo, "nope") is False
    assert "Branch 'nope' does not exist" in capsys.readouterr().out
    assert repo.current_branch == "main"


def test_current_branch_is_reported(repo, capsys):
    capsys.readouterr()
    assert checkout_branch(repo, "main") is False
    assert "Already on branch 'main'" in capsys.readouterr().out


def test_switch_persists(repo, capsys):
    capsys.readouterr()
    assert checkout_branch(repo, "dev") is True
    out = capsys.readouterr().out
    assert "Switched to branch 'dev'" in out
    assert "HEAD:" not in out
    assert Repository.open(repo.path).current_branch == "dev"


def test_switch_shows_head(repo, capsys):
    head = "0123456789abcdef" * 4
    repo.branches["dev"].update_head(head)
    repo.save()
    capsys.readouterr()
    checkout_branch(repo, "dev")
    assert f"HEAD: {head[:8]}" in capsys.readouterr().out