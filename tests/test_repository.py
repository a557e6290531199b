import pytest

from helixvcs.core.branch import Branch
from helixvcs.core.commit import Commit
from helixvcs.core.index import IndexEntry
from helixvcs.core.objects import ObjectError
from helixvcs.core.repository import NotARepositoryError, Repository


@pytest.fixture
def repo(tmp_path, monkeypatch):
    monkeypatch.delenv("HX_AUTHOR", raising=False)
    monkeypatch.delenv("HX_EMAIL", raising=False)
    root = tmp_path / "proj"
    root.mkdir()
    repository = Repository.create(root)
    repository.branches["main"] = Branch("main")
    repository.save()
    return repository


def test_create_uses_defaults(repo, tmp_path):
    assert repo.config.name == "proj"
    assert repo.config.author == "Unknown"
    assert repo.config.email == "unknown@example.com"
    assert repo.git_dir == tmp_path / "proj" / ".helix"
    assert repo.objects_dir == repo.git_dir / "objects"
    assert repo.refs_dir == repo.git_dir / "refs"


def test_create_reads_author_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("HX_AUTHOR", "Ada")
    monkeypatch.setenv("HX_EMAIL", "ada@example.com")
    created = Repository.create(tmp_path)
    assert (created.config.author, created.config.email) == ("Ada", "ada@example.com")


def test_open_missing_repository_raises(tmp_path):
    with pytest.raises(NotARepositoryError):
        Repository.open(tmp_path)


def test_save_and_open_round_trip(repo):
    repo.index.add_file("d/a.txt", IndexEntry("d/a.txt", "abc", 1, 0o644))
    repo.add_remote("origin", "https://example.com/repo")
    repo.save()
    reopened = Repository.open(repo.path)
    assert reopened.config == repo.config
    assert reopened.index == repo.index
    assert reopened.branches == repo.branches
    assert reopened.remotes == repo.remotes
    assert reopened.current_branch == "main"


def test_open_without_optional_files_uses_defaults(repo):
    for name in ("branches.json", "HEAD", "index.json", "remotes.json"):
        (repo.git_dir / name).unlink()
    reopened = Repository.open(repo.path)
    assert list(reopened.branches) == ["main"]
    assert reopened.current_branch == "main"
    assert reopened.remotes == {}
    assert len(reopened.index) == 0


def test_head_is_trimmed(repo):
    repo.create_branch("dev")
    (repo.git_dir / "HEAD").write_text("dev\n", encoding="utf-8")
    assert Repository.open(repo.path).current_branch == "dev"


def test_create_branch_persists_and_rejects_duplicates(repo):
    repo.create_branch("dev")
    assert "dev" in Repository.open(repo.path).branches
    with pytest.raises(ValueError):
        repo.create_branch("dev")


def test_checkout_branch(repo):
    repo.create_branch("dev")
    repo.checkout_branch("dev")
    assert repo.active_branch.name == "dev"
    assert Repository.open(repo.path).current_branch == "dev"
    with pytest.raises(ValueError):
        repo.checkout_branch("nope")


def test_set_head_updates_current_branch(repo):
    repo.set_head("f" * 64)
    assert Repository.open(repo.path).branches["main"].head_commit == "f" * 64


def test_set_head_without_branch_raises(repo):
    repo.current_branch = "ghost"
    with pytest.raises(ValueError):
        repo.set_head("f" * 64)


def test_get_commit_loads_saved_commit(repo):
    commit = Commit.create([], "t" * 64, "Ada", "ada@example.com", "first", {})
    commit.to_object().save(repo.objects_dir)
    loaded = repo.get_commit(commit.to_object().id)
    assert loaded.id == commit.id
    assert loaded.message == "first"


def test_get_commit_missing_raises(repo):
    with pytest.raises(ObjectError):
        repo.get_commit("0" * 64)