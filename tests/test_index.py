import pytest

from helixvcs.core.commit import ChangeType
from helixvcs.core.index import Index, IndexEntry


def _entry(path, content_hash="h" * 64, size=3, mode=0o644):
    return IndexEntry(path=path, content_hash=content_hash, size=size, mode=mode)


def test_add_and_get_nested_file():
    index = Index()
    entry = _entry("src/lib/a.txt")
    index.add_file("src/lib/a.txt", entry)
    assert index.get_file("src/lib/a.txt") == entry
    assert "src/lib/a.txt" in index
    assert isinstance(index.entries["src"], dict)


def test_get_missing_or_directory_returns_none():
    index = Index()
    index.add_file("src/a.txt", _entry("src/a.txt"))
    assert index.get_file("src") is None
    assert index.get_file("src/b.txt") is None
    assert index.get_file("src/a.txt/deeper") is None


def test_len_and_paths():
    index = Index()
    for path in ["a.txt", "d/b.txt", "d/e/c.txt"]:
        index.add_file(path, _entry(path))
    assert len(index) == 3
    assert sorted(index.file_paths()) == ["a.txt", "d/b.txt", "d/e/c.txt"]
    assert sorted(e.path for e in index.files()) == ["a.txt", "d/b.txt", "d/e/c.txt"]


def test_remove_file_leaves_directory_node():
    index = Index()
    index.add_file("d/b.txt", _entry("d/b.txt"))
    index.remove_file("d/b.txt")
    index.remove_file("missing/x.txt")
    assert len(index) == 0
    assert not index.is_empty


def test_clear_empties_index():
    index = Index()
    index.add_file("a.txt", _entry("a.txt"))
    index.clear()
    assert index.is_empty
    assert index.files() == []


def test_adding_beneath_a_file_raises():
    index = Index()
    index.add_file("a", _entry("a"))
    with pytest.raises(ValueError):
        index.add_file("a/b", _entry("a/b"))


def test_to_file_changes_marks_added():
    index = Index()
    index.add_file("d/b.txt", _entry("d/b.txt", content_hash="abc", size=7, mode=0o755))
    changes = index.to_file_changes()
    assert list(changes) == ["d/b.txt"]
    change = changes["d/b.txt"]
    assert change.change_type is ChangeType.ADDED
    assert (change.content_hash, change.size, change.mode) == ("abc", 7, 0o755)


def test_serialised_shape_uses_tagged_nodes():
    index = Index()
    index.add_file("d/b.txt", _entry("d/b.txt"))
    data = index.to_dict()
    assert data["version"] == 2
    assert set(data["entries"]["d"]) == {"Directory"}
    assert set(data["entries"]["d"]["Directory"]["b.txt"]) == {"File"}


def test_dict_round_trip():
    index = Index()
    for path in ["a.txt", "d/b.txt", "d/e/c.txt"]:
        index.add_file(path, _entry(path))
    assert Index.from_dict(index.to_dict()) == index


def test_from_dict_rejects_unknown_node():
    with pytest.raises(ValueError):
        Index.from_dict({"entries": {"x": {"Symlink": {}}}, "version": 2})