import os

import pytest

from helixvcs.utils.fileio import (
    get_file_mode,
    is_executable,
    read_file_content,
    write_file_content,
)


def test_write_creates_parents_and_read_round_trips(tmp_path):
    target = tmp_path / "a" / "b" / "c.txt"
    write_file_content(target, b"payload\n")
    assert target.is_file()
    assert read_file_content(target) == b"payload\n"


def test_write_overwrites_existing_content(tmp_path):
    target = tmp_path / "file.txt"
    write_file_content(target, b"first")
    write_file_content(target, b"second")
    assert read_file_content(target) == b"second"


def test_read_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_file_content(tmp_path / "nope")


def test_writable_file_mode(tmp_path):
    target = tmp_path / "w.txt"
    target.write_text("x")
    os.chmod(target, 0o644)
    assert get_file_mode(target) == 0o644


def test_readonly_file_mode(tmp_path):
    target = tmp_path / "r.txt"
    target.write_text("x")
    os.chmod(target, 0o444)
    try:
        assert get_file_mode(target) == 0o444
    finally:
        os.chmod(target, 0o644)


def test_is_executable(tmp_path):
    target = tmp_path / "script.sh"
    target.write_text("#!/bin/sh\n")
    os.chmod(target, 0o755)
    assert is_executable(target) is True
    os.chmod(target, 0o644)
    assert is_executable(target) is False


def test_mode_of_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        get_file_mode(tmp_path / "missing")