import pytest

from helixvcs.utils import keys


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    return tmp_path


def test_key_locations(home):
    assert keys.key_dir() == home / ".helix" / "keys"
    assert keys.keypair_path() == home / ".helix" / "keys" / "ed25519.key"


def test_generate_then_load(home):
    assert keys.keypair_exists() is False
    generated = keys.generate_and_save_keypair()
    assert keys.keypair_exists() is True
    loaded = keys.load_keypair()
    assert keys.public_key_bytes(loaded) == keys.public_key_bytes(generated)


def test_key_file_holds_raw_secret(home):
    keys.generate_and_save_keypair()
    assert len(keys.keypair_path().read_bytes()) == keys.SECRET_KEY_LENGTH


def test_public_key_length(home):
    assert len(keys.public_key_bytes(keys.generate_and_save_keypair())) == 32


def test_load_missing_key_raises(home):
    with pytest.raises(FileNotFoundError):
        keys.load_keypair()


def test_load_truncated_key_raises(home):
    keys.key_dir().mkdir(parents=True)
    keys.keypair_path().write_bytes(b"short")
    with pytest.raises(ValueError):
        keys.load_keypair()


def test_export_and_import_round_trip(home, tmp_path):
    original = keys.generate_and_save_keypair()
    exported = tmp_path / "exported.key"
    keys.export_keypair(exported)
    assert exported.read_bytes() == keys.keypair_path().read_bytes()

    keys.keypair_path().unlink()
    assert keys.keypair_exists() is False
    keys.import_keypair(exported)
    assert keys.public_key_bytes(keys.load_keypair()) == keys.public_key_bytes(original)