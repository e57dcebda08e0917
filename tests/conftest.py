import pytest

from navigator_keyring.vault import KeyringConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep KEYRING_* variables from the outer environment out of tests."""
    for name in ("KEYRING_DATA_FILE", "KEYRING_KEY_FILE", "KEYRING_CIPHER_BACKEND"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def key():
    """A fixed 32-byte master key."""
    return bytes(range(32))


@pytest.fixture
def other_key():
    """A different 32-byte master key."""
    return bytes(range(1, 33))


@pytest.fixture
def data_path(tmp_path):
    return tmp_path / "passwords.json"


@pytest.fixture
def key_path(tmp_path):
    return tmp_path / "master.key"


@pytest.fixture
def config(data_path, key_path):
    """Configuration isolated in a temporary directory."""
    return KeyringConfig(data_file=data_path, key_file=key_path)
