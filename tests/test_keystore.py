"""Tests for master key loading and generation."""
import os
import stat
from pathlib import Path

import pytest

from navigator_keyring.exceptions import KeyIOError
from navigator_keyring.vault.keystore import KeyStore

_real_read_bytes = Path.read_bytes


def _backups(key_path):
    return sorted(key_path.parent.glob(key_path.name + ".corrupt-*"))


@pytest.fixture
def unreadable(monkeypatch, key_path):
    """Make reading the key file fail with a permission error."""
    def read_bytes(self):
        if self == key_path:
            raise PermissionError(13, "Permission denied", str(self))
        return _real_read_bytes(self)

    monkeypatch.setattr(Path, "read_bytes", read_bytes)


class TestLoadOrGenerate:
    """Tests for KeyStore.load_or_generate."""

    def test_generates_when_missing(self, key_path):
        """Test a 32-byte key file is created on first use."""
        store = KeyStore(key_path)
        assert store.exists is False
        key = store.load_or_generate()
        assert len(key) == 32
        assert key_path.read_bytes() == key
        assert store.exists is True

    def test_creates_parent_directory(self, tmp_path):
        """Test missing parent directories are created."""
        path = tmp_path / "nested" / "dir" / "master.key"
        key = KeyStore(path).load_or_generate()
        assert path.read_bytes() == key

    def test_same_key_on_every_run(self, key_path):
        """Test subsequent loads return the persisted key."""
        first = KeyStore(key_path).load_or_generate()
        second = KeyStore(key_path).load_or_generate()
        assert first == second

    def test_loads_existing_key(self, key_path, key):
        """Test an existing valid key file is used verbatim."""
        key_path.write_bytes(key)
        assert KeyStore(key_path).load_or_generate() == key

    def test_fresh_keys_differ(self, tmp_path):
        """Test two fresh environments get different keys."""
        a = KeyStore(tmp_path / "a.key").load_or_generate()
        b = KeyStore(tmp_path / "b.key").load_or_generate()
        assert a != b

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_key_file_is_private(self, key_path):
        """Test the key file is readable by its owner only."""
        KeyStore(key_path).load_or_generate()
        mode = stat.S_IMODE(key_path.stat().st_mode)
        assert mode == 0o600

    def test_unreadable_key_regenerates(self, key_path, key, unreadable):
        """Test a key file that cannot be read is replaced by a new key."""
        key_path.write_bytes(key)
        new_key = KeyStore(key_path).load_or_generate()
        assert len(new_key) == 32
        assert new_key != key
        assert _real_read_bytes(key_path) == new_key

    def test_unreadable_key_moved_aside(self, key_path, key, unreadable):
        """Test the unreadable key is kept in a .corrupt file."""
        key_path.write_bytes(key)
        KeyStore(key_path).load_or_generate()
        backups = _backups(key_path)
        assert len(backups) == 1
        assert _real_read_bytes(backups[0]) == key

    def test_unreadable_key_kept_when_move_fails(self, key_path, key, unreadable, monkeypatch):
        """Test the key is never overwritten if it cannot be moved aside."""
        key_path.write_bytes(key)

        def fail_replace(src, dst):
            raise PermissionError(13, "Permission denied", str(src))

        monkeypatch.setattr(os, "replace", fail_replace)
        with pytest.raises(KeyIOError):
            KeyStore(key_path).load_or_generate()
        assert _real_read_bytes(key_path) == key
        assert _backups(key_path) == []


class TestMalformedKeyFile:
    """Tests for key files of the wrong length."""

    @pytest.mark.parametrize("content", [b"", b"short", b"x" * 31, b"x" * 33])
    def test_wrong_length_regenerates(self, key_path, content):
        """Test a wrong-length key file is replaced by a new key."""
        key_path.write_bytes(content)
        key = KeyStore(key_path).load_or_generate()
        assert len(key) == 32
        assert key_path.read_bytes() == key

    def test_malformed_key_moved_aside(self, key_path):
        """Test the malformed bytes are kept in a .corrupt file."""
        key_path.write_bytes(b"short")
        KeyStore(key_path).load_or_generate()
        backups = _backups(key_path)
        assert len(backups) == 1
        assert backups[0].read_bytes() == b"short"

    def test_backups_never_overwritten(self, key_path):
        """Test a second malformed key gets its own backup."""
        key_path.write_bytes(b"first")
        KeyStore(key_path).load_or_generate()
        key_path.write_bytes(b"second")
        KeyStore(key_path).load_or_generate()
        contents = sorted(p.read_bytes() for p in _backups(key_path))
        assert contents == [b"first", b"second"]

    def test_malformed_key_logs_warning(self, key_path, caplog):
        """Test regeneration of a malformed key is logged."""
        key_path.write_bytes(b"short")
        with caplog.at_level("WARNING", logger="navigator.keyring"):
            KeyStore(key_path).load_or_generate()
        assert "generating a new one" in caplog.text


class TestWriteFailure:
    """Tests for unwritable key locations."""

    def test_unwritable_location_raises(self, tmp_path):
        """Test KeyIOError when the key cannot be persisted."""
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("file")
        store = KeyStore(blocker / "master.key")
        with pytest.raises(KeyIOError):
            store.load_or_generate()

    def test_no_temporary_files_left(self, key_path):
        """Test generation leaves only the key file behind."""
        KeyStore(key_path).load_or_generate()
        assert sorted(p.name for p in key_path.parent.iterdir()) == [key_path.name]
