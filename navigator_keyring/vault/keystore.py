"""
KeyStore — Ownership of the local 256-bit master key.

The key is a raw random blob stored verbatim in its own file (no header,
no versioning). Losing or replacing that file makes every sealed record
permanently unreadable, and nothing binds the data file to a specific key,
so a substituted key only shows up as authentication failures.

Security Note:
    Never log key material. Only log the key file path.
"""
import os
import logging
import time
import secrets
from pathlib import Path

from ..exceptions import KeyIOError
from ..utils import atomic_write
from .crypto import KEY_LENGTH

logger = logging.getLogger("navigator.keyring")


class KeyStore:
    """Loads the master key from disk, generating it on first use."""

    def __init__(self, key_path: Path):
        self._path = Path(key_path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def exists(self) -> bool:
        return self._path.is_file()

    def load_or_generate(self) -> bytes:
        """Return the persisted master key, creating one if needed.

        A key file that cannot be read, or whose length is not exactly
        32 bytes, is treated as absent. An existing file is never
        overwritten: it is first moved aside to
        ``<name>.corrupt-<timestamp>`` so the old bytes stay available
        for manual recovery.

        Returns:
            Raw 32-byte master key.

        Raises:
            KeyIOError: If an existing key file cannot be moved aside, or a
                newly generated key cannot be persisted.
        """
        try:
            key = self._path.read_bytes()
        except FileNotFoundError:
            logger.info("No master key at %s, generating one", self._path)
        except OSError as err:
            logger.warning(
                "Cannot read master key at %s (%s), generating a new one",
                self._path, err,
            )
            if os.path.lexists(self._path):
                self._quarantine()
        else:
            if len(key) == KEY_LENGTH:
                return key
            logger.warning(
                "Master key at %s has %d bytes (expected %d), generating a new one",
                self._path, len(key), KEY_LENGTH,
            )
            self._quarantine()
        return self.generate()

    def generate(self) -> bytes:
        """Generate a fresh master key and persist it atomically.

        Raises:
            KeyIOError: If the key file cannot be written.
        """
        key = secrets.token_bytes(KEY_LENGTH)
        try:
            atomic_write(self._path, key)
        except OSError as err:
            raise KeyIOError(
                f"Cannot write master key to {self._path}: {err}"
            ) from err
        logger.info("Master key written to %s", self._path)
        return key

    def _quarantine(self) -> Path:
        """Move an unusable key file out of the way for manual recovery.

        Raises:
            KeyIOError: If the file cannot be moved; it is then left in place.
        """
        stamp = time.strftime("%Y%m%dT%H%M%S")
        target = self._path.with_name(f"{self._path.name}.corrupt-{stamp}")
        counter = 1
        while os.path.lexists(target):
            target = self._path.with_name(
                f"{self._path.name}.corrupt-{stamp}-{counter}"
            )
            counter += 1
        try:
            os.replace(self._path, target)
        except OSError as err:
            raise KeyIOError(
                f"Cannot move unusable master key {self._path} aside: {err}"
            ) from err
        logger.warning("Unusable master key moved to %s", target)
        return target
