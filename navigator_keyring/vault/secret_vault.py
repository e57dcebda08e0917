"""
SecretVault — Encrypted service-to-password storage on local disk.

Provides the public API used by the command line:
- ``add(service, password)`` — seal and persist a secret
- ``get(service)`` — open and return a secret
- ``delete(service)`` — remove a secret
- ``services()`` / ``service in vault`` — enumerate and check entries

Security Note:
    Never log plaintext or ciphertext values. Only log service names and
    file paths. Decrypted values exist in process memory during use.
"""
import logging
from typing import Optional

from ..exceptions import FormatError, NotFoundError
from .config import KeyringConfig
from .crypto import open_sealed, seal
from .keystore import KeyStore
from .store import RecordStore, SecretStore

logger = logging.getLogger("navigator.keyring")

_MAX_SERVICE_LENGTH = 255


class SecretVault:
    """Keyring bound to one key file and one data file.

    The records document is loaded on construction. The master key is
    only loaded (or generated) by operations that seal or open records,
    so listing and deleting never create a key file.

    When ``bind_service`` is enabled the service name is authenticated
    together with its record, and a record copied under another name
    fails to open.
    """

    def __init__(self, config: Optional[KeyringConfig] = None):
        self._config = config or KeyringConfig()
        self._keystore = KeyStore(self._config.key_file)
        self._records = RecordStore(
            self._config.data_file,
            recover_corrupt=self._config.recover_corrupt_store,
        )
        self._store: SecretStore = self._records.load()
        self._key: Optional[bytes] = None

    @property
    def config(self) -> KeyringConfig:
        return self._config

    @property
    def store(self) -> SecretStore:
        return self._store

    @property
    def key(self) -> bytes:
        if self._key is None:
            self._key = self._keystore.load_or_generate()
        return self._key

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _validate_service(self, service: str) -> None:
        """Validate a service name.

        Raises:
            ValueError: If the name is empty or too long.
        """
        if not service:
            raise ValueError("Service name cannot be empty")
        if len(service) > _MAX_SERVICE_LENGTH:
            raise ValueError(
                f"Service name cannot exceed {_MAX_SERVICE_LENGTH} characters"
            )

    def _associated_data(self, service: str) -> Optional[bytes]:
        if self._config.bind_service:
            return service.encode("utf-8")
        return None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add(self, service: str, password: str) -> None:
        """Seal and persist a password, replacing any previous one.

        Args:
            service: Service name (1-255 chars).
            password: Secret to store.

        Raises:
            ValueError: If the service name is invalid.
            KeyIOError: If a new master key cannot be persisted.
            StoreIOError: If the data file cannot be written.
        """
        self._validate_service(service)
        record = seal(
            password.encode("utf-8"),
            self.key,
            associated_data=self._associated_data(service),
            backend=self._config.cipher_backend,
        )
        self._store.add(service, record)
        self._records.save(self._store)
        logger.debug("Keyring add: service=%s", service)

    def get(self, service: str) -> str:
        """Open and return the password stored for ``service``.

        Raises:
            NotFoundError: If nothing is stored for the service.
            FormatError: If the record or its plaintext is malformed.
            AuthenticationError: If the record fails verification.
        """
        try:
            record = self._store[service]
        except KeyError:
            raise NotFoundError(service) from None
        plaintext = open_sealed(
            record,
            self.key,
            associated_data=self._associated_data(service),
            backend=self._config.cipher_backend,
        )
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as err:
            raise FormatError(
                f"Secret for '{service}' is not valid UTF-8"
            ) from err

    def delete(self, service: str) -> bool:
        """Remove the secret for ``service``; absent services are a no-op.

        Returns:
            True if a secret was removed.
        """
        removed = self._store.remove(service)
        if removed:
            self._records.save(self._store)
            logger.debug("Keyring delete: service=%s", service)
        return removed

    def services(self) -> list[str]:
        return self._store.services()

    def __contains__(self, service: object) -> bool:
        return service in self._store

    def __len__(self) -> int:
        return len(self._store)
