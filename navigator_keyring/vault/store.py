"""
Record Store — Service-name to sealed-record mapping and its JSON document.

Document format (UTF-8 JSON):
    {"passwords": {"<service>": "<base64 envelope>", ...}}

An empty store is written as ``{"passwords": {}}``; the field is never
omitted. Saving always rewrites the whole document through a temporary
file and an atomic rename.

Security Note:
    Records are opaque envelopes here. Never log their values.
"""
import logging
from pathlib import Path
from typing import Optional
from collections.abc import Iterator, Mapping, MutableMapping

import orjson
from pydantic import BaseModel, ValidationError

from ..exceptions import FormatError, StoreIOError
from ..utils import atomic_write

logger = logging.getLogger("navigator.keyring")


class StoreDocument(BaseModel):
    """On-disk shape of the records document."""

    passwords: dict[str, str]

    model_config = {"extra": "ignore"}


class SecretStore(MutableMapping[str, str]):
    """In-memory mapping of service name to sealed record.

    Keys are unique; iteration follows insertion order, which carries no
    meaning. ``is_changed`` tells whether the mapping diverged from what
    was loaded.
    """

    def __init__(self, data: Optional[Mapping[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(data) if data else {}
        self._changed = False

    def __repr__(self) -> str:
        return f'<SecretStore [changed:{self._changed}] services={list(self._data)}>'

    # --- Operations ---

    def add(self, service: str, record: str) -> None:
        """Insert or replace the record for ``service``."""
        self._data[service] = record
        self._changed = True

    def remove(self, service: str) -> bool:
        """Remove ``service`` if present.

        Returns:
            True if an entry was removed, False if there was none.
        """
        if service not in self._data:
            return False
        del self._data[service]
        self._changed = True
        return True

    def services(self) -> list[str]:
        """Return all service names (no particular order)."""
        return list(self._data)

    # --- Properties ---

    @property
    def empty(self) -> bool:
        return not self._data

    @property
    def is_changed(self) -> bool:
        return self._changed

    @is_changed.setter
    def is_changed(self, value: bool) -> None:
        self._changed = value

    # --- Magic Methods ---

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self.add(key, value)

    def __delitem__(self, key: str) -> None:
        if not self.remove(key):
            raise KeyError(key)


class RecordStore:
    """Loads and saves a :class:`SecretStore` from a JSON document."""

    def __init__(self, data_path: Path, recover_corrupt: bool = False):
        self._path = Path(data_path)
        self._recover_corrupt = recover_corrupt

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> SecretStore:
        """Read the document into a fresh SecretStore.

        A missing file is the normal first-run case and yields an empty
        store. A file that exists but cannot be parsed is reported,
        unless the store was created with ``recover_corrupt=True``.

        Returns:
            Loaded SecretStore (unchanged).

        Raises:
            StoreIOError: If the file exists but cannot be read.
            FormatError: If the file is not a valid records document.
        """
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            logger.debug("No data file at %s, starting empty", self._path)
            return SecretStore()
        except OSError as err:
            raise StoreIOError(
                f"Cannot read data file {self._path}: {err}"
            ) from err
        try:
            document = StoreDocument.model_validate(orjson.loads(raw))
        except (orjson.JSONDecodeError, ValidationError) as err:
            if self._recover_corrupt:
                logger.warning(
                    "Data file %s is corrupt (%s), starting with an empty store",
                    self._path, type(err).__name__,
                )
                return SecretStore()
            raise FormatError(
                f"Data file {self._path} is not a valid records document"
            ) from err
        store = SecretStore(document.passwords)
        logger.debug("Loaded %d record(s) from %s", len(store), self._path)
        return store

    def save(self, store: SecretStore) -> None:
        """Serialize the whole store and atomically replace the document.

        Raises:
            StoreIOError: If the document cannot be written.
        """
        document = StoreDocument(passwords=dict(store))
        payload = orjson.dumps(document.model_dump(), option=orjson.OPT_INDENT_2)
        try:
            atomic_write(self._path, payload)
        except OSError as err:
            raise StoreIOError(
                f"Cannot write data file {self._path}: {err}"
            ) from err
        store.is_changed = False
        logger.debug("Saved %d record(s) to %s", len(store), self._path)
