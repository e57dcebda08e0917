"""
Keyring Configuration — File locations and validated settings.

Reads optional overrides from environment variables:
    KEYRING_DATA_FILE = <path to the encrypted records document>
    KEYRING_KEY_FILE = <path to the raw 32-byte master key>
    KEYRING_CIPHER_BACKEND = aesgcm | chacha20

Security Note:
    Never log key material. Only log file paths and service names.
"""
import os
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from ..conf import (
    DEFAULT_DATA_FILE,
    DEFAULT_KEY_FILE,
    ENV_DATA_FILE,
    ENV_KEY_FILE,
    ENV_CIPHER_BACKEND,
)
from .crypto import CIPHER_BACKENDS, DEFAULT_BACKEND

logger = logging.getLogger("navigator.keyring")


class KeyringConfig(BaseModel):
    """Validated keyring configuration."""

    data_file: Path = Field(default=DEFAULT_DATA_FILE, validate_default=True)
    key_file: Path = Field(default=DEFAULT_KEY_FILE, validate_default=True)
    cipher_backend: str = Field(default=DEFAULT_BACKEND)
    bind_service: bool = False
    recover_corrupt_store: bool = False

    @field_validator("data_file", "key_file")
    @classmethod
    def expand_path(cls, v: Path) -> Path:
        """Expand ``~`` so files land in the user's home directory."""
        return v.expanduser()

    @field_validator("cipher_backend")
    @classmethod
    def validate_cipher(cls, v: str) -> str:
        """Validate cipher backend is supported."""
        v = v.lower()
        if v not in CIPHER_BACKENDS:
            raise ValueError(f"Unsupported cipher backend: {v}")
        return v

    @model_validator(mode="after")
    def validate_distinct_files(self) -> "KeyringConfig":
        """The key and the records must never share a file."""
        if self.data_file.resolve() == self.key_file.resolve():
            raise ValueError(
                f"data_file and key_file must differ (both are {self.data_file})"
            )
        return self

    @classmethod
    def from_env(cls, **overrides: Any) -> "KeyringConfig":
        """Create KeyringConfig from environment, then explicit overrides.

        Args:
            **overrides: Field values that win over the environment.
                ``None`` values are ignored so unset CLI options fall
                through.

        Returns:
            Populated KeyringConfig instance.
        """
        values: dict[str, Any] = {}
        env_map = {
            "data_file": ENV_DATA_FILE,
            "key_file": ENV_KEY_FILE,
            "cipher_backend": ENV_CIPHER_BACKEND,
        }
        for field, env_name in env_map.items():
            raw = os.environ.get(env_name)
            if raw:
                values[field] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        config = cls(**values)
        logger.debug(
            "Keyring config: data_file=%s key_file=%s cipher=%s",
            config.data_file, config.key_file, config.cipher_backend,
        )
        return config
