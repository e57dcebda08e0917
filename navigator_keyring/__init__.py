"""Navigator Keyring.

Local secret store: service passwords sealed with AES-256-GCM under a
locally generated master key.
"""
from .version import __version__
from .exceptions import (
    KeyringError,
    KeyIOError,
    StoreIOError,
    FormatError,
    AuthenticationError,
    NotFoundError,
)
from .vault import SecretVault, KeyringConfig

__all__ = [
    "__version__",
    "SecretVault",
    "KeyringConfig",
    "KeyringError",
    "KeyIOError",
    "StoreIOError",
    "FormatError",
    "AuthenticationError",
    "NotFoundError",
]
