"""Keyring Vault — Local encrypted storage of service passwords.

Security Note (Threat Model):
    The master key is a raw random blob stored next to the records, with
    only file permissions protecting it. Anyone who can read both files
    can read every secret. This is an accepted limitation: passphrase
    derived keys are out of scope.
"""

from .secret_vault import SecretVault
from .keystore import KeyStore
from .store import RecordStore, SecretStore
from .config import KeyringConfig
from .crypto import seal, open_sealed

__all__ = [
    "SecretVault",
    "KeyStore",
    "RecordStore",
    "SecretStore",
    "KeyringConfig",
    "seal",
    "open_sealed",
]
