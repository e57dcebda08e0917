"""
Keyring Exceptions.

Library code raises these; only the command-line front end turns them
into messages and exit codes.

Security Note:
    Exception messages carry service names and file paths only, never
    plaintext, ciphertext or key material.
"""


class KeyringError(Exception):
    """Base class for all keyring errors."""


class KeyIOError(KeyringError):
    """The master key file could not be written (or created)."""


class StoreIOError(KeyringError):
    """The data file could not be read or written."""


class FormatError(KeyringError):
    """A document or sealed record is not in the expected format."""


class AuthenticationError(KeyringError):
    """AEAD tag verification failed: tampered data or a different key."""


class NotFoundError(KeyringError, KeyError):
    """No secret is stored for the requested service."""

    def __init__(self, service: str):
        super().__init__(service)
        self.service = service

    def __str__(self) -> str:
        return f"No secret stored for '{self.service}'"
