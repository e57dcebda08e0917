"""
Keyring Crypto Core — Sealing and opening secret envelopes.

Envelope format (text):
    base64( [nonce 12B][encrypted_payload + tag 16B] )

Security Note:
    Never log plaintext or ciphertext values.
    Nonces are random 96-bit; collision probability negligible under normal usage.
"""
import os
import base64
import binascii
import logging
from typing import Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM, ChaCha20Poly1305

from ..exceptions import AuthenticationError, FormatError

logger = logging.getLogger("navigator.keyring")

NONCE_SIZE = 12  # 96-bit nonce
TAG_SIZE = 16  # GCM / Poly1305 tag
KEY_LENGTH = 32  # 256-bit key

CIPHER_BACKENDS = {
    "aesgcm": AESGCM,
    "chacha20": ChaCha20Poly1305,
}
DEFAULT_BACKEND = "aesgcm"


def get_cipher_cls(backend: str = DEFAULT_BACKEND) -> type:
    """Return the AEAD cipher class for a backend name."""
    try:
        return CIPHER_BACKENDS[backend.lower()]
    except KeyError:
        raise ValueError(f"Unsupported cipher backend: {backend}") from None


def _check_key(key: bytes) -> None:
    if len(key) != KEY_LENGTH:
        raise ValueError(
            f"master key must be exactly {KEY_LENGTH} bytes, got {len(key)}"
        )


def seal(
    plaintext: bytes,
    key: bytes,
    associated_data: Optional[bytes] = None,
    backend: str = DEFAULT_BACKEND,
) -> str:
    """Encrypt plaintext into a self-describing envelope.

    Every call draws a fresh nonce, so sealing the same plaintext twice
    yields two different envelopes.

    Args:
        plaintext: Data to encrypt.
        key: Raw 32-byte master key.
        associated_data: Optional bytes authenticated but not encrypted.
        backend: ``aesgcm`` or ``chacha20``.

    Returns:
        ASCII base64 text of ``nonce + ciphertext + tag``.

    Raises:
        ValueError: If the key is not 32 bytes or the backend is unknown.
    """
    _check_key(key)
    cipher = get_cipher_cls(backend)(key)
    nonce = os.urandom(NONCE_SIZE)
    ct = cipher.encrypt(nonce, plaintext, associated_data)
    return base64.b64encode(nonce + ct).decode("ascii")


def open_sealed(
    record: Union[str, bytes],
    key: bytes,
    associated_data: Optional[bytes] = None,
    backend: str = DEFAULT_BACKEND,
) -> bytes:
    """Verify and decrypt an envelope produced by :func:`seal`.

    A blob shorter than nonce + tag (28 bytes) can never verify, so it is
    reported as FormatError even when it holds a complete nonce.

    Args:
        record: Base64 envelope text.
        key: Raw 32-byte master key.
        associated_data: Must equal the value given to ``seal``.
        backend: ``aesgcm`` or ``chacha20``.

    Returns:
        Decrypted plaintext bytes.

    Raises:
        FormatError: If the record is not valid base64 or shorter than
            nonce + tag.
        AuthenticationError: If the tag does not verify.
        ValueError: If the key is not 32 bytes or the backend is unknown.
    """
    _check_key(key)
    cipher = get_cipher_cls(backend)(key)
    try:
        blob = base64.b64decode(record, validate=True)
    except (binascii.Error, ValueError) as err:
        raise FormatError(f"sealed record is not valid base64: {err}") from err
    _min = NONCE_SIZE + TAG_SIZE
    if len(blob) < _min:
        raise FormatError(
            f"sealed record too short: {len(blob)} bytes (minimum {_min})"
        )
    nonce = blob[:NONCE_SIZE]
    ct = blob[NONCE_SIZE:]
    try:
        return cipher.decrypt(nonce, ct, associated_data)
    except InvalidTag as err:
        raise AuthenticationError(
            "sealed record failed authentication (tampered data or wrong key)"
        ) from err
