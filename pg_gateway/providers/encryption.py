"""AES-256-GCM field encryption for the TestPG API.

- Key: SHA-256 digest of the API key (32 bytes)
- Nonce: the configured IV, URL-safe base64 decoded (12 bytes)
- Tag: 128 bits, appended to the ciphertext
- Output: URL-safe base64 of ``ciphertext || tag`` without padding
"""

import base64
import binascii
import hashlib

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from pg_gateway.exceptions import ConfigurationError

NONCE_LENGTH = 12


def _b64url_decode(value: str) -> bytes:
    padded = value + "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def derive_key(api_key: str) -> bytes:
    """Derive the 256-bit AES key from the shared API key."""
    return hashlib.sha256(api_key.encode("utf-8")).digest()


def decode_nonce(iv: str) -> bytes:
    """Decode the configured IV token into a 96-bit nonce."""
    try:
        nonce = _b64url_decode(iv)
    except (ValueError, UnicodeError, binascii.Error) as e:
        raise ConfigurationError(f"IV is not valid URL-safe base64: {e}") from e
    if len(nonce) != NONCE_LENGTH:
        raise ConfigurationError(f"IV must decode to {NONCE_LENGTH} bytes, got {len(nonce)}")
    return nonce


def encrypt_payload(plaintext: str, api_key: str, iv: str) -> str:
    """Encrypt a JSON payload for the ``enc`` request field.

    Deterministic for a fixed (plaintext, api_key, iv). Raises
    :class:`ConfigurationError` for a missing key or a malformed IV.
    """
    if not api_key:
        raise ConfigurationError("TestPG API key is not configured")
    nonce = decode_nonce(iv)
    ciphertext = AESGCM(derive_key(api_key)).encrypt(nonce, plaintext.encode("utf-8"), None)
    return base64.urlsafe_b64encode(ciphertext).decode("ascii").rstrip("=")
