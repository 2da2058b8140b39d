"""Tests for TestPG payload encryption."""

import base64
import hashlib
import json

import pytest
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from pg_gateway.exceptions import ConfigurationError
from pg_gateway.providers.encryption import decode_nonce, derive_key, encrypt_payload

API_KEY = "11111111-1111-4111-8111-111111111111"
IV = base64.urlsafe_b64encode(bytes(range(12))).decode().rstrip("=")
PLAINTEXT = json.dumps({"cardNumber": "1111222233334444", "amount": 10000})


def _decrypt(token: str, api_key: str, iv: str) -> str:
    data = base64.urlsafe_b64decode(token + "=" * (-len(token) % 4))
    nonce = base64.urlsafe_b64decode(iv + "=" * (-len(iv) % 4))
    key = hashlib.sha256(api_key.encode()).digest()
    return AESGCM(key).decrypt(nonce, data, None).decode()


class TestEncryptPayload:
    """Tests for encrypt_payload."""

    def test_deterministic(self) -> None:
        assert encrypt_payload(PLAINTEXT, API_KEY, IV) == encrypt_payload(PLAINTEXT, API_KEY, IV)

    def test_decrypts_with_reference_implementation(self) -> None:
        token = encrypt_payload(PLAINTEXT, API_KEY, IV)
        assert _decrypt(token, API_KEY, IV) == PLAINTEXT

    def test_tag_appended(self) -> None:
        token = encrypt_payload(PLAINTEXT, API_KEY, IV)
        data = base64.urlsafe_b64decode(token + "=" * (-len(token) % 4))
        assert len(data) == len(PLAINTEXT.encode()) + 16

    def test_unpadded_urlsafe(self) -> None:
        token = encrypt_payload(PLAINTEXT, API_KEY, IV)
        assert "=" not in token
        assert "+" not in token
        assert "/" not in token

    def test_tampered_ciphertext_fails_authentication(self) -> None:
        from cryptography.exceptions import InvalidTag

        token = encrypt_payload(PLAINTEXT, API_KEY, IV)
        data = bytearray(base64.urlsafe_b64decode(token + "=" * (-len(token) % 4)))
        data[0] ^= 0x01
        tampered = base64.urlsafe_b64encode(bytes(data)).decode().rstrip("=")
        with pytest.raises(InvalidTag):
            _decrypt(tampered, API_KEY, IV)

    def test_different_key_different_output(self) -> None:
        assert encrypt_payload(PLAINTEXT, API_KEY, IV) != encrypt_payload(PLAINTEXT, "other-key", IV)

    def test_missing_api_key(self) -> None:
        with pytest.raises(ConfigurationError):
            encrypt_payload(PLAINTEXT, "", IV)

    @pytest.mark.parametrize("iv", ["", "AAAA", base64.urlsafe_b64encode(bytes(16)).decode(), "한글"])
    def test_invalid_iv(self, iv: str) -> None:
        with pytest.raises(ConfigurationError):
            encrypt_payload(PLAINTEXT, API_KEY, iv)


class TestKeyMaterial:
    """Tests for key and nonce derivation."""

    def test_derive_key_is_sha256(self) -> None:
        key = derive_key(API_KEY)
        assert len(key) == 32
        assert key == hashlib.sha256(API_KEY.encode()).digest()

    def test_decode_nonce(self) -> None:
        assert decode_nonce(IV) == bytes(range(12))
