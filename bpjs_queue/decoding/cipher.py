"""AES-128-CBC handling for BPJS response payloads."""

from __future__ import annotations

import base64
from typing import Final

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from bpjs_queue.domain import Credentials

from .attempts import DecodeAttempt, decoding_failed, decoding_ok

AES_BLOCK_BYTES: Final[int] = 16


def decoding_derive_key_material(credentials: Credentials) -> tuple[bytes, bytes]:
    """Derive AES key and IV from the credentials.

    Key is the first 16 UTF-8 bytes of the secret key, IV the first 16 UTF-8
    bytes of the consumer id. Either may come out shorter than 16 bytes; the
    decrypt step reports that as a failed attempt.

    Args:
        credentials: BPJS credentials.

    Returns:
        tuple[bytes, bytes]: `(key, iv)` byte strings.
    """

    key = credentials.secret_key.encode("utf-8")[:AES_BLOCK_BYTES]
    iv = credentials.consumer_id.encode("utf-8")[:AES_BLOCK_BYTES]
    return key, iv


def decoding_aes_decrypt(ciphertext: bytes, key: bytes, iv: bytes) -> DecodeAttempt:
    """Decrypt AES-128-CBC ciphertext, strip PKCS#7 padding and decode UTF-8.

    Args:
        ciphertext: Raw ciphertext bytes.
        key: 16-byte AES key.
        iv: 16-byte initialization vector.

    Returns:
        DecodeAttempt: `aes_cbc` attempt carrying the plaintext string.
    """

    if len(key) != AES_BLOCK_BYTES:
        return decoding_failed("aes_cbc", f"derived key is {len(key)} bytes, expected {AES_BLOCK_BYTES}")
    if len(iv) != AES_BLOCK_BYTES:
        return decoding_failed("aes_cbc", f"derived iv is {len(iv)} bytes, expected {AES_BLOCK_BYTES}")
    if not ciphertext or len(ciphertext) % AES_BLOCK_BYTES != 0:
        return decoding_failed(
            "aes_cbc",
            f"ciphertext length {len(ciphertext)} is not a positive multiple of {AES_BLOCK_BYTES}",
        )

    try:
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded_plaintext = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(AES_BLOCK_BYTES * 8).unpadder()
        plaintext_bytes = unpadder.update(padded_plaintext) + unpadder.finalize()
        return decoding_ok("aes_cbc", plaintext_bytes.decode("utf-8"))
    except UnicodeDecodeError as error:
        return decoding_failed("aes_cbc", f"decrypted bytes are not UTF-8: {error.reason}")
    except ValueError as error:
        return decoding_failed("aes_cbc", f"decryption failed: {error}")


def decoding_encrypt_payload(plaintext: str, credentials: Credentials) -> str:
    """Encrypt plaintext into the upstream wire format.

    Inverse of the primary decode route: AES-128-CBC with PKCS#7 padding,
    hex-encode the ciphertext, then base64-encode the hex text.

    Args:
        plaintext: JSON (optionally LZ-string compressed) text.
        credentials: BPJS credentials providing key and IV.

    Returns:
        str: Base64 text suitable for an envelope `response` field.

    Raises:
        ValueError: Raised when the derived key or IV is not 16 bytes.
    """

    key, iv = decoding_derive_key_material(credentials)
    if len(key) != AES_BLOCK_BYTES or len(iv) != AES_BLOCK_BYTES:
        raise ValueError("secret key and consumer id must each provide at least 16 UTF-8 bytes")

    padder = padding.PKCS7(AES_BLOCK_BYTES * 8).padder()
    padded_plaintext = padder.update(plaintext.encode("utf-8")) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded_plaintext) + encryptor.finalize()
    return base64.b64encode(ciphertext.hex().encode("ascii")).decode("ascii")
