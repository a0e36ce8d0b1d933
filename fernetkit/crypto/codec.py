"""
Low-level Fernet primitives

- AES-128-CBC encryption/decryption with PKCS7 padding
- HMAC-SHA256 signing over the token prefix and ciphertext
- Strict URL-safe base64 encoding shared by keys and tokens
"""

import base64
import re
import struct

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import CipherFailureError, MalformedTokenError

_URLSAFE_B64 = re.compile(rb"[A-Za-z0-9_-]*={0,2}")
_PREFIX = struct.Struct(">BQ")


def b64url_encode(data: bytes) -> str:
    """Encode bytes as padded URL-safe base64 text"""
    return base64.urlsafe_b64encode(data).decode("ascii")


def b64url_decode(text: str | bytes) -> bytes:
    """
    Decode padded URL-safe base64, rejecting anything outside the alphabet.

    The standard library decoder silently drops unknown characters and also
    accepts ``+`` and ``/``; both are refused here. So is text whose final
    character carries non-zero unused bits, so every byte string has exactly
    one accepted text form.

    Raises:
        ValueError: If the text is not valid padded URL-safe base64
        TypeError: If the input is neither str nor bytes
    """
    if isinstance(text, str):
        text = text.encode("ascii")
    elif not isinstance(text, (bytes, bytearray)):
        raise TypeError(f"Expected str or bytes, got {type(text).__name__}")

    if not _URLSAFE_B64.fullmatch(text):
        raise ValueError("Invalid characters in base64url text")
    raw = base64.urlsafe_b64decode(bytes(text))
    # Unused low bits of the last character must be zero
    if base64.urlsafe_b64encode(raw) != bytes(text):
        raise ValueError("Non-canonical base64url text")
    return raw


def encrypt(plaintext: bytes, iv: bytes, encryption_key: bytes) -> bytes:
    """
    Encrypt a payload with AES-128 in CBC mode.

    Args:
        plaintext: Raw payload bytes
        iv: 16 random bytes
        encryption_key: 16-byte AES key

    Returns:
        Ciphertext whose length is a positive multiple of 16

    Raises:
        CipherFailureError: If the cipher cannot be initialised or run
    """
    try:
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(plaintext) + padder.finalize()
        encryptor = Cipher(algorithms.AES(encryption_key), modes.CBC(iv)).encryptor()
        return encryptor.update(padded) + encryptor.finalize()
    except (UnsupportedAlgorithm, ValueError, TypeError) as e:
        raise CipherFailureError(f"Unable to encrypt data: {e}")


def decrypt(ciphertext: bytes, iv: bytes, encryption_key: bytes) -> bytes:
    """
    Decrypt an AES-128-CBC ciphertext and strip its padding.

    Only call this on ciphertext whose signature has already been verified.

    Raises:
        CipherFailureError: If the cipher cannot be initialised or run
        MalformedTokenError: If the padding is invalid
    """
    try:
        decryptor = Cipher(algorithms.AES(encryption_key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
    except (UnsupportedAlgorithm, ValueError, TypeError) as e:
        raise CipherFailureError(f"Unable to decrypt data: {e}")

    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError:
        raise MalformedTokenError("Invalid padding in token")


def sign(
    version: int,
    timestamp: int,
    iv: bytes,
    ciphertext: bytes,
    signing_key: bytes
) -> bytes:
    """
    Compute the token signature.

    HMAC-SHA256 over ``version(1) || timestamp(8, big-endian) || iv || ciphertext``.

    Returns:
        32-byte signature

    Raises:
        CipherFailureError: If the fields cannot be framed or the HMAC fails
    """
    try:
        mac = hmac.HMAC(signing_key, hashes.SHA256())
        mac.update(_PREFIX.pack(version, timestamp))
        mac.update(iv)
        mac.update(ciphertext)
        return mac.finalize()
    except (struct.error, UnsupportedAlgorithm, ValueError, TypeError) as e:
        raise CipherFailureError(f"Error during signing process: {e}")
