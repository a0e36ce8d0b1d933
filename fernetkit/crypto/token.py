"""
Fernet token model and wire format

Layout before base64url encoding:

    offset  size  field
    0       1     version (0x80)
    1       8     timestamp, seconds since epoch, big-endian unsigned
    9       16    initialization vector
    25      N     ciphertext (N % 16 == 0, N >= 16)
    25+N    32    HMAC-SHA256 over bytes [0, 25+N)
"""

import os
import secrets
import struct
import time
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field

from . import codec
from .constants import (
    CIPHER_BLOCK_BYTES,
    IV_BYTES,
    MAX_TIMESTAMP,
    MINIMUM_TOKEN_BYTES,
    SIGNATURE_BYTES,
    SUPPORTED_VERSION,
    TOKEN_STATIC_BYTES,
)
from .errors import MalformedTokenError
from .key import KeyMaterial

_PREFIX = struct.Struct(">BQ")


class Token(BaseModel):
    """
    A Fernet token, either freshly created or parsed from the wire.

    A parsed token is only structurally valid; nothing in it can be trusted
    until a Validator has accepted it.
    """

    model_config = ConfigDict(frozen=True)

    version: int = Field(..., ge=0, le=0xFF)
    timestamp: int = Field(..., ge=0, le=MAX_TIMESTAMP, description="Seconds since epoch")
    iv: bytes = Field(..., min_length=IV_BYTES, max_length=IV_BYTES)
    ciphertext: bytes = Field(..., min_length=CIPHER_BLOCK_BYTES, repr=False)
    signature: bytes = Field(..., min_length=SIGNATURE_BYTES, max_length=SIGNATURE_BYTES, repr=False)

    @classmethod
    def create(
        cls,
        key: KeyMaterial,
        payload: bytes | str,
        random_bytes: Callable[[int], bytes] = os.urandom,
        clock: Callable[[], float] = time.time
    ) -> "Token":
        """
        Encrypt and sign a payload into a new token.

        Args:
            key: Key used to encrypt the payload and sign the token
            payload: Data to embed; strings are UTF-8 encoded
            random_bytes: Source of the initialization vector
            clock: Returns the current time in seconds since epoch

        Returns:
            A new token stamped with the current time

        Raises:
            CipherFailureError: If encryption or signing fails
        """
        if isinstance(payload, str):
            payload = payload.encode("utf-8")

        iv = random_bytes(IV_BYTES)
        ciphertext = codec.encrypt(payload, iv, key.encryption_key)
        timestamp = int(clock())
        signature = codec.sign(SUPPORTED_VERSION, timestamp, iv, ciphertext, key.signing_key)

        return cls(
            version=SUPPORTED_VERSION,
            timestamp=timestamp,
            iv=iv,
            ciphertext=ciphertext,
            signature=signature,
        )

    @classmethod
    def parse(cls, text: str | bytes) -> "Token":
        """
        Deserialize a base64url token string.

        Raises:
            MalformedTokenError: If the text is not base64url or the decoded
                bytes do not form a token
        """
        try:
            raw = codec.b64url_decode(text)
        except (ValueError, TypeError):
            raise MalformedTokenError("Token is not valid URL-safe base64")
        return cls.from_bytes(raw)

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Token":
        """
        Deserialize a token from its raw byte layout.

        Raises:
            MalformedTokenError: On short input, a ciphertext that is not a
                whole number of blocks, or bytes left over after the signature
        """
        if len(raw) < MINIMUM_TOKEN_BYTES:
            raise MalformedTokenError("Insufficient bytes to generate token")

        cipher_len = len(raw) - TOKEN_STATIC_BYTES
        if cipher_len % CIPHER_BLOCK_BYTES != 0:
            raise MalformedTokenError("Invalid ciphertext size")

        version, timestamp = _PREFIX.unpack_from(raw, 0)
        offset = _PREFIX.size
        iv = raw[offset:offset + IV_BYTES]
        offset += IV_BYTES
        ciphertext = raw[offset:offset + cipher_len]
        offset += cipher_len
        signature = raw[offset:offset + SIGNATURE_BYTES]
        offset += SIGNATURE_BYTES

        if offset != len(raw):
            raise MalformedTokenError("Extra bytes found in token")

        return cls(
            version=version,
            timestamp=timestamp,
            iv=bytes(iv),
            ciphertext=bytes(ciphertext),
            signature=bytes(signature),
        )

    def to_bytes(self) -> bytes:
        """Raw byte layout of the token"""
        return _PREFIX.pack(self.version, self.timestamp) + self.iv + self.ciphertext + self.signature

    def serialize(self) -> str:
        """Base64url text form of the token, padding kept"""
        return codec.b64url_encode(self.to_bytes())

    def is_valid_signature(self, key: KeyMaterial) -> bool:
        """
        Recompute the signature with ``key`` and compare in constant time.
        """
        expected = codec.sign(self.version, self.timestamp, self.iv, self.ciphertext, key.signing_key)
        return secrets.compare_digest(self.signature, expected)

    def __str__(self) -> str:
        return self.serialize()
