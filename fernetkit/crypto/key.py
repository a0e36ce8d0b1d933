"""
Fernet key material: a signing key and an encryption key of 128 bits each.
"""

import os
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from .codec import b64url_decode, b64url_encode
from .constants import ENCRYPTION_KEY_BYTES, FERNET_KEY_BYTES, SIGNING_KEY_BYTES
from .errors import InvalidKeyFormatError


class KeyMaterial(BaseModel):
    """
    Immutable pair of 16-byte keys.

    The text form is URL-safe base64 of ``signing_key || encryption_key``
    (44 characters), the same format ``cryptography.fernet.Fernet`` uses.
    Key bytes are kept out of ``repr`` so keys do not leak into logs.
    """

    model_config = ConfigDict(frozen=True)

    signing_key: bytes = Field(..., strict=True, repr=False, description="HMAC-SHA256 key")
    encryption_key: bytes = Field(..., strict=True, repr=False, description="AES-128 key")

    @field_validator("signing_key", "encryption_key")
    @classmethod
    def validate_length(cls, v: bytes, info: ValidationInfo) -> bytes:
        expected = SIGNING_KEY_BYTES if info.field_name == "signing_key" else ENCRYPTION_KEY_BYTES
        if len(v) != expected:
            raise ValueError(f"{info.field_name} must be {expected * 8} bits")
        return v

    @classmethod
    def generate(cls, random_bytes: Callable[[int], bytes] = os.urandom) -> "KeyMaterial":
        """
        Generate a new key from a cryptographically secure random source.

        Args:
            random_bytes: Callable returning n random bytes (default: os.urandom)
        """
        return cls(
            signing_key=random_bytes(SIGNING_KEY_BYTES),
            encryption_key=random_bytes(ENCRYPTION_KEY_BYTES),
        )

    @classmethod
    def from_bytes(cls, signing_key: bytes, encryption_key: bytes) -> "KeyMaterial":
        """
        Build a key from untrusted raw bytes.

        Raises:
            InvalidKeyFormatError: If either half is missing or not 16 bytes
        """
        try:
            return cls(signing_key=signing_key, encryption_key=encryption_key)
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors())
            raise InvalidKeyFormatError(f"Invalid key bytes: {fields}")

    @classmethod
    def from_text(cls, text: str) -> "KeyMaterial":
        """
        Decode a key from its URL-safe base64 text form.

        Raises:
            InvalidKeyFormatError: If the text is not base64url or does not
                decode to exactly 32 bytes
        """
        try:
            raw = b64url_decode(text)
        except (ValueError, TypeError):
            raise InvalidKeyFormatError("Key is not valid URL-safe base64")

        if len(raw) != FERNET_KEY_BYTES:
            raise InvalidKeyFormatError(
                f"Key must decode to {FERNET_KEY_BYTES} bytes, got {len(raw)}"
            )
        return cls.from_bytes(raw[:SIGNING_KEY_BYTES], raw[SIGNING_KEY_BYTES:])

    def to_text(self) -> str:
        """Encode as 44-character URL-safe base64 text"""
        return b64url_encode(self.signing_key + self.encryption_key)
