"""
Public Fernet operations

Every function returns a Result instead of raising: key handling,
encryption, decryption and verification against a single key.
"""

from datetime import timedelta
from typing import Any, Optional

from .errors import FernetError
from .key import KeyMaterial
from .result import Result
from .token import Token
from .validator import ValidationPolicy, Validator

TTL = Optional[timedelta | int]


def generate_key() -> KeyMaterial:
    """Generate a new random key"""
    return KeyMaterial.generate()


def key_to_text(key: KeyMaterial) -> str:
    """Encode a key as 44-character URL-safe base64"""
    return key.to_text()


def key_from_text(text: str) -> Result[KeyMaterial]:
    """Decode a key from its text form; fails with INVALID_KEY_FORMAT"""
    try:
        return Result.success(KeyMaterial.from_text(text))
    except FernetError as e:
        return Result.failure(e)


def encrypt(payload: bytes | str, key: KeyMaterial) -> Result[str]:
    """
    Encrypt and sign a payload.

    Args:
        payload: Data to protect; strings are UTF-8 encoded
        key: Key to encrypt and sign with

    Returns:
        Result holding the base64url token text
    """
    try:
        return Result.success(Token.create(key, payload).serialize())
    except FernetError as e:
        return Result.failure(e)


def _open(token: str, key: KeyMaterial, policy: ValidationPolicy) -> Result[Any]:
    try:
        parsed = Token.parse(token)
        return Result.success(Validator(policy).validate_and_decrypt(key, parsed))
    except FernetError as e:
        return Result.failure(e)


def decrypt(
    token: str,
    key: KeyMaterial,
    ttl: TTL = None,
    policy: Optional[ValidationPolicy] = None
) -> Result[Any]:
    """
    Validate a token and return its payload decoded as UTF-8.

    Args:
        token: Base64url token text
        key: Key the token is expected to be signed with
        ttl: Maximum token age (seconds or timedelta); None accepts any age
        policy: Full validation policy; overrides ``ttl`` when given

    Returns:
        Result holding the payload, or the first check that rejected the token
    """
    return _open(token, key, policy or ValidationPolicy.for_text(ttl))


def decrypt_bytes(
    token: str,
    key: KeyMaterial,
    ttl: TTL = None,
    policy: Optional[ValidationPolicy] = None
) -> Result[Any]:
    """Same as decrypt, but returns the raw payload bytes"""
    return _open(token, key, policy or ValidationPolicy.for_bytes(ttl))


def verify(
    token: str,
    key: KeyMaterial,
    ttl: TTL = None,
    policy: Optional[ValidationPolicy] = None
) -> Result[bool]:
    """Check that a token would decrypt, without returning its payload"""
    return decrypt_bytes(token, key, ttl=ttl, policy=policy).map(lambda _: True)
