"""
Multi-key support for key rotation.

New tokens are always issued under the primary (first) key; tokens issued
under any key in the ring are accepted.
"""

from typing import Any, Iterable, Iterator, Optional

import structlog

from . import fernet
from .errors import (
    CannotRemoveLastKeyError,
    FernetError,
    InvalidKeyFormatError,
    MalformedTokenError,
    NoValidKeyError,
)
from .key import KeyMaterial
from .result import Result
from .token import Token
from .validator import ValidationPolicy, Validator

log = structlog.get_logger()


class KeyRing:
    """
    Ordered, non-empty, immutable collection of keys.

    Example:
        >>> ring = KeyRing([new_key, old_key])
        >>> token = ring.encrypt("data").unwrap()      # issued under new_key
        >>> ring.decrypt(old_token).unwrap()           # accepted under old_key
        >>> ring.rotate(old_token).unwrap()            # re-issued under new_key
    """

    def __init__(self, keys: Iterable[KeyMaterial]):
        """
        Args:
            keys: Keys in priority order; the first one is the primary

        Raises:
            ValueError: If no keys are given
            TypeError: If an element is not a KeyMaterial
        """
        keys = tuple(keys)
        if not keys:
            raise ValueError("At least one key is required")
        for key in keys:
            if not isinstance(key, KeyMaterial):
                raise TypeError(f"Expected KeyMaterial, got {type(key).__name__}")
        self._keys = keys

    @classmethod
    def from_texts(cls, *texts: str) -> Result["KeyRing"]:
        """Build a ring from key texts, primary first"""
        keys = []
        invalid = 0
        for text in texts:
            try:
                keys.append(KeyMaterial.from_text(text))
            except InvalidKeyFormatError:
                invalid += 1

        if invalid:
            return Result.failure(InvalidKeyFormatError(f"Invalid keys: {invalid} of {len(texts)}"))
        if not keys:
            return Result.failure(InvalidKeyFormatError("At least one key is required"))
        return Result.success(cls(keys))

    @property
    def primary(self) -> KeyMaterial:
        return self._keys[0]

    @property
    def keys(self) -> tuple[KeyMaterial, ...]:
        return self._keys

    def encrypt(self, payload: bytes | str) -> Result[str]:
        """Encrypt with the primary key"""
        return fernet.encrypt(payload, self.primary)

    def _open(self, token: str, policy: ValidationPolicy) -> Result[Any]:
        try:
            parsed = Token.parse(token)
        except MalformedTokenError:
            return Result.failure(NoValidKeyError())

        validator = Validator(policy)
        for key in self._keys:
            try:
                return Result.success(validator.validate_and_decrypt(key, parsed))
            except FernetError:
                continue

        log.debug("keyring.no_valid_key", key_count=len(self._keys))
        return Result.failure(NoValidKeyError())

    def decrypt(
        self,
        token: str,
        ttl: fernet.TTL = None,
        policy: Optional[ValidationPolicy] = None
    ) -> Result[Any]:
        """
        Decrypt with the first key that accepts the token, payload as UTF-8.

        Any failure is reported as NO_VALID_KEY, whichever key came closest.
        """
        return self._open(token, policy or ValidationPolicy.for_text(ttl))

    def decrypt_bytes(
        self,
        token: str,
        ttl: fernet.TTL = None,
        policy: Optional[ValidationPolicy] = None
    ) -> Result[Any]:
        """Same as decrypt, but returns the raw payload bytes"""
        return self._open(token, policy or ValidationPolicy.for_bytes(ttl))

    def verify(
        self,
        token: str,
        ttl: fernet.TTL = None,
        policy: Optional[ValidationPolicy] = None
    ) -> Result[bool]:
        return self.decrypt_bytes(token, ttl=ttl, policy=policy).map(lambda _: True)

    def rotate(
        self,
        token: str,
        ttl: fernet.TTL = None,
        policy: Optional[ValidationPolicy] = None
    ) -> Result[str]:
        """
        Re-issue a token under the primary key.

        The new token carries a fresh timestamp. Fails with NO_VALID_KEY if no
        key in the ring accepts the original token.
        """
        result = self.decrypt_bytes(token, ttl=ttl, policy=policy).and_then(self.encrypt)
        if result:
            log.debug("keyring.rotated")
        return result

    def add_key(self, key: KeyMaterial) -> "KeyRing":
        """New ring with ``key`` appended as the lowest-priority key"""
        if key in self._keys:
            return KeyRing(self._keys)
        return KeyRing(self._keys + (key,))

    def set_primary(self, key: KeyMaterial) -> "KeyRing":
        """New ring with ``key`` first; an existing copy of it is moved, not duplicated"""
        return KeyRing((key,) + tuple(k for k in self._keys if k != key))

    def remove_key(self, key: KeyMaterial | str) -> Result["KeyRing"]:
        """
        New ring without ``key`` (a KeyMaterial or its text form).

        Removing a key that is not in the ring returns an equal ring. Removing
        the last key fails with CANNOT_REMOVE_LAST_KEY.
        """
        if isinstance(key, str):
            remaining = tuple(k for k in self._keys if k.to_text() != key)
        else:
            remaining = tuple(k for k in self._keys if k != key)

        if not remaining:
            return Result.failure(CannotRemoveLastKeyError())
        return Result.success(KeyRing(remaining))

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[KeyMaterial]:
        return iter(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyRing):
            return NotImplemented
        return self._keys == other._keys

    def __hash__(self) -> int:
        return hash(self._keys)

    def __repr__(self) -> str:
        return f"KeyRing(keys={len(self._keys)})"
