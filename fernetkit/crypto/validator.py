"""
Token acceptance policy and the ordered validation sequence.
"""

import time
from datetime import timedelta
from typing import Any, Callable, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import codec
from .constants import SUPPORTED_VERSION
from .errors import (
    ClockSkewRejectedError,
    PayloadRejectedError,
    SignatureInvalidError,
    TokenExpiredError,
    TokenValidationError,
    UnsupportedVersionError,
)
from .key import KeyMaterial
from .token import Token

log = structlog.get_logger()

DEFAULT_TIME_TO_LIVE = timedelta(minutes=30)
DEFAULT_MAX_CLOCK_SKEW = timedelta(seconds=60)


def utf8_transformer(plaintext: bytes) -> str:
    return plaintext.decode("utf-8")


class ValidationPolicy(BaseModel):
    """
    Parameters a receiver applies before trusting a token.

    A token is fresh when ``now - time_to_live < timestamp < now + max_clock_skew``.
    ``time_to_live=None`` disables the expiry check. Integers are accepted as
    seconds for both durations.
    """

    model_config = ConfigDict(frozen=True)

    time_to_live: Optional[timedelta] = Field(default=DEFAULT_TIME_TO_LIVE)
    max_clock_skew: timedelta = Field(default=DEFAULT_MAX_CLOCK_SKEW)
    clock: Callable[[], float] = Field(default=time.time, repr=False)
    transformer: Callable[[bytes], Any] = Field(default=bytes, repr=False)
    predicate: Optional[Callable[[Any], bool]] = Field(default=None, repr=False)

    @field_validator("time_to_live", "max_clock_skew")
    @classmethod
    def validate_duration(cls, v: Optional[timedelta]) -> Optional[timedelta]:
        if v is not None and v < timedelta(0):
            raise ValueError("Duration cannot be negative")
        return v

    @classmethod
    def for_text(cls, time_to_live: Optional[timedelta | int] = None, **kwargs) -> "ValidationPolicy":
        """Policy that decodes the payload as UTF-8 (unbounded TTL by default)"""
        return cls(time_to_live=time_to_live, transformer=utf8_transformer, **kwargs)

    @classmethod
    def for_bytes(cls, time_to_live: Optional[timedelta | int] = None, **kwargs) -> "ValidationPolicy":
        """Policy that returns the raw payload (unbounded TTL by default)"""
        return cls(time_to_live=time_to_live, **kwargs)

    def now(self) -> int:
        """Current time in whole seconds since epoch"""
        return int(self.clock())


class Validator:
    """
    Runs the acceptance checks for a token in a fixed order:

    1. version is 0x80
    2. timestamp is newer than ``now - time_to_live``
    3. timestamp is older than ``now + max_clock_skew``
    4. signature matches
    5. decrypt
    6. transform the payload and apply the optional predicate

    Each failed check ends validation. The ciphertext is only decrypted once
    the signature has been accepted.
    """

    def __init__(self, policy: Optional[ValidationPolicy] = None):
        self.policy = policy or ValidationPolicy()

    def validate_and_decrypt(self, key: KeyMaterial, token: Token) -> Any:
        """
        Check a token against ``key`` and this policy, then decrypt it.

        Returns:
            The transformed payload

        Raises:
            TokenValidationError: One subclass per rejection kind
            MalformedTokenError: If the authenticated ciphertext has bad padding
        """
        try:
            return self._validate_and_decrypt(key, token)
        except TokenValidationError as e:
            log.debug("token.rejected", reason=e.kind.value)
            raise

    def _validate_and_decrypt(self, key: KeyMaterial, token: Token) -> Any:
        policy = self.policy

        if token.version != SUPPORTED_VERSION:
            raise UnsupportedVersionError(f"Unsupported token version: {token.version:#04x}")

        # Every token past the version check costs one HMAC, whatever the outcome
        signature_ok = token.is_valid_signature(key)

        now = policy.now()
        if policy.time_to_live is not None:
            earliest_valid = now - int(policy.time_to_live.total_seconds())
            if not token.timestamp > earliest_valid:
                raise TokenExpiredError()

        latest_valid = now + int(policy.max_clock_skew.total_seconds())
        if not token.timestamp < latest_valid:
            raise ClockSkewRejectedError()

        if not signature_ok:
            raise SignatureInvalidError()

        plaintext = codec.decrypt(token.ciphertext, token.iv, key.encryption_key)

        try:
            payload = policy.transformer(plaintext)
        except Exception:
            raise PayloadRejectedError("Payload could not be transformed") from None

        if policy.predicate is None:
            return payload
        try:
            accepted = policy.predicate(payload)
        except Exception:
            raise PayloadRejectedError("Payload predicate failed") from None
        if not accepted:
            raise PayloadRejectedError()
        return payload
