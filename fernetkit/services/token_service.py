"""
TokenService: a key ring bound to configuration, logging and metrics
"""

from datetime import timedelta
from typing import Optional

import structlog

from ..config import Settings, get_settings
from ..crypto import KeyRing, Token, ValidationPolicy, generate_key
from ..metrics import Metrics
from .token_models import (
    KeyGenerationResponse,
    TokenIssuanceRequest,
    TokenIssuanceResponse,
    TokenValidationRequest,
    TokenValidationResponse,
    timestamp_to_datetime,
)

log = structlog.get_logger()


class TokenServiceError(Exception):
    """Base exception for token service errors"""
    pass


class TokenIssuanceError(TokenServiceError):
    """Raised when token issuance fails"""
    pass


class TokenRotationError(TokenServiceError):
    """Raised when a token cannot be re-issued under the primary key"""

    def __init__(self, reason: str):
        super().__init__(f"Token rotation failed: {reason}")
        self.reason = reason


class TokenService:
    """
    Service for issuing and checking Fernet tokens

    Provides:
    - Token issuance under the primary key
    - Validation and decryption under any configured key
    - Rotation of tokens onto the primary key
    """

    def __init__(
        self,
        key_ring: Optional[KeyRing] = None,
        settings: Optional[Settings] = None,
        metrics: Optional[Metrics] = None
    ):
        """
        Initialize TokenService

        Args:
            key_ring: Keys to use (loaded from settings if not provided)
            settings: Service settings (defaults to get_settings())
            metrics: Metrics instance (creates new if not provided)
        """
        self._settings = settings or get_settings()
        self._key_ring = key_ring or self._load_key_ring(self._settings)
        self._metrics = metrics or Metrics()
        self._metrics.set_keys_configured(len(self._key_ring))

    @staticmethod
    def _load_key_ring(settings: Settings) -> KeyRing:
        texts = settings.key_texts
        if not texts:
            log.warning("keyring.ephemeral", detail="FERNET_KEYS not set, generated a key for this process only")
            return KeyRing([generate_key()])

        result = KeyRing.from_texts(*texts)
        if not result:
            raise TokenServiceError(f"Invalid FERNET_KEYS: {result.error}")
        log.info("keyring.loaded", key_count=len(result.value))
        return result.value

    @property
    def key_ring(self) -> KeyRing:
        return self._key_ring

    def _policy(self, ttl_seconds: Optional[int]) -> ValidationPolicy:
        if ttl_seconds is None:
            ttl = self._settings.time_to_live
        else:
            ttl = timedelta(seconds=ttl_seconds) if ttl_seconds > 0 else None
        return ValidationPolicy.for_text(ttl, max_clock_skew=self._settings.max_clock_skew)

    def issue_token(self, payload: str) -> TokenIssuanceResponse:
        """
        Encrypt a payload under the primary key

        Raises:
            TokenIssuanceError: If encryption fails
        """
        result = self._key_ring.encrypt(payload)
        if not result:
            log.error("token.issue_failed", reason=result.kind.value)
            raise TokenIssuanceError(f"Token issuance failed: {result.kind.value}")

        self._metrics.record_encrypted()
        log.info("token.issued")
        return TokenIssuanceResponse(
            token=result.value,
            issued_at=timestamp_to_datetime(Token.parse(result.value).timestamp)
        )

    def issue_token_from_request(self, request: TokenIssuanceRequest) -> TokenIssuanceResponse:
        return self.issue_token(request.payload)

    def validate_token(self, token: str, ttl_seconds: Optional[int] = None) -> TokenValidationResponse:
        """
        Validate and decrypt a token

        Args:
            token: Token text
            ttl_seconds: Maximum age; None uses the configured default, 0 disables

        Returns:
            TokenValidationResponse with the payload if valid
        """
        result = self._key_ring.decrypt(token, policy=self._policy(ttl_seconds))
        if not result:
            self._metrics.record_rejected(result.kind.value)
            log.debug("token.validation_failed", reason=result.kind.value)
            return TokenValidationResponse(valid=False, reason=result.kind.value)

        self._metrics.record_decrypted()
        return TokenValidationResponse(
            valid=True,
            payload=result.value,
            issued_at=timestamp_to_datetime(Token.parse(token).timestamp)
        )

    def validate_token_from_request(self, request: TokenValidationRequest) -> TokenValidationResponse:
        return self.validate_token(request.token, request.ttl_seconds)

    def verify_token(self, token: str, ttl_seconds: Optional[int] = None) -> TokenValidationResponse:
        """Same checks as validate_token, without returning the payload"""
        response = self.validate_token(token, ttl_seconds)
        return response.model_copy(update={"payload": None})

    def rotate_token(self, token: str, ttl_seconds: Optional[int] = None) -> TokenIssuanceResponse:
        """
        Re-issue a token under the primary key

        Raises:
            TokenRotationError: If no configured key accepts the token
        """
        result = self._key_ring.rotate(token, policy=self._policy(ttl_seconds))
        if not result:
            self._metrics.record_rejected(result.kind.value)
            log.info("token.rotation_failed", reason=result.kind.value)
            raise TokenRotationError(result.kind.value)

        self._metrics.record_rotated()
        log.info("token.rotated")
        return TokenIssuanceResponse(
            token=result.value,
            issued_at=timestamp_to_datetime(Token.parse(result.value).timestamp),
            message="Token rotated successfully"
        )

    @staticmethod
    def generate_key() -> KeyGenerationResponse:
        """Generate a new key for operators to add to FERNET_KEYS"""
        return KeyGenerationResponse(key=generate_key().to_text())

    def get_key_count(self) -> int:
        return len(self._key_ring)
