"""
Token service built on the Fernet key ring
"""

from .token_service import (
    TokenService,
    TokenServiceError,
    TokenIssuanceError,
    TokenRotationError,
)
from .token_models import (
    KeyGenerationResponse,
    TokenIssuanceRequest,
    TokenIssuanceResponse,
    TokenValidationRequest,
    TokenValidationResponse,
)

__all__ = [
    "TokenService",
    "TokenServiceError",
    "TokenIssuanceError",
    "TokenRotationError",
    "KeyGenerationResponse",
    "TokenIssuanceRequest",
    "TokenIssuanceResponse",
    "TokenValidationRequest",
    "TokenValidationResponse",
]
