"""
API Router for Fernet token operations
"""

from fastapi import APIRouter, Depends, HTTPException, status
from typing import Dict, Optional
import structlog

from fernetkit.services import (
    KeyGenerationResponse,
    TokenIssuanceError,
    TokenIssuanceRequest,
    TokenIssuanceResponse,
    TokenRotationError,
    TokenService,
    TokenValidationRequest,
    TokenValidationResponse,
)

log = structlog.get_logger()

router = APIRouter(tags=["tokens"])

# Set by the application at startup; created on first use otherwise
_token_service: Optional[TokenService] = None


def set_token_service(service: TokenService) -> None:
    global _token_service
    _token_service = service


def get_token_service() -> TokenService:
    """Get the global token service instance"""
    global _token_service
    if _token_service is None:
        _token_service = TokenService()
    return _token_service


@router.post(
    "/tokens/encrypt",
    response_model=TokenIssuanceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Encrypt payload",
    description="Encrypt and sign a payload under the primary key"
)
async def encrypt_token(
    request: TokenIssuanceRequest,
    service: TokenService = Depends(get_token_service)
) -> TokenIssuanceResponse:
    """
    Issue a new token

    - **payload**: Text to encrypt

    Returns the token and its issue time.
    """
    try:
        return service.issue_token_from_request(request)
    except TokenIssuanceError as e:
        log.error("api.token_issue_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to issue token"
        )


@router.post(
    "/tokens/decrypt",
    response_model=TokenValidationResponse,
    summary="Decrypt token",
    description="Validate a token against every configured key and return its payload"
)
async def decrypt_token(
    request: TokenValidationRequest,
    service: TokenService = Depends(get_token_service)
) -> TokenValidationResponse:
    """
    Decrypt a token

    - **token**: Token text
    - **ttl_seconds**: Optional maximum age (0 disables the check)

    Invalid tokens return 200 with ``valid: false`` and the rejection kind.
    """
    return service.validate_token_from_request(request)


@router.post(
    "/tokens/verify",
    response_model=TokenValidationResponse,
    summary="Verify token",
    description="Check a token without returning its payload"
)
async def verify_token(
    request: TokenValidationRequest,
    service: TokenService = Depends(get_token_service)
) -> TokenValidationResponse:
    return service.verify_token(request.token, request.ttl_seconds)


@router.post(
    "/tokens/rotate",
    response_model=TokenIssuanceResponse,
    summary="Rotate token",
    description="Re-issue a token accepted by any configured key under the primary key"
)
async def rotate_token(
    request: TokenValidationRequest,
    service: TokenService = Depends(get_token_service)
) -> TokenIssuanceResponse:
    """
    Rotate a token

    Returns 400 with the rejection kind if no configured key accepts it.
    """
    try:
        return service.rotate_token(request.token, request.ttl_seconds)
    except TokenRotationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.reason
        )


@router.post(
    "/keys/generate",
    response_model=KeyGenerationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate key",
    description="Generate a new random key; the service does not start using it"
)
async def generate_key() -> KeyGenerationResponse:
    return TokenService.generate_key()


@router.get(
    "/tokens/stats",
    response_model=Dict[str, int],
    summary="Get key ring statistics"
)
async def get_token_stats(service: TokenService = Depends(get_token_service)) -> Dict[str, int]:
    return {
        "keys_configured": service.get_key_count()
    }
