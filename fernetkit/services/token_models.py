"""
Request and response models for the token service
"""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field


def timestamp_to_datetime(timestamp: int) -> datetime:
    """Convert a token timestamp to an aware UTC datetime"""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


class TokenIssuanceRequest(BaseModel):
    """
    Request to encrypt a payload into a new token
    """
    payload: str = Field(..., max_length=65536, description="Text to encrypt")


class TokenIssuanceResponse(BaseModel):
    """
    Response from token issuance or rotation
    """
    token: str
    issued_at: datetime
    message: str = "Token issued successfully"


class TokenValidationRequest(BaseModel):
    """
    Request to validate, decrypt or rotate a token
    """
    token: str = Field(..., min_length=1)
    ttl_seconds: Optional[int] = Field(
        default=None,
        ge=0,
        description="Maximum token age in seconds; 0 disables the check, omitted uses the service default"
    )


class TokenValidationResponse(BaseModel):
    """
    Response from token validation

    ``reason`` is an error kind such as ``no_valid_key``; it never carries
    key or payload data.
    """
    valid: bool
    payload: Optional[str] = None
    issued_at: Optional[datetime] = None
    reason: Optional[str] = None


class KeyGenerationResponse(BaseModel):
    """
    Freshly generated key in text form
    """
    key: str = Field(..., description="URL-safe base64 signing||encryption key")
