"""
Fernet token protocol

Provides the authenticated-encryption token format and its moving parts:
- Key material and its text encoding
- AES-128-CBC / HMAC-SHA256 primitives
- Token wire format (create, parse, serialize)
- Time-bounded validation
- Multi-key rotation
"""

from .errors import (
    ErrorKind,
    FernetError,
    InvalidKeyFormatError,
    MalformedTokenError,
    TokenValidationError,
    UnsupportedVersionError,
    TokenExpiredError,
    ClockSkewRejectedError,
    SignatureInvalidError,
    PayloadRejectedError,
    NoValidKeyError,
    CannotRemoveLastKeyError,
    CipherFailureError,
)
from .fernet import (
    generate_key,
    key_to_text,
    key_from_text,
    encrypt,
    decrypt,
    decrypt_bytes,
    verify,
)
from .key import KeyMaterial
from .key_ring import KeyRing
from .result import Result
from .token import Token
from .validator import ValidationPolicy, Validator

__all__ = [
    "ErrorKind",
    "FernetError",
    "InvalidKeyFormatError",
    "MalformedTokenError",
    "TokenValidationError",
    "UnsupportedVersionError",
    "TokenExpiredError",
    "ClockSkewRejectedError",
    "SignatureInvalidError",
    "PayloadRejectedError",
    "NoValidKeyError",
    "CannotRemoveLastKeyError",
    "CipherFailureError",
    "generate_key",
    "key_to_text",
    "key_from_text",
    "encrypt",
    "decrypt",
    "decrypt_bytes",
    "verify",
    "KeyMaterial",
    "KeyRing",
    "Result",
    "Token",
    "ValidationPolicy",
    "Validator",
]
