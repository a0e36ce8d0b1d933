"""
Error kinds and exception hierarchy for Fernet token operations.

Helpers raise these exceptions; the public operations catch them and hand
them back inside a Result, so callers branch on ``kind`` rather than on
message text.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Every way a Fernet operation can fail"""

    INVALID_KEY_FORMAT = "invalid_key_format"
    MALFORMED_TOKEN = "malformed_token"
    UNSUPPORTED_VERSION = "unsupported_version"
    TOKEN_EXPIRED = "token_expired"
    CLOCK_SKEW_REJECTED = "clock_skew_rejected"
    SIGNATURE_INVALID = "signature_invalid"
    PAYLOAD_REJECTED = "payload_rejected"
    NO_VALID_KEY = "no_valid_key"
    CANNOT_REMOVE_LAST_KEY = "cannot_remove_last_key"
    CIPHER_FAILURE = "cipher_failure"


class FernetError(Exception):
    """Base exception for Fernet operations"""

    kind: ErrorKind = ErrorKind.CIPHER_FAILURE
    default_message = "Fernet operation failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class InvalidKeyFormatError(FernetError):
    """Raised when key text or key bytes cannot form a key"""
    kind = ErrorKind.INVALID_KEY_FORMAT
    default_message = "Invalid key format"


class MalformedTokenError(FernetError):
    """Raised when a token is structurally invalid"""
    kind = ErrorKind.MALFORMED_TOKEN
    default_message = "Malformed token"


class TokenValidationError(FernetError):
    """Base for rejections raised by the validator"""
    pass


class UnsupportedVersionError(TokenValidationError):
    kind = ErrorKind.UNSUPPORTED_VERSION
    default_message = "Unsupported token version"


class TokenExpiredError(TokenValidationError):
    kind = ErrorKind.TOKEN_EXPIRED
    default_message = "Token has expired"


class ClockSkewRejectedError(TokenValidationError):
    kind = ErrorKind.CLOCK_SKEW_REJECTED
    default_message = "Token timestamp is too far in the future"


class SignatureInvalidError(TokenValidationError):
    kind = ErrorKind.SIGNATURE_INVALID
    default_message = "Signature validation failed"


class PayloadRejectedError(TokenValidationError):
    kind = ErrorKind.PAYLOAD_REJECTED
    default_message = "Invalid Fernet token payload"


class NoValidKeyError(FernetError):
    """Raised when no key in a key ring accepts a token"""
    kind = ErrorKind.NO_VALID_KEY
    default_message = "No valid key found"


class CannotRemoveLastKeyError(FernetError):
    kind = ErrorKind.CANNOT_REMOVE_LAST_KEY
    default_message = "Cannot remove the last key from a key ring"


class CipherFailureError(FernetError):
    """Raised when the cipher backend itself fails (never expected)"""
    kind = ErrorKind.CIPHER_FAILURE
    default_message = "Cipher operation failed"
