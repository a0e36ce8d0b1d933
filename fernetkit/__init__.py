"""
fernetkit - Fernet tokens with key rotation.

Core operations live in fernetkit.crypto; the HTTP token service is
fernetkit.main:app.
"""

from .crypto import (
    ErrorKind,
    FernetError,
    KeyMaterial,
    KeyRing,
    Result,
    Token,
    ValidationPolicy,
    decrypt,
    decrypt_bytes,
    encrypt,
    generate_key,
    key_from_text,
    key_to_text,
    verify,
)

__version__ = "0.1.0"

__all__ = [
    "ErrorKind",
    "FernetError",
    "KeyMaterial",
    "KeyRing",
    "Result",
    "Token",
    "ValidationPolicy",
    "decrypt",
    "decrypt_bytes",
    "encrypt",
    "generate_key",
    "key_from_text",
    "key_to_text",
    "verify",
]
