"""Fixed sizes and identifiers of the Fernet 0x80 format."""

SUPPORTED_VERSION = 0x80

SIGNING_KEY_BYTES = 16
ENCRYPTION_KEY_BYTES = 16
FERNET_KEY_BYTES = SIGNING_KEY_BYTES + ENCRYPTION_KEY_BYTES

VERSION_BYTES = 1
TIMESTAMP_BYTES = 8
IV_BYTES = 16
CIPHER_BLOCK_BYTES = 16
SIGNATURE_BYTES = 32

# version || timestamp || iv
TOKEN_PREFIX_BYTES = VERSION_BYTES + TIMESTAMP_BYTES + IV_BYTES
TOKEN_STATIC_BYTES = TOKEN_PREFIX_BYTES + SIGNATURE_BYTES
MINIMUM_TOKEN_BYTES = TOKEN_STATIC_BYTES + CIPHER_BLOCK_BYTES

MAX_TIMESTAMP = 2 ** 64 - 1
