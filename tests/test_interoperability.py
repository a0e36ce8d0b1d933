"""
Tests for wire compatibility with other Fernet implementations

Tests cover:
- Reproducing the published Fernet test vector
- Tokens exchanged with cryptography.fernet.Fernet in both directions
"""

import pytest
from cryptography.fernet import Fernet, InvalidToken

from fernetkit.crypto import ErrorKind, KeyMaterial, Token, ValidationPolicy, decrypt, encrypt

VECTOR_KEY = "cw_0x689RpI-jtRR7oE8h_eQsKImvJapLeSbXpwF4e4="
VECTOR_NOW = 499162800
VECTOR_TOKEN = (
    "gAAAAAAdwJ6wAAECAwQFBgcICQoLDA0ODy021cpGVWKZ_eEwCGM4BLLF_5CV9dOPmrhuVUPgJobwOz7JcbmrR64jVmpU4IwqDA=="
)


@pytest.fixture
def vector_key():
    return KeyMaterial.from_text(VECTOR_KEY)


class TestSpecVector:
    """Test the published generate/verify vector"""

    def test_generate(self, vector_key):
        """Test a fixed IV and clock reproduce the token byte for byte"""
        token = Token.create(
            vector_key,
            b"hello",
            random_bytes=lambda n: bytes(range(n)),
            clock=lambda: VECTOR_NOW,
        )

        assert token.serialize() == VECTOR_TOKEN

    def test_verify(self, vector_key):
        """Test the token is accepted one second after issue with a 60 second TTL"""
        policy = ValidationPolicy.for_text(60, clock=lambda: VECTOR_NOW + 1)

        assert decrypt(VECTOR_TOKEN, vector_key, policy=policy).unwrap() == "hello"

    def test_parse_fields(self):
        """Test the decoded fields of the vector"""
        token = Token.parse(VECTOR_TOKEN)

        assert token.version == 0x80
        assert token.timestamp == VECTOR_NOW
        assert token.iv == bytes(range(16))
        assert token.ciphertext.hex() == "2d36d5ca46556299fde13008633804b2"

    def test_expired(self, vector_key):
        """Test the vector is expired well after its TTL"""
        policy = ValidationPolicy.for_text(60, clock=lambda: VECTOR_NOW + 120)

        assert decrypt(VECTOR_TOKEN, vector_key, policy=policy).kind == ErrorKind.TOKEN_EXPIRED


class TestCryptographyFernet:
    """Test exchange with the cryptography package's Fernet"""

    def test_their_token_our_decrypt(self):
        """Test tokens from cryptography.fernet decrypt here"""
        text = Fernet.generate_key().decode()
        token = Fernet(text).encrypt(b"from them").decode()

        assert decrypt(token, KeyMaterial.from_text(text)).unwrap() == "from them"

    def test_our_token_their_decrypt(self):
        """Test tokens issued here decrypt with cryptography.fernet"""
        key = KeyMaterial.generate()
        token = encrypt("from us", key).unwrap()

        assert Fernet(key.to_text()).decrypt(token.encode(), ttl=60) == b"from us"

    def test_their_wrong_key(self):
        """Test cryptography.fernet rejects tokens under another key"""
        token = encrypt("data", KeyMaterial.generate()).unwrap()

        with pytest.raises(InvalidToken):
            Fernet(KeyMaterial.generate().to_text()).decrypt(token.encode())

    def test_vector_with_their_implementation(self):
        """Test cryptography.fernet reads the vector with the same key"""
        fernet = Fernet(VECTOR_KEY)

        assert fernet.decrypt_at_time(VECTOR_TOKEN, ttl=60, current_time=VECTOR_NOW + 1) == b"hello"
