"""
API endpoint tests for token operations
"""

import pytest
from fastapi.testclient import TestClient

from fernetkit.api.token_router import get_token_service
from fernetkit.config import Settings
from fernetkit.crypto import decrypt, encrypt, generate_key
from fernetkit.main import app
from fernetkit.metrics import Metrics
from fernetkit.services import TokenService


@pytest.fixture
def primary_key():
    return generate_key()


@pytest.fixture
def old_key():
    return generate_key()


@pytest.fixture
def service(primary_key, old_key):
    settings = Settings(KEYS=f"{primary_key.to_text()},{old_key.to_text()}")
    return TokenService(settings=settings, metrics=Metrics())


@pytest.fixture
def client(service):
    """Create test client bound to a known key ring"""
    app.dependency_overrides[get_token_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestEncryptAPI:
    """Test token issuance endpoint"""

    def test_encrypt_success(self, client, primary_key):
        """Test successful token issuance"""
        response = client.post("/tokens/encrypt", json={"payload": "hello"})

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Token issued successfully"
        assert "issued_at" in data
        assert decrypt(data["token"], primary_key).unwrap() == "hello"

    def test_encrypt_missing_payload(self, client):
        """Test issuance without a payload"""
        response = client.post("/tokens/encrypt", json={})

        assert response.status_code == 422

    def test_encrypt_payload_too_large(self, client):
        """Test oversize payloads are refused"""
        response = client.post("/tokens/encrypt", json={"payload": "x" * 70000})

        assert response.status_code == 422


class TestDecryptAPI:
    """Test token decryption endpoint"""

    def test_decrypt_valid(self, client):
        """Test round trip through the API"""
        token = client.post("/tokens/encrypt", json={"payload": "round trip"}).json()["token"]

        response = client.post("/tokens/decrypt", json={"token": token})

        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["payload"] == "round trip"
        assert data["reason"] is None

    def test_decrypt_old_key(self, client, old_key):
        """Test tokens from the secondary key are accepted"""
        token = encrypt("legacy", old_key).unwrap()

        data = client.post("/tokens/decrypt", json={"token": token}).json()

        assert data["valid"] is True
        assert data["payload"] == "legacy"

    def test_decrypt_invalid(self, client):
        """Test rejected tokens return 200 with the reason"""
        token = encrypt("data", generate_key()).unwrap()

        response = client.post("/tokens/decrypt", json={"token": token})

        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is False
        assert data["payload"] is None
        assert data["reason"] == "no_valid_key"

    def test_decrypt_empty_token(self, client):
        """Test an empty token fails request validation"""
        response = client.post("/tokens/decrypt", json={"token": ""})

        assert response.status_code == 422

    def test_decrypt_negative_ttl(self, client):
        """Test a negative TTL fails request validation"""
        response = client.post("/tokens/decrypt", json={"token": "abc", "ttl_seconds": -1})

        assert response.status_code == 422


class TestVerifyAPI:
    """Test token verification endpoint"""

    def test_verify_valid(self, client):
        """Test verify omits the payload"""
        token = client.post("/tokens/encrypt", json={"payload": "secret"}).json()["token"]

        data = client.post("/tokens/verify", json={"token": token}).json()

        assert data["valid"] is True
        assert data["payload"] is None

    def test_verify_invalid(self, client):
        """Test verify of garbage"""
        data = client.post("/tokens/verify", json={"token": "garbage"}).json()

        assert data["valid"] is False
        assert data["reason"] == "no_valid_key"


class TestRotateAPI:
    """Test token rotation endpoint"""

    def test_rotate_success(self, client, primary_key, old_key):
        """Test rotation moves a token to the primary key"""
        token = encrypt("rotate me", old_key).unwrap()

        response = client.post("/tokens/rotate", json={"token": token})

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Token rotated successfully"
        assert decrypt(data["token"], primary_key).unwrap() == "rotate me"

    def test_rotate_invalid(self, client):
        """Test rotation of an unknown token returns 400"""
        token = encrypt("data", generate_key()).unwrap()

        response = client.post("/tokens/rotate", json={"token": token})

        assert response.status_code == 400
        assert response.json()["detail"] == "no_valid_key"


class TestKeysAPI:
    """Test key generation and statistics endpoints"""

    def test_generate_key(self, client):
        """Test a fresh key is returned"""
        response = client.post("/keys/generate")

        assert response.status_code == 201
        assert len(response.json()["key"]) == 44

    def test_generate_key_not_installed(self, client, service):
        """Test generated keys are not added to the service"""
        client.post("/keys/generate")

        assert service.get_key_count() == 2

    def test_token_stats(self, client):
        """Test key count statistics"""
        response = client.get("/tokens/stats")

        assert response.status_code == 200
        assert response.json() == {"keys_configured": 2}
