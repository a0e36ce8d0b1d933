"""
Tests for health check and metrics endpoints.
"""
from fastapi.testclient import TestClient
from fernetkit.main import app, metrics

client = TestClient(app)


def test_health_liveness():
    """Test liveness health check."""
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["service"] == "fernetkit"
    assert data["version"] == "0.1.0"
    assert "timestamp" in data


def test_metrics_endpoint():
    """Test Prometheus metrics endpoint."""
    r = client.get("/metrics")
    assert r.status_code == 200
    content = r.text
    assert "app_up" in content
    assert "fernet_tokens_encrypted_total" in content
    assert "fernet_tokens_rejected_total" in content
    assert "fernet_keys_configured" in content


def test_metrics_count_issued_tokens():
    """Test issuing through the default service increments the counter."""
    before = metrics.registry.get_sample_value("fernet_tokens_encrypted_total")
    r = client.post("/tokens/encrypt", json={"payload": "counted"})
    assert r.status_code == 201
    assert metrics.registry.get_sample_value("fernet_tokens_encrypted_total") == before + 1
