"""
Tests for environment-driven settings
"""

from datetime import timedelta

from fernetkit.config import Settings


class TestSettings:
    """Test FERNET_* environment variables"""

    def test_defaults(self, monkeypatch):
        """Test defaults with nothing configured"""
        monkeypatch.delenv("FERNET_KEYS", raising=False)
        settings = Settings(_env_file=None)

        assert settings.key_texts == []
        assert settings.time_to_live == timedelta(minutes=30)
        assert settings.max_clock_skew == timedelta(seconds=60)
        assert settings.LOG_JSON is True

    def test_keys_from_environment(self, monkeypatch):
        """Test FERNET_KEYS is split on commas, primary first"""
        monkeypatch.setenv("FERNET_KEYS", "first, second ,,third")

        assert Settings(_env_file=None).key_texts == ["first", "second", "third"]

    def test_ttl_zero_disables_expiry(self, monkeypatch):
        """Test FERNET_TTL_SECONDS=0 means no TTL"""
        monkeypatch.setenv("FERNET_TTL_SECONDS", "0")

        assert Settings(_env_file=None).time_to_live is None

    def test_clock_skew_from_environment(self, monkeypatch):
        """Test FERNET_MAX_CLOCK_SKEW_SECONDS"""
        monkeypatch.setenv("FERNET_MAX_CLOCK_SKEW_SECONDS", "5")

        assert Settings(_env_file=None).max_clock_skew == timedelta(seconds=5)

    def test_unprefixed_variables_ignored(self, monkeypatch):
        """Test only FERNET_-prefixed variables are read"""
        monkeypatch.setenv("TTL_SECONDS", "1")

        assert Settings(_env_file=None).TTL_SECONDS == 1800
