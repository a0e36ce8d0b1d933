from datetime import timedelta
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ENV: str = "dev"
    SERVICE_PORT: int = 8080
    LOG_JSON: bool = True
    # Comma-separated key texts, primary first. Empty: generate an ephemeral key
    KEYS: str = ""
    # Default token TTL for the service; 0 disables the expiry check
    TTL_SECONDS: int = 1800
    MAX_CLOCK_SKEW_SECONDS: int = 60

    model_config = SettingsConfigDict(env_prefix="FERNET_", env_file=".env", extra="ignore")

    @property
    def key_texts(self) -> list[str]:
        return [k.strip() for k in self.KEYS.split(",") if k.strip()]

    @property
    def time_to_live(self) -> timedelta | None:
        return timedelta(seconds=self.TTL_SECONDS) if self.TTL_SECONDS > 0 else None

    @property
    def max_clock_skew(self) -> timedelta:
        return timedelta(seconds=self.MAX_CLOCK_SKEW_SECONDS)

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
