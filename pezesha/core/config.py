"""Client configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class PezeshaSettings(BaseSettings):
    """
    Process-wide defaults for the Pezesha client.

    Every value can be set through a PEZESHA_ prefixed environment
    variable or a .env file, and overridden per client instance.
    """

    model_config = SettingsConfigDict(
        env_prefix="PEZESHA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Credentials issued by Pezesha
    client_id: str = ""
    client_secret: str = ""
    channel: str = ""

    # Transport
    base_url: str = "https://api.pezesha.com"
    timeout: float = 30.0
    verify_ssl: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> PezeshaSettings:
    """Get cached settings instance."""
    return PezeshaSettings()
