"""
Centralized configuration for the Citizone backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., TWILIO_*, SUPABASE_*).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Citizone API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    reload: bool = False
    api_prefix: str = "/v1/api"

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Session tokens
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    access_token_ttl_seconds: int = 3600
    refresh_grace_seconds: int = 7 * 24 * 3600

    # Credentials
    bcrypt_rounds: int = 12
    otp_ttl_seconds: int = 300

    # Supabase (credential store)
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    users_table: str = "users"
    supabase_timeout_seconds: int = 10

    # Twilio (SMS delivery)
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_from_number: str = ""
    sms_country_code: str = "+1"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
