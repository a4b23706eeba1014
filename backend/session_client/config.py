"""
Session client configuration using Pydantic Settings.

Loads configuration from environment variables with sensible defaults.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Session client configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CITIZONE_CLIENT_",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = "http://localhost:5000/v1/api"
    refresh_path: str = "/auth/refresh-token"
    timeout_seconds: float = 30.0

    # Proactive expiry check, independent of request traffic
    expiry_check_interval_seconds: float = 60.0

    # Where the token is persisted across restarts; None keeps it in memory
    token_file: Optional[str] = None
