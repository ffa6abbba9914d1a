from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Membership/invitation authority
    AUTHORITY_BACKEND: Literal["memory", "http"] = "memory"
    AUTHORITY_BASE_URL: str | None = None
    AUTHORITY_API_KEY: str | None = None
    AUTHORITY_TIMEOUT: float = 10.0

    # Invitation lifecycle
    INVITATION_EXPIRY_DAYS: int = 7

    # CORS origin
    FRONTEND_URL: str | None = None

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


settings = Settings()
