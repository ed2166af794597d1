"""Application configuration using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Database
    database_url: str = "postgresql+asyncpg://localhost/runrun"

    # Sessions
    session_ttl_minutes: int = 15

    # App
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]

    # Server
    log_level: str = "INFO"


settings = Settings()
