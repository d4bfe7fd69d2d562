"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.schemas.connection import AIConfig, ConnectionConfig, DatabaseConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Target database (credentials come from the environment only)
    DB_DIALECT: str = "mysql"
    DB_HOST: str = "localhost"
    DB_PORT: Optional[int] = None
    DB_NAME: str = ""
    DB_USER: Optional[str] = None
    DB_PASSWORD: Optional[SecretStr] = None

    # Model endpoint
    AI_ENDPOINT: str = "localhost:11434"
    AI_MODEL: str = "qwen2.5:7b"
    AI_TIMEOUT_SECONDS: float = 60.0

    # Synthesis pipeline
    SAMPLE_ROW_LIMIT: int = 10
    PROMPT_SAMPLE_ROWS: int = 3
    FALLBACK_INSIGHT_TABLES: int = 4
    REFRESH_INTERVAL_SECONDS: float = 30.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Application
    APP_NAME: str = "Smart Business Oracle"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    def connection_config(self) -> ConnectionConfig:
        """Build the connection config threaded through each synthesis cycle."""
        return ConnectionConfig(
            database=DatabaseConfig(
                dialect=self.DB_DIALECT,
                host=self.DB_HOST,
                port=self.DB_PORT,
                database=self.DB_NAME,
                username=self.DB_USER,
                password=self.DB_PASSWORD,
            ),
            ai=AIConfig(
                endpoint=self.AI_ENDPOINT,
                model=self.AI_MODEL,
                timeout_seconds=self.AI_TIMEOUT_SECONDS,
            ),
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
