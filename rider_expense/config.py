"""
Application configuration using Pydantic Settings
"""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """
    # Database
    DATABASE_URL: str = "sqlite:///./rider_expense.db"

    # Security
    JWT_SECRET: str = "dev-jwt-secret-change-me"  # Replace in production
    TOKEN_TTL_DAYS: int = 7
    PASSWORD_HASH_ROUNDS: int = 29000

    # Application
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Email
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True
    SENDER_EMAIL: str = "no-reply@riderexpense.local"
    SUPPORT_EMAIL: str = "support@riderexpense.local"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance (singleton)
    """
    return Settings()
