"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (.env file).
"""

from typing import List, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project Info
    PROJECT_NAME: str = "BizzLeap Marketplace API"
    VERSION: str = "1.0.0"
    PROJECT_URL: str = "https://bizzleap.com"

    DEBUG: bool = False
    LOG_LEVEL: str = "info"
    API_PREFIX: str = "/api"

    # Database
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = ""
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432
    DATABASE_DBNAME: str = "bizzleap"
    # Full URL wins over the individual parts when set
    DATABASE_URL: Optional[str] = None

    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 0
    DATABASE_POOL_TIMEOUT: int = 60

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    OAUTH_STATE_EXPIRE_MINUTES: int = 10
    PASSWORD_MIN_LENGTH: int = 8
    BCRYPT_ROUNDS: int = 12

    # Credential endpoints, per client IP; 0 disables the limit
    AUTH_RATE_LIMIT: int = 5
    AUTH_RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60

    # Frontend / CORS
    FRONTEND_URL: str = "http://localhost:8080"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8080", "http://localhost:8081"]

    # OAuth providers (a provider is enabled once its client id is set)
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    FACEBOOK_CLIENT_ID: str = ""
    FACEBOOK_CLIENT_SECRET: str = ""
    GITHUB_CLIENT_ID: str = ""
    GITHUB_CLIENT_SECRET: str = ""
    OAUTH_HTTP_TIMEOUT: float = 10.0

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @model_validator(mode="after")
    def assemble_database_url(self) -> "Settings":
        if not self.DATABASE_URL:
            self.DATABASE_URL = (f"postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}"
                                 f":{self.DATABASE_PORT}"
                                 f"/{self.DATABASE_DBNAME}")
        return self

    def oauth_credentials(self, provider: str) -> tuple[str, str]:
        """Return (client_id, client_secret) for an OAuth provider, empty strings if unset."""
        prefix = provider.upper()
        return getattr(self, f"{prefix}_CLIENT_ID", ""), getattr(self, f"{prefix}_CLIENT_SECRET", "")


# Global settings instance
settings = Settings()
