"""
Configuration settings for the application.
"""
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# backend/.env, shared with scripts/db_setup.py
ENV_FILE = Path(__file__).resolve().parent.parent.parent / ".env"
if ENV_FILE.exists():
    load_dotenv(dotenv_path=ENV_FILE)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """
    # API configuration
    API_PORT: int = Field(default=5000)
    API_HOST: str = Field(default="0.0.0.0")

    # Database configuration
    # DATABASE_URL (Railway, Heroku, etc.) takes precedence over the DB_* parts
    DATABASE_URL: Optional[str] = Field(default=None)
    DB_HOST: str = Field(default="localhost")
    DB_PORT: str = Field(default="5432")
    DB_USER: str = Field(default="postgres")
    DB_PASSWORD: str = Field(default="postgres")
    DB_NAME: str = Field(default="devconnector")

    DB_URI: Optional[str] = Field(default=None, validate_default=True)

    # CORS configuration
    CORS_ORIGINS: str = Field(default="*")

    # Session tokens
    SESSION_EXPIRATION_DAYS: int = Field(default=30)

    # GitHub repository lookup
    GITHUB_API_URL: str = Field(default="https://api.github.com")
    GITHUB_CLIENT_ID: Optional[str] = Field(default=None)
    GITHUB_CLIENT_SECRET: Optional[str] = Field(default=None)
    GITHUB_TIMEOUT: float = Field(default=10.0)
    GITHUB_MAX_ATTEMPTS: int = Field(default=3)
    GITHUB_RETRY_WAIT: float = Field(default=0.5)

    LOG_LEVEL: str = Field(default="INFO")

    @field_validator("DB_URI", mode="before")
    def assemble_db_uri(cls, v: Optional[str], info: Any) -> str:
        """
        Assemble the async database URI if not provided.
        """
        if v is not None:
            return v

        values = info.data
        database_url = values.get("DATABASE_URL")
        if database_url:
            # Convert postgres:// to postgresql+asyncpg:// if needed
            if database_url.startswith("postgres://"):
                return database_url.replace("postgres://", "postgresql+asyncpg://", 1)
            if database_url.startswith("postgresql://"):
                return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
            return database_url

        user = values.get("DB_USER")
        password = values.get("DB_PASSWORD")
        host = values.get("DB_HOST")
        port = values.get("DB_PORT")
        name = values.get("DB_NAME")

        return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{name}"

    @property
    def cors_origins(self) -> List[str]:
        """
        Parse the comma-separated CORS_ORIGINS string into a list.
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def github_credentials(self) -> Optional[tuple]:
        """Client id/secret pair for authenticated GitHub lookups, if configured."""
        if self.GITHUB_CLIENT_ID and self.GITHUB_CLIENT_SECRET:
            return (self.GITHUB_CLIENT_ID, self.GITHUB_CLIENT_SECRET)
        return None

    class Config:
        """Config for the BaseSettings class."""
        env_file = ENV_FILE
        case_sensitive = True
        extra = 'ignore'  # Ignore extra fields from environment


# Create settings object
settings = Settings()
