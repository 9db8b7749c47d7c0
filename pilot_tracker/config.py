"""
Application configuration from environment variables.
"""
from functools import lru_cache
from urllib.parse import quote_plus

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Pilot Tracker API"
    debug: bool = False

    # Database
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "pilot_tracker"
    db_username: str = "postgres"
    db_password: str = ""

    # Auth - access tokens are HS256 JWTs signed with the project secret
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"

    # CORS - allowed origins for cross-origin requests
    cors_origins: list[str] = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Alternative dev server
    ]

    # Site metrics
    # Square feet covered by one gasifier bag when a site doesn't set its own
    default_gasifier_density_sqft_per_bag: float = 2000.0

    # Client
    api_base_url: str = "http://localhost:8000"
    offline_queue_path: str = ".pilot_tracker/offline_submissions.json"
    session_verify_attempts: int = 3
    sync_retry_attempts: int = 3
    sync_retry_delay_seconds: float = 1.0

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            # Handle comma-separated string from environment variable
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @property
    def database_url(self) -> str:
        """Construct async database URL for SQLAlchemy."""
        # URL-encode the password to handle special characters
        encoded_password = quote_plus(self.db_password)
        return (
            f"postgresql+asyncpg://{self.db_username}:{encoded_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def database_url_sync(self) -> str:
        """Construct sync database URL for Alembic migrations."""
        encoded_password = quote_plus(self.db_password)
        return (
            f"postgresql+psycopg://{self.db_username}:{encoded_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
