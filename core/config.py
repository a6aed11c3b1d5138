"""Application settings loaded from the environment.

Values come from environment variables or a local `.env` file. A single
module-level `settings` instance is imported wherever configuration is needed.
"""

from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environments."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Typed application configuration."""

    app_name: str = Field(default="Meal Subscription API", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(default=Environment.DEVELOPMENT)

    # Read/write partitioning: point the read URL at a replica in production.
    write_database_url: str = Field(default="sqlite:///meal_subscription.db")
    read_database_url: Optional[str] = Field(default=None)

    access_token_secret: str = Field(default="change-me-access-secret")
    refresh_token_secret: str = Field(default="change-me-refresh-secret")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60, ge=1)
    refresh_token_expire_days: int = Field(default=7, ge=1)

    cors_origins: List[str] = Field(default=["http://localhost:5173", "http://localhost:3000"])
    log_level: str = Field(default="INFO")

    csrf_enabled: bool = Field(default=True, description="Require double-submit CSRF tokens")
    seed_on_startup: bool = Field(default=True, description="Seed demo data into empty tables")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def normalize_environment(cls, v):
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @property
    def effective_read_database_url(self) -> str:
        return self.read_database_url or self.write_database_url

    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING


settings = Settings()
