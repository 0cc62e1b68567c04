"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator, model_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="ChefOS", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Database settings
    database_url: str = Field(
        default="postgresql+psycopg2://chefos@localhost:5432/chefos",
        description="SQLAlchemy database URL",
    )
    test_database_url: str = Field(
        default="sqlite+pysqlite:///:memory:",
        description="Database URL used by the test suite",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=8, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between DB init attempts"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="/api/v1", description="API route prefix")
    api_title: str = Field(default="ChefOS API", description="API documentation title")
    api_description: str = Field(
        default="Recipe marketplace, fridge assistant and chef token wallet",
        description="API documentation description",
    )

    # AI settings
    ai_enabled: bool = Field(default=True, description="Enable AI recipe wizard")
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    openai_model: str = Field(
        default="gpt-4o-mini", description="Model used to structure recipe drafts"
    )
    openai_timeout_sec: float = Field(
        default=60.0, gt=0, description="Timeout for a single LLM request"
    )

    # Economy settings
    token_currency: str = Field(default="CT", description="Chef token currency label")
    fiat_currency: str = Field(default="PLN", description="Currency for fridge prices")
    token_purchase_min: int = Field(
        default=10, ge=1, description="Minimum tokens per purchase"
    )
    token_purchase_max: int = Field(
        default=10000, ge=1, description="Maximum tokens per purchase"
    )
    new_user_bonus_tokens: int = Field(
        default=0, ge=0, description="Tokens granted on registration"
    )

    # Assistant settings
    expiring_soon_days: int = Field(
        default=2, ge=0, description="Days ahead counted as expiring soon"
    )
    assistant_match_limit: int = Field(
        default=20, ge=1, le=200, description="Matches fetched for rotation"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @model_validator(mode="after")
    def check_purchase_bounds(self):
        if self.token_purchase_min > self.token_purchase_max:
            raise ValueError("token_purchase_min must not exceed token_purchase_max")
        return self

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT


# Global settings instance
settings = Settings()
