"""Application settings and configuration.

This module defines all configuration options for the Kopy paste service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Kopy", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./kopy.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    db_pool_timeout_seconds: float = Field(default=10.0, alias="DB_POOL_TIMEOUT_SECONDS")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")

    # Public base URL used when building shareable links. When unset the
    # request's forwarding headers decide.
    base_url: str | None = Field(default=None, alias="BASE_URL")

    # Paste lifetime policy (minutes): 10m, 1h, 1d, 3d, 1w
    default_expiration_minutes: int = Field(default=10, alias="DEFAULT_EXPIRATION_MINUTES")
    allowed_expiration_minutes: list[int] = Field(
        default=[10, 60, 1440, 4320, 10080],
        alias="ALLOWED_EXPIRATION_MINUTES",
    )
    max_content_bytes: int = Field(default=1024 * 1024, alias="MAX_CONTENT_BYTES")
    max_sender_name_length: int = Field(default=100, alias="MAX_SENDER_NAME_LENGTH")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _check_expiration_policy(self) -> "Settings":
        if not self.allowed_expiration_minutes:
            raise ValueError("ALLOWED_EXPIRATION_MINUTES must not be empty")
        if any(minutes <= 0 for minutes in self.allowed_expiration_minutes):
            raise ValueError("ALLOWED_EXPIRATION_MINUTES must be positive")
        if self.default_expiration_minutes not in self.allowed_expiration_minutes:
            raise ValueError(
                "DEFAULT_EXPIRATION_MINUTES must be one of ALLOWED_EXPIRATION_MINUTES"
            )
        return self

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
