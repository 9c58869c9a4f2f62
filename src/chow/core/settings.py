"""Application settings and configuration.

This module defines all configuration options for the Chow API.
Settings are loaded from environment variables with sensible defaults.
"""

from urllib.parse import quote_plus

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Hard ceiling on any proximity query, independent of the configured cap.
PROTOCOL_MAX_RADIUS_METERS = 5000.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Chow API", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Session token settings
    secret_key: str = Field(alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60,
        ge=1,
        alias="JWT_EXPIRY_MINUTES",
    )

    # Database configuration
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    db_name: str = Field(default="chow", alias="DB_DATABASE")
    db_user: str = Field(default="postgres", alias="DB_USERNAME")
    db_password: str = Field(default="postgres", alias="DB_PASSWORD")
    db_host: str = Field(default="localhost", alias="DB_HOST")
    db_port: int = Field(default=5432, alias="DB_PORT")
    db_pool_size: int = Field(default=30, ge=1, alias="DB_POOL_SIZE")
    db_pool_timeout_seconds: float = Field(default=30.0, gt=0, alias="DB_POOL_TIMEOUT_SECONDS")
    db_statement_timeout_ms: int | None = Field(default=15_000, alias="DB_STATEMENT_TIMEOUT_MS")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Proximity search
    max_nearby_radius_m: float = Field(default=2000.0, alias="MAX_RADIUS_METERS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["Authorization", "Origin", "Content-Type", "Content-Length"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("max_nearby_radius_m")
    @classmethod
    def validate_radius_cap(cls, value: float) -> float:
        """Keep the operational cap within (0, protocol ceiling]."""
        if value <= 0 or value > PROTOCOL_MAX_RADIUS_METERS:
            raise ValueError(
                f"MAX_RADIUS_METERS must be in (0, {PROTOCOL_MAX_RADIUS_METERS:g}]"
            )
        return value

    @property
    def effective_database_url(self) -> str:
        """Return the database URL, assembling it from DB_* parts when unset.

        Returns:
            A SQLAlchemy URL; an explicit DATABASE_URL always wins.
        """
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg://{quote_plus(self.db_user)}:{quote_plus(self.db_password)}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def database_url_sync(self) -> str:
        """Return a psycopg-compatible URL for tooling such as Alembic."""
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url


settings = Settings()  # type: ignore[call-arg]
