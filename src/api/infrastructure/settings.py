"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from enum import StrEnum
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Widths of the reservations.time_slot and reservations.notes columns.
TIME_SLOT_COLUMN_LENGTH = 50
NOTES_COLUMN_LENGTH = 500


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        CAMPUS_RESERVE_DB_HOST: Database host (default: localhost)
        CAMPUS_RESERVE_DB_PORT: Database port (default: 5432)
        CAMPUS_RESERVE_DB_DATABASE: Database name (default: campus_reserve)
        CAMPUS_RESERVE_DB_USERNAME: Database user (default: campus_reserve)
        CAMPUS_RESERVE_DB_PASSWORD: Database password (required in production)
        CAMPUS_RESERVE_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        CAMPUS_RESERVE_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="CAMPUS_RESERVE_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="campus_reserve", description="Database name")
    username: str = Field(default="campus_reserve", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class OIDCSettings(BaseSettings):
    """Identity provider settings for session token validation.

    Environment variables:
        CAMPUS_RESERVE_OIDC_ISSUER_URL: Token issuer URL
        CAMPUS_RESERVE_OIDC_AUDIENCE: Expected audience claim (default: authenticated)
        CAMPUS_RESERVE_OIDC_USER_ID_CLAIM: Claim holding the user ID (default: sub)
        CAMPUS_RESERVE_OIDC_EMAIL_CLAIM: Claim holding the email (default: email)
        CAMPUS_RESERVE_OIDC_NAME_CLAIM: Claim holding the display name (default: name)
    """

    model_config = SettingsConfigDict(
        env_prefix="CAMPUS_RESERVE_OIDC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    issuer_url: str = Field(
        default="http://localhost:9999/auth/v1",
        description="OIDC issuer URL",
    )
    audience: str = Field(
        default="authenticated",
        description="Expected audience claim",
    )
    user_id_claim: str = Field(default="sub", description="User ID claim")
    email_claim: str = Field(default="email", description="Email claim")
    name_claim: str = Field(default="name", description="Display name claim")


class ReservationSettings(BaseSettings):
    """Reservation submission rules.

    Environment variables:
        CAMPUS_RESERVE_RESERVATIONS_CAMPUS_TIMEZONE: IANA zone defining "today" (default: UTC)
        CAMPUS_RESERVE_RESERVATIONS_TIME_SLOT_MAX_LENGTH: Max time slot length (default: 50)
        CAMPUS_RESERVE_RESERVATIONS_NOTES_MAX_LENGTH: Max notes length (default: 500)

    Both limits may be lowered but never raised above the stored column
    widths.
    """

    model_config = SettingsConfigDict(
        env_prefix="CAMPUS_RESERVE_RESERVATIONS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    campus_timezone: str = Field(
        default="UTC",
        description="Timezone used to decide the submission day",
    )
    time_slot_max_length: int = Field(
        default=TIME_SLOT_COLUMN_LENGTH, ge=1, le=TIME_SLOT_COLUMN_LENGTH
    )
    notes_max_length: int = Field(
        default=NOTES_COLUMN_LENGTH, ge=1, le=NOTES_COLUMN_LENGTH
    )

    @field_validator("campus_timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Reject unknown IANA zone names at startup."""
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        """Campus timezone as a tzinfo object."""
        return ZoneInfo(self.campus_timezone)


class ChangeFeedBackend(StrEnum):
    """Available change feed transports."""

    MEMORY = "memory"
    POSTGRES = "postgres"


class ChangeFeedSettings(BaseSettings):
    """Change feed transport settings.

    Environment variables:
        CAMPUS_RESERVE_CHANGE_FEED_BACKEND: memory or postgres (default: memory)
        CAMPUS_RESERVE_CHANGE_FEED_CHANNEL: NOTIFY channel (default: reservation_changes)
        CAMPUS_RESERVE_CHANGE_FEED_SUBSCRIBER_QUEUE_SIZE: Per-subscriber buffer (default: 100)
    """

    model_config = SettingsConfigDict(
        env_prefix="CAMPUS_RESERVE_CHANGE_FEED_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    backend: ChangeFeedBackend = Field(default=ChangeFeedBackend.MEMORY)
    channel: str = Field(
        default="reservation_changes",
        pattern=r"^[a-z_][a-z0-9_]*$",
        max_length=63,
    )
    subscriber_queue_size: int = Field(default=100, ge=1, le=10_000)


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="CAMPUS_RESERVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(
        default="Campus Equipment Reservations API", description="Application name"
    )
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings."""
    return DatabaseSettings()


@lru_cache
def get_oidc_settings() -> OIDCSettings:
    """Get cached identity provider settings."""
    return OIDCSettings()


@lru_cache
def get_reservation_settings() -> ReservationSettings:
    """Get cached reservation rule settings."""
    return ReservationSettings()


@lru_cache
def get_change_feed_settings() -> ChangeFeedSettings:
    """Get cached change feed settings."""
    return ChangeFeedSettings()
