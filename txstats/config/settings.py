"""
Configuration Management for Transaction Statistics

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see every tunable in one place and
ensures all configuration is validated at startup.
"""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AggregatorSettings(BaseSettings):
    """Admission rules for the aggregation engine."""

    model_config = SettingsConfigDict(
        env_prefix="TXSTATS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    reference_timezone: str = Field(
        default="Asia/Kolkata",
        description="IANA zone every transaction timestamp is relabeled into"
    )
    freshness_window_seconds: int = Field(
        default=60,
        ge=1,
        description="How old (in seconds) a transaction may be and still be admitted"
    )

    @field_validator('reference_timezone')
    @classmethod
    def validate_reference_timezone(cls, v: str) -> str:
        """Fail at startup rather than on the first transaction."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.reference_timezone)


class ServerSettings(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TXSTATS_SERVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    host: str = Field(
        default="0.0.0.0",
        description="Interface to bind"
    )
    port: int = Field(
        default=4000,
        ge=1,
        le=65535,
        description="Port to listen on"
    )
    log_level: str = Field(
        default="info",
        pattern="^(debug|info|warning|error|critical)$",
        description="Log level for the server and the audit logger"
    )
    audit_capacity: int = Field(
        default=10000,
        ge=1,
        description="How many audit events the in-memory trail keeps"
    )


class ClientSettings(BaseSettings):
    """Configuration for clients of the HTTP API (e.g. the dashboard)."""

    model_config = SettingsConfigDict(
        env_prefix="TXSTATS_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    base_url: str = Field(
        default="http://localhost:4000",
        description="Base URL of the transaction statistics API"
    )
    timeout_seconds: float = Field(
        default=5.0,
        gt=0.0,
        le=60.0,
        description="Per-request timeout"
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per request on transport failures"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def aggregator(self) -> AggregatorSettings:
        return AggregatorSettings()

    @property
    def server(self) -> ServerSettings:
        return ServerSettings()

    @property
    def client(self) -> ClientSettings:
        return ClientSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the ones that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("aggregator", "server", "client", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
