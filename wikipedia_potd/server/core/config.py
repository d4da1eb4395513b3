"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = "WikipediaPotdBot/1.0 (https://github.com/sf13/wikipedia-potd; potd@sf13.dev)"

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class WikipediaConfig(BaseModel):
    """Wikipedia scraping configuration."""

    url: str = Field(
        default="https://en.wikipedia.org/wiki/Main_Page",
        alias="WIKIPEDIA_URL",
        description="Page holding the featured picture",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        alias="WIKIPEDIA_USER_AGENT",
        description="User-Agent header sent to Wikipedia and Wikimedia",
    )
    timeout_seconds: float = Field(
        default=30.0, alias="WIKIPEDIA_TIMEOUT_SECONDS", description="HTTP timeout for page and image downloads"
    )

    model_config = {"populate_by_name": True}


class GoogleConfig(BaseModel):
    """Google Gemini API configuration."""

    api_key: Optional[SecretStr] = Field(
        default=None, alias="GOOGLE_API_KEY", description="Google API key for authentication"
    )
    model: str = Field(default="gemini-2.0-flash", alias="GOOGLE_MODEL", description="Gemini model to use")

    model_config = {"populate_by_name": True}


class SchedulerConfig(BaseModel):
    """Background scrape scheduler configuration."""

    enabled: bool = Field(default=True, alias="SCHEDULER_ENABLED", description="Run the scrape job periodically")
    interval_seconds: float = Field(
        default=3600.0, alias="SCHEDULER_INTERVAL_SECONDS", description="Seconds between scheduled scrapes"
    )

    model_config = {"populate_by_name": True}


class FaultToleranceConfig(BaseModel):
    """Retry, circuit breaker and rate limit settings for the scrape job."""

    enabled: bool = Field(
        default=True, alias="SCRAPE_FAULT_TOLERANCE_ENABLED", description="Apply fault tolerance policies"
    )
    retry_max_retries: int = Field(default=3, ge=0, alias="SCRAPE_RETRY_MAX_RETRIES")
    retry_delay_seconds: float = Field(default=10.0, ge=0, alias="SCRAPE_RETRY_DELAY_SECONDS")
    circuit_request_volume: int = Field(default=4, ge=1, alias="SCRAPE_CIRCUIT_REQUEST_VOLUME")
    circuit_failure_ratio: float = Field(default=0.5, ge=0.0, le=1.0, alias="SCRAPE_CIRCUIT_FAILURE_RATIO")
    circuit_delay_seconds: float = Field(default=3600.0, ge=0, alias="SCRAPE_CIRCUIT_DELAY_SECONDS")
    rate_limit_value: int = Field(default=1, ge=1, alias="SCRAPE_RATE_LIMIT_VALUE")
    rate_limit_window_seconds: float = Field(default=600.0, gt=0, alias="SCRAPE_RATE_LIMIT_WINDOW_SECONDS")

    model_config = {"populate_by_name": True}


class LogfireConfig(BaseModel):
    """Logfire / OpenTelemetry tracing configuration."""

    enabled: bool = Field(default=False, alias="LOGFIRE_ENABLED", description="Enable tracing")
    token: Optional[SecretStr] = Field(default=None, alias="LOGFIRE_TOKEN", description="Logfire write token")
    service_name: str = Field(default="wikipedia-potd", alias="LOGFIRE_SERVICE_NAME")
    environment: str = Field(default="development", alias="LOGFIRE_ENVIRONMENT")

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Server Configuration
    # =====================================================================
    server_host: str = Field(default="0.0.0.0", alias="POTD_SERVER_HOST", description="Host address to bind to")
    server_port: int = Field(default=8080, alias="POTD_SERVER_PORT", description="Server port number")
    log_level: str = Field(
        default="INFO",
        alias="POTD_LOG_LEVEL",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    metrics_enabled: bool = Field(default=True, alias="METRICS_ENABLED", description="Expose /metrics")

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./potd.db",
        alias="DATABASE_URL",
        description="Async SQLAlchemy URL (postgresql+asyncpg in production)",
    )

    # =====================================================================
    # Cache Configuration
    # =====================================================================
    cache_max_size: int = Field(default=128, ge=0, alias="CACHE_MAX_SIZE", description="Entries per cache (0 = unlimited)")

    # =====================================================================
    # Grouped values (flat env vars, exposed through the properties below)
    # =====================================================================
    wikipedia_url: str = Field(default="https://en.wikipedia.org/wiki/Main_Page", alias="WIKIPEDIA_URL")
    wikipedia_user_agent: str = Field(default=DEFAULT_USER_AGENT, alias="WIKIPEDIA_USER_AGENT")
    wikipedia_timeout_seconds: float = Field(default=30.0, alias="WIKIPEDIA_TIMEOUT_SECONDS")

    google_api_key: Optional[SecretStr] = Field(default=None, alias="GOOGLE_API_KEY")
    google_model: str = Field(default="gemini-2.0-flash", alias="GOOGLE_MODEL")

    scheduler_enabled: bool = Field(default=True, alias="SCHEDULER_ENABLED")
    scheduler_interval_seconds: float = Field(default=3600.0, alias="SCHEDULER_INTERVAL_SECONDS")

    scrape_fault_tolerance_enabled: bool = Field(default=True, alias="SCRAPE_FAULT_TOLERANCE_ENABLED")
    scrape_retry_max_retries: int = Field(default=3, alias="SCRAPE_RETRY_MAX_RETRIES")
    scrape_retry_delay_seconds: float = Field(default=10.0, alias="SCRAPE_RETRY_DELAY_SECONDS")
    scrape_circuit_request_volume: int = Field(default=4, alias="SCRAPE_CIRCUIT_REQUEST_VOLUME")
    scrape_circuit_failure_ratio: float = Field(default=0.5, alias="SCRAPE_CIRCUIT_FAILURE_RATIO")
    scrape_circuit_delay_seconds: float = Field(default=3600.0, alias="SCRAPE_CIRCUIT_DELAY_SECONDS")
    scrape_rate_limit_value: int = Field(default=1, alias="SCRAPE_RATE_LIMIT_VALUE")
    scrape_rate_limit_window_seconds: float = Field(default=600.0, alias="SCRAPE_RATE_LIMIT_WINDOW_SECONDS")

    logfire_enabled: bool = Field(default=False, alias="LOGFIRE_ENABLED")
    logfire_token: Optional[SecretStr] = Field(default=None, alias="LOGFIRE_TOKEN")
    logfire_service_name: str = Field(default="wikipedia-potd", alias="LOGFIRE_SERVICE_NAME")
    logfire_environment: str = Field(default="development", alias="LOGFIRE_ENVIRONMENT")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def wikipedia(self) -> WikipediaConfig:
        """Get Wikipedia scraping configuration."""
        return WikipediaConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def google(self) -> GoogleConfig:
        """Get Google Gemini configuration."""
        return GoogleConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def scheduler(self) -> SchedulerConfig:
        """Get scheduler configuration."""
        return SchedulerConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def fault_tolerance(self) -> FaultToleranceConfig:
        """Get scrape fault tolerance configuration."""
        return FaultToleranceConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def logfire(self) -> LogfireConfig:
        """Get Logfire tracing configuration."""
        return LogfireConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance (FastAPI dependency)."""
    return settings
