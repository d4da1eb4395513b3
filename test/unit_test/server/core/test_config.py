"""Unit tests for server configuration settings model.

Tests verify that the Settings model correctly binds environment variables
from the .env.example file and that the grouped configuration models are
built from the flat settings.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from wikipedia_potd.server.core.config import (
    DEFAULT_USER_AGENT,
    FaultToleranceConfig,
    GoogleConfig,
    Settings,
    WikipediaConfig,
    get_settings,
    settings,
)

ENV_VARS = (
    "POTD_SERVER_HOST",
    "POTD_SERVER_PORT",
    "POTD_LOG_LEVEL",
    "DATABASE_URL",
    "WIKIPEDIA_URL",
    "WIKIPEDIA_USER_AGENT",
    "GOOGLE_API_KEY",
    "GOOGLE_MODEL",
    "SCHEDULER_ENABLED",
    "SCHEDULER_INTERVAL_SECONDS",
    "SCRAPE_RATE_LIMIT_VALUE",
    "SCRAPE_RETRY_MAX_RETRIES",
    "CACHE_MAX_SIZE",
    "LOGFIRE_ENABLED",
)


@pytest.fixture
def env_example_path() -> Path:
    """Get path to .env.example file."""
    return Path(__file__).resolve().parent.parent.parent.parent.parent / ".env.example"


@pytest.fixture
def env_example_vars(env_example_path: Path) -> dict[str, str]:
    """Parse .env.example file and return environment variables."""
    env_vars = {}
    with open(env_example_path) as f:
        for line in f:
            line = line.strip()
            # Skip comments and empty lines
            if not line or line.startswith("#"):
                continue
            # Parse KEY=VALUE
            if "=" in line:
                key, value = line.split("=", 1)
                env_vars[key.strip()] = value.strip()
    return env_vars


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettingsDefaults:
    def test_defaults(self, clean_env):
        config = Settings(_env_file=None)

        assert config.server_port == 8080
        assert config.log_level == "INFO"
        assert config.database_url == "sqlite+aiosqlite:///./potd.db"
        assert config.cache_max_size == 128
        assert config.wikipedia.url == "https://en.wikipedia.org/wiki/Main_Page"
        assert config.wikipedia.user_agent == DEFAULT_USER_AGENT
        assert config.google.api_key is None
        assert config.scheduler.enabled is True
        assert config.scheduler.interval_seconds == 3600.0
        assert config.logfire.enabled is False

    def test_fault_tolerance_defaults(self, clean_env):
        fault_tolerance = Settings(_env_file=None).fault_tolerance

        assert fault_tolerance.enabled is True
        assert fault_tolerance.retry_max_retries == 3
        assert fault_tolerance.retry_delay_seconds == 10.0
        assert fault_tolerance.circuit_request_volume == 4
        assert fault_tolerance.circuit_failure_ratio == 0.5
        assert fault_tolerance.circuit_delay_seconds == 3600.0
        assert fault_tolerance.rate_limit_value == 1
        assert fault_tolerance.rate_limit_window_seconds == 600.0


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_server_binding(self, env_example_vars: dict[str, str], clean_env):
        clean_env.setenv("POTD_SERVER_HOST", env_example_vars["POTD_SERVER_HOST"])
        clean_env.setenv("POTD_SERVER_PORT", env_example_vars["POTD_SERVER_PORT"])
        clean_env.setenv("POTD_LOG_LEVEL", env_example_vars["POTD_LOG_LEVEL"])

        config = Settings(_env_file=None)

        assert config.server_host == env_example_vars["POTD_SERVER_HOST"]
        assert config.server_port == int(env_example_vars["POTD_SERVER_PORT"])
        assert config.log_level == env_example_vars["POTD_LOG_LEVEL"]

    def test_wikipedia_binding(self, env_example_vars: dict[str, str], clean_env):
        clean_env.setenv("WIKIPEDIA_URL", "https://de.wikipedia.org/wiki/Wikipedia:Hauptseite")
        clean_env.setenv("WIKIPEDIA_USER_AGENT", env_example_vars["WIKIPEDIA_USER_AGENT"])

        wikipedia = Settings(_env_file=None).wikipedia

        assert isinstance(wikipedia, WikipediaConfig)
        assert wikipedia.url == "https://de.wikipedia.org/wiki/Wikipedia:Hauptseite"
        assert wikipedia.user_agent == env_example_vars["WIKIPEDIA_USER_AGENT"]

    def test_google_binding(self, clean_env):
        clean_env.setenv("GOOGLE_API_KEY", "test-key")
        clean_env.setenv("GOOGLE_MODEL", "gemini-2.5-flash")

        google = Settings(_env_file=None).google

        assert isinstance(google, GoogleConfig)
        assert google.api_key.get_secret_value() == "test-key"
        assert google.model == "gemini-2.5-flash"

    def test_scheduler_and_fault_tolerance_binding(self, clean_env):
        clean_env.setenv("SCHEDULER_ENABLED", "false")
        clean_env.setenv("SCHEDULER_INTERVAL_SECONDS", "60")
        clean_env.setenv("SCRAPE_RATE_LIMIT_VALUE", "5")
        clean_env.setenv("SCRAPE_RETRY_MAX_RETRIES", "0")

        config = Settings(_env_file=None)

        assert config.scheduler.enabled is False
        assert config.scheduler.interval_seconds == 60.0
        assert config.fault_tolerance.rate_limit_value == 5
        assert config.fault_tolerance.retry_max_retries == 0

    def test_env_names_are_case_sensitive(self, clean_env):
        clean_env.setenv("potd_server_port", "9999")
        assert Settings(_env_file=None).server_port == 8080

    def test_env_example_values_are_valid(self, env_example_vars: dict[str, str], clean_env):
        for key, value in env_example_vars.items():
            clean_env.setenv(key, value)

        config = Settings(_env_file=None)

        assert config.server_port == 8080
        assert config.fault_tolerance.circuit_failure_ratio == 0.5


class TestGroupedConfigValidation:
    def test_failure_ratio_bounds(self):
        with pytest.raises(ValidationError):
            FaultToleranceConfig(circuit_failure_ratio=1.5)

    def test_rate_limit_window_must_be_positive(self):
        with pytest.raises(ValidationError):
            FaultToleranceConfig.model_validate({"SCRAPE_RATE_LIMIT_WINDOW_SECONDS": 0})

    def test_populate_by_alias(self):
        google = GoogleConfig.model_validate({"GOOGLE_MODEL": "gemini-pro"})
        assert google.model == "gemini-pro"


def test_get_settings_returns_module_settings():
    assert get_settings() is settings
