"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Load .env during development (no-op when missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int | None = None) -> int | None:
    """Parse an integer from an environment variable, ignoring garbage."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return int(val.strip())
    except ValueError:
        return default


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret key, read from ``SECRET_KEY``.
    JSON_SORT_KEYS: bool
        Keeps JSON output order stable when ``False``.
    PROPAGATE_EXCEPTIONS: bool
        Controls Flask error propagation.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    USERS_SEED_COUNT: int
        Number of mock users generated when the application starts.
    USERS_SEED: int | None
        Random seed for the mock users; ``None`` yields a new set per process.
    SIMULATED_LATENCY_MS: int
        Artificial delay added to every users endpoint.
    DEBUG: bool
        Toggles Flask debug mode.
    TESTING: bool
        Enables Flask testing mode when ``True``.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "dev")

    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Flask & JSON
    JSON_SORT_KEYS = False
    JSON_AS_ASCII = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000")

    # Mock user store
    USERS_SEED_COUNT = env_int("USERS_SEED_COUNT", 100)
    USERS_SEED = env_int("USERS_SEED")
    SIMULATED_LATENCY_MS = env_int("SIMULATED_LATENCY_MS", 0)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and honors ``SIMULATED_LATENCY_MS`` so the
    loading states of a client can be observed.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses a fixed seed so the generated users are reproducible.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    USERS_SEED = 1234
    SIMULATED_LATENCY_MS = 0
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


@dataclass(frozen=True, slots=True)
class ClientSettings:
    """Settings consumed by the listing client.

    :param api_url: Base URL of the users API (without the ``/api`` suffix).
    :param debounce_ms: Quiet period applied to the search box.
    :param retry: Number of retries after a failed listing fetch.
    :param retry_delay_ms: Base delay for the exponential retry backoff.
    :param retry_delay_max_ms: Upper bound for a single retry delay.
    :param timeout: Per-request timeout in seconds.
    """

    api_url: str = "http://localhost:8000"
    debounce_ms: int = 300
    retry: int = 3
    retry_delay_ms: int = 1000
    retry_delay_max_ms: int = 30_000
    timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Build settings from ``USERS_API_URL`` and friends."""
        defaults = cls()
        return cls(
            api_url=os.getenv("USERS_API_URL", defaults.api_url).rstrip("/"),
            debounce_ms=env_int("SEARCH_DEBOUNCE_MS", defaults.debounce_ms) or 0,
            retry=env_int("QUERY_RETRY", defaults.retry) or 0,
            retry_delay_ms=env_int("QUERY_RETRY_DELAY_MS", defaults.retry_delay_ms) or 0,
            retry_delay_max_ms=defaults.retry_delay_max_ms,
            timeout=defaults.timeout,
        )
