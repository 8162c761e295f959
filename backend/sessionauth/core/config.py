"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

#: Signing key placeholder; production refuses to boot with it.
PLACEHOLDER_JWT_SECRET: Final[str] = "CHANGE_ME_JWT"

# Load .env in development (no-op when the file is missing)
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


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


def env_float(name: str, default: float) -> float:
    """Parse a float from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return float(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Defaults to a development-safe placeholder.
    JWT_SECRET_KEY: str
        Key used by ``flask-jwt-extended`` to seal access tokens. Constant
        for the process lifetime.
    JWT_ALGORITHM: str
        Signing algorithm for access tokens (``HS256`` by default).
    ACCESS_TOKEN_TTL_SECONDS: int
        Access token lifetime (15 minutes).
    REFRESH_TOKEN_TTL_DAYS: int
        Refresh token lifetime (7 days).
    REFRESH_TOKEN_BYTES: int
        Random bytes drawn for each refresh secret (32 bytes = 256 bits).
    ARGON2_MEMORY_COST / ARGON2_TIME_COST / ARGON2_PARALLELISM: int
        Argon2id cost parameters, encoded into every digest.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    STORE_TIMEOUT_SECONDS: float
        Upper bound for acquiring a DB connection or waiting on Redis.
    REDIS_URL: str | None
        Optional Redis endpoint; required when ``BLOCKLIST_BACKEND=redis``.
    BLOCKLIST_BACKEND: str
        ``"database"`` (default) or ``"redis"``.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", PLACEHOLDER_JWT_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

    # Token policy
    ACCESS_TOKEN_TTL_SECONDS = env_int("ACCESS_TOKEN_TTL_SECONDS", 900)
    REFRESH_TOKEN_TTL_DAYS = env_int("REFRESH_TOKEN_TTL_DAYS", 7)
    REFRESH_TOKEN_BYTES = env_int("REFRESH_TOKEN_BYTES", 32)

    # Password hashing (argon2id)
    ARGON2_MEMORY_COST = env_int("ARGON2_MEMORY_COST", 2**16)
    ARGON2_TIME_COST = env_int("ARGON2_TIME_COST", 3)
    ARGON2_PARALLELISM = env_int("ARGON2_PARALLELISM", 1)

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    STORE_TIMEOUT_SECONDS = env_float("STORE_TIMEOUT_SECONDS", 5.0)
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # Blocklist backend
    REDIS_URL = os.getenv("REDIS_URL")
    BLOCKLIST_BACKEND = os.getenv("BLOCKLIST_BACKEND", "database").strip().lower()

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & proxy
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and honors ``SQLALCHEMY_ECHO`` for verbose
    SQL logging when requested.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Lowers Argon2 cost so the suite stays fast; digests still self-describe.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    JWT_SECRET_KEY = "testing-signing-key-with-enough-entropy-0123456789"
    ARGON2_MEMORY_COST = 1024
    ARGON2_TIME_COST = 1
    BLOCKLIST_BACKEND = "database"
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled. The factory refuses to start when
    ``JWT_SECRET_KEY`` still holds the placeholder value.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
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
