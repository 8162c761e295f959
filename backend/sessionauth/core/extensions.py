"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from typing import Any

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()
redis_client: redis.Redis | None = None


def _engine_options(app: Flask) -> dict[str, Any]:
    """Merge the store timeout into the engine options.

    On PostgreSQL the bound covers pool checkout (``pool_timeout``), the
    connection handshake (``connect_timeout``) and every statement
    (``statement_timeout``), so a row lock held by a concurrent rotation
    surfaces as a cancelled query instead of a hung request. SQLite uses
    singleton/static pools that reject ``pool_timeout`` and gets nothing.
    """
    options = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS") or {})
    uri = str(app.config.get("SQLALCHEMY_DATABASE_URI", ""))
    timeout = app.config.get("STORE_TIMEOUT_SECONDS")
    if not timeout or uri.startswith("sqlite"):
        return options

    options.setdefault("pool_timeout", timeout)
    if uri.startswith(("postgresql", "postgres")):
        connect_args = dict(options.get("connect_args") or {})
        connect_args.setdefault("connect_timeout", max(1, int(timeout)))
        connect_args.setdefault("options", f"-c statement_timeout={int(float(timeout) * 1000)}")
        options["connect_args"] = connect_args
    return options


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, JWT and the optional Redis client.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`sessionauth.models` package to ensure SQLAlchemy metadata is
        ready for migrations.
    """
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = _engine_options(app)
    app.config.setdefault("JWT_ACCESS_TOKEN_EXPIRES", app.config.get("ACCESS_TOKEN_TTL_SECONDS"))
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from sessionauth import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)

    global redis_client
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        redis_client = None
        app.extensions.pop("redis_client", None)
        return

    timeout = app.config.get("STORE_TIMEOUT_SECONDS")
    redis_client = redis.Redis.from_url(
        redis_url,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )
    try:
        redis_client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = redis_client


def get_redis() -> redis.Redis:
    """Return the initialized Redis client."""
    if redis_client is None:
        raise RuntimeError("Redis client is not initialized. Set REDIS_URL and call init_app().")
    return redis_client
