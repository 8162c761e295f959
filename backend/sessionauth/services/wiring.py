# sessionauth/services/wiring.py
"""
Explicit construction of the credential components for a Flask app.

Everything is assembled once per app and stored in
``app.extensions["sessionauth"]``; request handlers fetch it through
:func:`get_services`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from flask import Flask, current_app

from sessionauth.core.extensions import get_redis
from sessionauth.infra.jwt.flask_jwt_envelope_signer import FlaskJWTEnvelopeSigner
from sessionauth.infra.redis.redis_blocklist import RedisAccessTokenBlocklist
from sessionauth.infra.security.argon2_password_hasher import Argon2PasswordHasher
from sessionauth.infra.sqlalchemy.blocklist import SQLAlchemyAccessTokenBlocklist
from sessionauth.infra.sqlalchemy.refresh_token_store import SQLAlchemyRefreshTokenStore
from sessionauth.infra.sqlalchemy.user_store import SQLAlchemyUserStore
from sessionauth.services._shared.ports import AccessTokenBlocklist
from sessionauth.services.credentials.service import CredentialService
from sessionauth.services.gate.service import AuthenticationGate
from sessionauth.services.tokens.dto import TokenPolicy
from sessionauth.services.tokens.lifecycle import TokenLifecycleManager

EXTENSION_KEY = "sessionauth"


@dataclass(frozen=True, slots=True)
class Services:
    """Bundle of wired components."""

    tokens: TokenLifecycleManager
    credentials: CredentialService
    gate: AuthenticationGate


def _build_blocklist(app: Flask) -> AccessTokenBlocklist:
    backend = app.config.get("BLOCKLIST_BACKEND", "database")
    if backend == "redis":
        return RedisAccessTokenBlocklist(get_redis())
    if backend == "database":
        return SQLAlchemyAccessTokenBlocklist()
    raise RuntimeError(f"Unknown BLOCKLIST_BACKEND: {backend!r}")


def build_services(app: Flask) -> Services:
    """Wire stores, primitives and services from ``app.config``."""
    cfg = app.config
    policy = TokenPolicy(
        access_ttl=timedelta(seconds=int(cfg["ACCESS_TOKEN_TTL_SECONDS"])),
        refresh_ttl=timedelta(days=int(cfg["REFRESH_TOKEN_TTL_DAYS"])),
        refresh_secret_bytes=int(cfg["REFRESH_TOKEN_BYTES"]),
    )
    hasher = Argon2PasswordHasher(
        memory_cost=int(cfg["ARGON2_MEMORY_COST"]),
        time_cost=int(cfg["ARGON2_TIME_COST"]),
        parallelism=int(cfg["ARGON2_PARALLELISM"]),
    )
    signer = FlaskJWTEnvelopeSigner()
    users = SQLAlchemyUserStore()

    tokens = TokenLifecycleManager(
        signer=signer,
        refresh_store=SQLAlchemyRefreshTokenStore(),
        blocklist=_build_blocklist(app),
        policy=policy,
    )
    services = Services(
        tokens=tokens,
        credentials=CredentialService(users=users, hasher=hasher, tokens=tokens),
        gate=AuthenticationGate(signer=signer, tokens=tokens, users=users),
    )
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> Services:
    """Return the components wired for the current app."""
    return current_app.extensions[EXTENSION_KEY]
