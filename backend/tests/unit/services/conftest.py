"""Fixtures wiring the credential components to in-memory stores."""

from __future__ import annotations

from datetime import timedelta

import pytest

from sessionauth.infra.jwt.flask_jwt_envelope_signer import FlaskJWTEnvelopeSigner
from sessionauth.services._shared.ports import (
    InMemoryAccessTokenBlocklist,
    InMemoryRefreshTokenStore,
    InMemoryUserStore,
)
from sessionauth.services.credentials.service import CredentialService
from sessionauth.services.gate.service import AuthenticationGate
from sessionauth.services.tokens.dto import TokenPolicy
from sessionauth.services.tokens.lifecycle import TokenLifecycleManager
from tests.factories.user import test_hasher


@pytest.fixture()
def signer(app) -> FlaskJWTEnvelopeSigner:
    return FlaskJWTEnvelopeSigner()


@pytest.fixture()
def refresh_store() -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore()


@pytest.fixture()
def blocklist() -> InMemoryAccessTokenBlocklist:
    return InMemoryAccessTokenBlocklist()


@pytest.fixture()
def users() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture()
def tokens(signer, refresh_store, blocklist) -> TokenLifecycleManager:
    return TokenLifecycleManager(
        signer=signer,
        refresh_store=refresh_store,
        blocklist=blocklist,
        policy=TokenPolicy(access_ttl=timedelta(minutes=15), refresh_ttl=timedelta(days=7)),
    )


@pytest.fixture()
def credentials(users, tokens) -> CredentialService:
    return CredentialService(users=users, hasher=test_hasher, tokens=tokens)


@pytest.fixture()
def gate(signer, tokens, users) -> AuthenticationGate:
    return AuthenticationGate(signer=signer, tokens=tokens, users=users)
