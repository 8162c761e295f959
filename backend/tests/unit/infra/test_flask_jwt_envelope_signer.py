"""Unit tests for the flask-jwt-extended envelope signer."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt as pyjwt
import pytest
from flask_jwt_extended import create_refresh_token
from freezegun import freeze_time

from sessionauth.infra.jwt.flask_jwt_envelope_signer import FlaskJWTEnvelopeSigner
from sessionauth.services._shared.errors import InvalidToken, TokenExpired


@pytest.fixture
def signer() -> FlaskJWTEnvelopeSigner:
    return FlaskJWTEnvelopeSigner()


def test_mint_then_verify_returns_claims(app, signer):
    token, claims = signer.mint(subject_id="user-1", ttl=timedelta(minutes=15))

    verified = signer.verify(token)
    assert verified == claims
    assert verified.subject_id == "user-1"
    assert verified.expires_at - verified.issued_at == timedelta(minutes=15)


def test_each_mint_gets_a_unique_token_id(app, signer):
    ids = {signer.mint(subject_id="user-1", ttl=timedelta(minutes=1))[1].token_id for _ in range(20)}
    assert len(ids) == 20


def test_expired_token_raises_token_expired(app, signer):
    with freeze_time(datetime.now(UTC) - timedelta(hours=1)):
        token, _ = signer.mint(subject_id="user-1", ttl=timedelta(minutes=15))

    with pytest.raises(TokenExpired):
        signer.verify(token)


def test_peek_accepts_expired_token(app, signer):
    with freeze_time(datetime.now(UTC) - timedelta(hours=1)):
        token, claims = signer.mint(subject_id="user-1", ttl=timedelta(minutes=15))

    assert signer.peek(token).token_id == claims.token_id


def test_tampered_signature_is_invalid(app, signer):
    token, _ = signer.mint(subject_id="user-1", ttl=timedelta(minutes=15))
    header, payload, sig = token.split(".")
    tampered = ".".join([header, payload, ("A" if sig[0] != "A" else "B") + sig[1:]])

    with pytest.raises(InvalidToken):
        signer.verify(tampered)


def test_token_signed_with_another_key_is_invalid(app, signer):
    now = datetime.now(UTC)
    forged = pyjwt.encode(
        {"sub": "user-1", "jti": "x", "type": "access", "iat": now, "exp": now + timedelta(minutes=5)},
        "some-other-key-that-is-long-enough-0123456789",
        algorithm="HS256",
    )
    with pytest.raises(InvalidToken):
        signer.verify(forged)


def test_refresh_type_envelope_is_rejected(app, signer):
    token = create_refresh_token(identity="user-1")
    with pytest.raises(InvalidToken):
        signer.verify(token)


@pytest.mark.parametrize("garbage", ["", "abc", "a.b.c", "eyJhbGciOiJIUzI1NiJ9.e30."])
def test_garbage_is_invalid(app, signer, garbage):
    with pytest.raises(InvalidToken):
        signer.verify(garbage)
