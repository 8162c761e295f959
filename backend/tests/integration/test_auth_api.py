# tests/integration/test_auth_api.py
"""End-to-end checks of the ``/api/v1/auth`` surface through the test client."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time

from sessionauth.core.extensions import db
from sessionauth.models import BlockedToken

BASE = "/api/v1/auth"
PASSWORD = "Str0ng!Pass"


def _register(client, email="alice@example.com", password=PASSWORD):
    return client.post(
        f"{BASE}/register",
        json={"email": email, "first_name": "Alice", "last_name": "Liddell", "password": password},
    )


def _login(client, email="alice@example.com", password=PASSWORD):
    return client.post(f"{BASE}/login", json={"email": email, "password": password})


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def tokens(client):
    assert _register(client).status_code == 201
    resp = _login(client)
    assert resp.status_code == 200
    return resp.get_json()["data"]


# ------------------------------ Registration ------------------------------ #
def test_register_returns_public_identity(client):
    resp = _register(client)

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["user"]["email"] == "alice@example.com"
    assert data["user"]["is_active"] is True
    assert data["expires_in"] == 900
    assert "password" not in data["user"]
    assert "password_digest" not in data["user"]


def test_register_duplicate_email_conflicts(client):
    _register(client)
    resp = _register(client, email="Alice@Example.com")

    assert resp.status_code == 409
    assert resp.get_json()["code"] == "conflict"


def test_register_validation_is_problem_json(client):
    resp = _register(client, password="weak")

    assert resp.status_code == 422
    assert resp.mimetype == "application/problem+json"
    body = resp.get_json()
    assert body["code"] == "validation_error"
    assert "password" in body["details"]["errors"]
    assert body["request_id"] == resp.headers["X-Request-ID"]


def test_malformed_body_is_rejected(client):
    resp = client.post(f"{BASE}/login", data="not json", content_type="application/json")
    assert resp.status_code == 422


# --------------------------------- Login ---------------------------------- #
def test_login_issues_bearer_pair(tokens):
    assert tokens["token_type"] == "bearer"
    assert tokens["expires_in"] == 900
    assert tokens["access_token"].count(".") == 2
    assert tokens["refresh_token"]
    assert tokens["user"]["last_login_at"] is not None


@pytest.mark.parametrize(
    "email,password",
    [("alice@example.com", "Wr0ng!Pass"), ("nobody@example.com", PASSWORD)],
)
def test_bad_login_is_uniform(client, email, password):
    _register(client)
    resp = _login(client, email=email, password=password)

    assert resp.status_code == 401
    body = resp.get_json()
    assert body["code"] == "invalid_credentials"
    assert body["detail"] == "Invalid credentials"


# -------------------------------- Profile --------------------------------- #
def test_profile_requires_bearer(client):
    resp = client.get(f"{BASE}/profile")
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "unauthorized"


def test_profile_with_garbage_token(client):
    resp = client.get(f"{BASE}/profile", headers=_bearer("garbage"))
    assert resp.status_code == 401


def test_profile_returns_identity(client, tokens):
    resp = client.get(f"{BASE}/profile", headers=_bearer(tokens["access_token"]))

    assert resp.status_code == 200
    assert resp.get_json()["data"]["email"] == "alice@example.com"


# --------------------------- Refresh and logout --------------------------- #
def test_refresh_rotates_and_old_secret_dies(client, tokens):
    resp = client.post(f"{BASE}/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert resp.status_code == 200
    rotated = resp.get_json()["data"]
    assert rotated["refresh_token"] != tokens["refresh_token"]

    replay = client.post(f"{BASE}/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert replay.status_code == 401
    assert replay.get_json()["code"] == "invalid_credentials"

    profile = client.get(f"{BASE}/profile", headers=_bearer(rotated["access_token"]))
    assert profile.status_code == 200


def test_logout_revokes_access_and_refresh(client, tokens):
    resp = client.post(f"{BASE}/logout", headers=_bearer(tokens["access_token"]))
    assert resp.status_code == 200

    profile = client.get(f"{BASE}/profile", headers=_bearer(tokens["access_token"]))
    assert profile.status_code == 401

    refresh = client.post(f"{BASE}/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refresh.status_code == 401


def test_logout_is_repeatable_with_the_same_token(client, tokens):
    first = client.post(f"{BASE}/logout", headers=_bearer(tokens["access_token"]))
    second = client.post(f"{BASE}/logout", headers=_bearer(tokens["access_token"]))

    assert first.status_code == 200
    assert second.status_code == 200


def test_logout_accepts_expired_access_token(client):
    _register(client)
    with freeze_time(datetime.now(UTC)) as frozen:
        data = _login(client).get_json()["data"]
        frozen.tick(timedelta(minutes=16))

        profile = client.get(f"{BASE}/profile", headers=_bearer(data["access_token"]))
        assert profile.status_code == 401

        resp = client.post(f"{BASE}/logout", headers=_bearer(data["access_token"]))
        assert resp.status_code == 200

    refresh = client.post(f"{BASE}/refresh", json={"refresh_token": data["refresh_token"]})
    assert refresh.status_code == 401


def test_logout_rejects_garbage_token(client):
    resp = client.post(f"{BASE}/logout", headers=_bearer("garbage"))
    assert resp.status_code == 401


# ------------------------------- Operations ------------------------------- #
def test_health(client):
    resp = client.get("/api/v1/health")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert body["db"] == "ok"
    assert body["blocklist_backend"] == "database"


def test_cli_purges_expired_blocklist_entries(app, session):
    now = datetime.now(UTC)
    session.add_all(
        [
            BlockedToken(token_id="stale", expires_at=now - timedelta(minutes=1)),
            BlockedToken(token_id="live", expires_at=now + timedelta(minutes=5)),
        ]
    )
    session.flush()

    result = app.test_cli_runner().invoke(args=["tokens", "purge-blocklist"])

    assert result.exit_code == 0, result.output
    assert "Removed 1 expired blocklist entries." in result.output
    assert db.session.get(BlockedToken, "live") is not None


def test_cli_revokes_subject(app, client, tokens):
    result = app.test_cli_runner().invoke(args=["tokens", "revoke-subject", tokens["user"]["id"]])

    assert result.exit_code == 0, result.output
    assert "Revoked 1 refresh token(s)" in result.output
    refresh = client.post(f"{BASE}/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refresh.status_code == 401
