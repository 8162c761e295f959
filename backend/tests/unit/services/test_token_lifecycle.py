# tests/unit/services/test_token_lifecycle.py
from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time

from sessionauth.services._shared.errors import InvalidCredential, TransientError
from sessionauth.services.tokens.dto import CredentialPair


# -------------------------------- Issuance -------------------------------- #
def test_issue_pair_persists_active_refresh_record(tokens, refresh_store):
    pair = tokens.issue_pair("user-1")

    assert isinstance(pair, CredentialPair)
    record = refresh_store.find_active_by_secret(pair.refresh_token)
    assert record is not None
    assert record.subject_id == "user-1"
    assert record.revoked is False
    assert pair.access_claims.subject_id == "user-1"


def test_issue_pair_uses_configured_lifetimes(tokens, refresh_store):
    pair = tokens.issue_pair("user-1")
    claims = pair.access_claims
    record = refresh_store.find_active_by_secret(pair.refresh_token)

    assert claims.expires_at - claims.issued_at == timedelta(minutes=15)
    assert record.expires_at - record.created_at == timedelta(days=7)


def test_refresh_secret_is_long_and_random(tokens):
    secrets_seen = {tokens.issue_pair("user-1").refresh_token for _ in range(10)}
    assert len(secrets_seen) == 10
    # 32 random bytes, base64url without padding
    assert all(len(s) >= 43 for s in secrets_seen)


def test_issue_pair_keeps_prior_records_for_other_devices(tokens, refresh_store):
    first = tokens.issue_pair("user-1")
    second = tokens.issue_pair("user-1")

    assert refresh_store.find_active_by_secret(first.refresh_token) is not None
    assert refresh_store.find_active_by_secret(second.refresh_token) is not None
    assert first.access_claims.token_id != second.access_claims.token_id


# -------------------------------- Rotation -------------------------------- #
def test_rotate_returns_new_pair_and_kills_old_secret(tokens, refresh_store):
    pair = tokens.issue_pair("user-1")
    old = refresh_store.find_active_by_secret(pair.refresh_token)

    rotated = tokens.rotate(pair.refresh_token)

    assert rotated.refresh_token != pair.refresh_token
    assert rotated.access_claims.subject_id == "user-1"
    assert refresh_store.get(old.id).revoked is True
    with pytest.raises(InvalidCredential):
        tokens.rotate(pair.refresh_token)


@pytest.mark.parametrize("secret", ["", "unknown-secret"])
def test_rotate_unknown_secret_is_invalid_credential(tokens, secret):
    with pytest.raises(InvalidCredential):
        tokens.rotate(secret)


def test_rotate_expired_secret_is_invalid_credential(tokens):
    with freeze_time(datetime.now(UTC)) as frozen:
        pair = tokens.issue_pair("user-1")
        frozen.tick(timedelta(days=7, seconds=1))
        with pytest.raises(InvalidCredential):
            tokens.rotate(pair.refresh_token)


def test_rotate_revoked_secret_is_invalid_credential(tokens):
    pair = tokens.issue_pair("user-1")
    tokens.revoke_all_for_subject("user-1")
    with pytest.raises(InvalidCredential):
        tokens.rotate(pair.refresh_token)


def test_concurrent_rotation_has_exactly_one_winner(app, tokens):
    pair = tokens.issue_pair("user-1")
    n = 8
    barrier = threading.Barrier(n)
    outcomes: list[str] = []
    lock = threading.Lock()

    def worker():
        # flask-jwt-extended needs an app context per thread
        with app.app_context():
            barrier.wait()
            try:
                tokens.rotate(pair.refresh_token)
                result = "ok"
            except InvalidCredential:
                result = "rejected"
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker) for _ in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("rejected") == n - 1


# -------------------------------- Revocation ------------------------------ #
def test_revoke_all_for_subject_is_idempotent(tokens):
    tokens.issue_pair("user-1")
    tokens.issue_pair("user-1")

    assert tokens.revoke_all_for_subject("user-1") == 2
    assert tokens.revoke_all_for_subject("user-1") == 0


def test_block_access_token_until_expiry(tokens):
    with freeze_time(datetime.now(UTC)) as frozen:
        pair = tokens.issue_pair("user-1")
        tokens.block_access_token(pair.access_claims)
        tokens.block_access_token(pair.access_claims)  # duplicate is harmless
        assert tokens.is_blocked(pair.access_claims.token_id) is True

        frozen.tick(timedelta(minutes=15, seconds=1))
        assert tokens.is_blocked(pair.access_claims.token_id) is False


# --------------------------------- Logout --------------------------------- #
def test_logout_revokes_refresh_chain_and_blocks_access_token(tokens, refresh_store):
    pair = tokens.issue_pair("user-1")
    other_device = tokens.issue_pair("user-1")

    assert tokens.logout("user-1", pair.access_token) is True

    assert tokens.is_blocked(pair.access_claims.token_id) is True
    assert refresh_store.find_active_by_secret(pair.refresh_token) is None
    assert refresh_store.find_active_by_secret(other_device.refresh_token) is None


def test_logout_twice_is_harmless(tokens):
    pair = tokens.issue_pair("user-1")
    assert tokens.logout("user-1", pair.access_token) is True
    assert tokens.logout("user-1", pair.access_token) is True
    assert tokens.is_blocked(pair.access_claims.token_id) is True


def test_logout_with_undecodable_token_still_revokes_refresh(tokens, refresh_store):
    pair = tokens.issue_pair("user-1")

    assert tokens.logout("user-1", "garbage") is False
    assert refresh_store.find_active_by_secret(pair.refresh_token) is None


def test_logout_accepts_an_already_expired_access_token(tokens, refresh_store):
    with freeze_time(datetime.now(UTC)) as frozen:
        pair = tokens.issue_pair("user-1")
        frozen.tick(timedelta(minutes=16))
        assert tokens.logout("user-1", pair.access_token) is True
        assert refresh_store.find_active_by_secret(pair.refresh_token) is None


def test_logout_ignores_token_of_another_subject(tokens):
    foreign = tokens.issue_pair("user-2")
    assert tokens.logout("user-1", foreign.access_token) is False
    assert tokens.is_blocked(foreign.access_claims.token_id) is False


def test_logout_blocklist_failure_is_soft(tokens, blocklist, monkeypatch, caplog):
    pair = tokens.issue_pair("user-1")

    def _down(*args, **kwargs):
        raise TransientError()

    monkeypatch.setattr(blocklist, "insert", _down)

    with caplog.at_level("WARNING"):
        assert tokens.logout("user-1", pair.access_token) is False
    assert "could not block access token" in caplog.text
    assert pair.access_token not in caplog.text


def test_logout_refresh_failure_is_raised_after_blocking(tokens, refresh_store, monkeypatch):
    pair = tokens.issue_pair("user-1")

    def _down(*args, **kwargs):
        raise TransientError()

    monkeypatch.setattr(refresh_store, "mark_all_revoked_for_subject", _down)

    with pytest.raises(TransientError):
        tokens.logout("user-1", pair.access_token)
    assert tokens.is_blocked(pair.access_claims.token_id) is True
