# tests/unit/services/test_validation.py
from __future__ import annotations

import pytest

from sessionauth.services._shared.errors import ValidationFailed
from sessionauth.services.credentials.dto import LoginIn, RegisterIn
from sessionauth.services.validation import (
    load_login,
    load_refresh_token,
    load_registration,
    validate_login,
    validate_refresh,
    validate_registration,
)

VALID_REGISTRATION = {
    "email": "alice@example.com",
    "first_name": "Alice",
    "last_name": "Liddell",
    "password": "Str0ng!Pass",
}


def _fields(issues):
    return {issue.field for issue in issues}


def test_valid_registration_has_no_issues():
    assert validate_registration(VALID_REGISTRATION) == []
    assert load_registration(VALID_REGISTRATION) == RegisterIn(**VALID_REGISTRATION)


def test_eight_character_password_is_enough():
    assert validate_registration({**VALID_REGISTRATION, "password": "short1!A"}) == []


@pytest.mark.parametrize(
    "password",
    [
        "Sh0rt!",  # too short
        "alllower1!",  # no upper case
        "ALLUPPER1!",  # no lower case
        "NoDigits!!",  # no digit
        "NoSpecial11",  # no special character
        "Has Space1!",  # character outside the allowed set
    ],
)
def test_weak_passwords_are_rejected(password):
    issues = validate_registration({**VALID_REGISTRATION, "password": password})
    assert _fields(issues) == {"password"}


def test_missing_fields_are_all_reported():
    issues = validate_registration({})
    assert _fields(issues) == {"email", "first_name", "last_name", "password"}


def test_bad_email_and_short_name():
    issues = validate_registration({**VALID_REGISTRATION, "email": "nope", "first_name": "A"})
    assert _fields(issues) == {"email", "first_name"}


def test_unknown_keys_are_ignored():
    assert validate_registration({**VALID_REGISTRATION, "is_admin": True}) == []


def test_non_object_payload_is_rejected():
    assert validate_login(["alice@example.com"]) != []
    assert validate_login(None) != []


def test_load_login_raises_with_grouped_messages():
    with pytest.raises(ValidationFailed) as exc_info:
        load_login({"email": "alice@example.com"})
    assert set(exc_info.value.as_dict()) == {"password"}


def test_load_login_returns_dto():
    assert load_login({"email": "a@example.com", "password": "x"}) == LoginIn(
        email="a@example.com", password="x"
    )


def test_refresh_requires_token():
    assert _fields(validate_refresh({})) == {"refresh_token"}
    assert load_refresh_token({"refresh_token": "abc"}) == "abc"
    with pytest.raises(ValidationFailed):
        load_refresh_token({"refresh_token": ""})
