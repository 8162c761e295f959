# sessionauth/services/validation.py
"""
Pure input validation for the credential use cases.

Each ``validate_*`` function returns a (possibly empty) list of
:class:`ValidationIssue`; ``load_*`` helpers raise :class:`ValidationFailed`
instead and return the input DTO. Neither touches storage.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from marshmallow import Schema, ValidationError

from sessionauth.schemas.auth import LoginSchema, RefreshSchema, RegisterSchema
from sessionauth.services._shared.errors import ValidationFailed, ValidationIssue
from sessionauth.services.credentials.dto import LoginIn, RegisterIn

_register = RegisterSchema()
_login = LoginSchema()
_refresh = RefreshSchema()


def _flatten(messages: Any, prefix: str = "") -> list[ValidationIssue]:
    """Turn marshmallow's nested ``{field: [msg, ...]}`` into a flat issue list."""
    if isinstance(messages, Mapping):
        issues: list[ValidationIssue] = []
        for key, value in messages.items():
            name = f"{prefix}.{key}" if prefix else str(key)
            issues.extend(_flatten(value, name))
        return issues
    if isinstance(messages, list | tuple):
        return [ValidationIssue(field=prefix or "_schema", message=str(m)) for m in messages]
    return [ValidationIssue(field=prefix or "_schema", message=str(messages))]


def _run(schema: Schema, payload: Any) -> tuple[dict[str, Any], list[ValidationIssue]]:
    try:
        return schema.load(payload if payload is not None else {}), []
    except ValidationError as err:
        return {}, _flatten(err.messages)


def validate_registration(payload: Any) -> list[ValidationIssue]:
    return _run(_register, payload)[1]


def validate_login(payload: Any) -> list[ValidationIssue]:
    return _run(_login, payload)[1]


def validate_refresh(payload: Any) -> list[ValidationIssue]:
    return _run(_refresh, payload)[1]


def load_registration(payload: Any) -> RegisterIn:
    """
    :raises ValidationFailed: With every issue found.
    """
    data, issues = _run(_register, payload)
    if issues:
        raise ValidationFailed(issues)
    return RegisterIn(**data)


def load_login(payload: Any) -> LoginIn:
    data, issues = _run(_login, payload)
    if issues:
        raise ValidationFailed(issues)
    return LoginIn(**data)


def load_refresh_token(payload: Any) -> str:
    data, issues = _run(_refresh, payload)
    if issues:
        raise ValidationFailed(issues)
    return data["refresh_token"]
