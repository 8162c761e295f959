"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    IdentitySchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshResponseSchema,
    RefreshSchema,
    RegisterSchema,
    RegistrationResponseSchema,
)

__all__ = [
    "IdentitySchema",
    "LoginResponseSchema",
    "LoginSchema",
    "RefreshResponseSchema",
    "RefreshSchema",
    "RegisterSchema",
    "RegistrationResponseSchema",
]
