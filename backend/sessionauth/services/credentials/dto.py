# sessionauth/services/credentials/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from sessionauth.services._shared.ports import Identity

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param email: User email (normalized by the store).
    :param first_name: Given name.
    :param last_name: Family name.
    :param password: Raw password (hashed before storage).
    """

    email: str
    first_name: str
    last_name: str
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str = field(repr=False)


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class IdentityPublicOut:
    """Identity as exposed to clients (no digest)."""

    id: str
    email: str
    first_name: str
    last_name: str
    is_active: bool
    last_login_at: datetime | None = None

    @classmethod
    def from_identity(cls, identity: Identity) -> IdentityPublicOut:
        return cls(
            id=identity.id,
            email=identity.email,
            first_name=identity.first_name,
            last_name=identity.last_name,
            is_active=identity.is_active,
            last_login_at=identity.last_login_at,
        )


@dataclass(frozen=True, slots=True)
class RegistrationOut:
    """
    Result of a successful registration.

    Registration does not sign the user in; ``access_token_expiry_seconds``
    tells clients the lifetime their next login will get.
    """

    identity: IdentityPublicOut
    access_token_expiry_seconds: int


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    Result of a successful login.

    :param access_token: Encoded access JWT.
    :param refresh_token: Opaque refresh secret.
    :param identity: Public view of the signed-in identity.
    :param access_token_expiry_seconds: Access token lifetime.
    """

    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
    identity: IdentityPublicOut
    access_token_expiry_seconds: int


@dataclass(frozen=True, slots=True)
class RefreshOut:
    """Result of a refresh token rotation."""

    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
    access_token_expiry_seconds: int
