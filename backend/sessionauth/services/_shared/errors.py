"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP directly. They serve as stable contracts between stores,
the token lifecycle core and the credential service.

The translation to HTTP responses (RFC 7807) is handled by
``sessionauth/core/errors.py``.

Taxonomy
--------
- :class:`InvalidCredential`: bad login, bad/used/expired refresh secret.
  Intentionally uninformative to the caller.
- :class:`EmailAlreadyRegistered`: registration conflict.
- :class:`AuthenticationError` and its subclasses: bearer token rejected.
  The subclasses exist for logging only; externally they collapse into a
  single "unauthorized" outcome.
- :class:`TransientError`: store timeout/unavailability, safe to retry.
- :class:`InternalError`: hashing or signing misconfiguration.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Supports PostgreSQL (constraint name lookup). SQLite reports the column
    instead, so ``uq_<table>_<column>`` names are also matched on their
    ``<table>.<column>`` form.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    name = constraint_name.lower()
    if name in message:
        return True
    if name.startswith("uq_"):
        table, _, column = name[3:].partition("_")
        return f"{table}.{column}" in message
    return False


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from stores or domain logic.
    - The API layer translates them to problem+json responses.
    """

    pass


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:  # pragma: no cover
        return f"Conflict on {self.entity}: {self.detail}"


# --------------------------------------------------------------------------- #
# Credential errors
# --------------------------------------------------------------------------- #


class InvalidCredential(ServiceError):
    """Login or refresh rejected. The message never says why."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class EmailAlreadyRegistered(ConflictError):
    """Raised by registration when the email key is taken."""

    def __init__(self, email: str) -> None:
        super().__init__(entity="User", detail="email already registered")
        self.email = email


# --------------------------------------------------------------------------- #
# Bearer token rejection (all collapse to "unauthorized")
# --------------------------------------------------------------------------- #


class AuthenticationError(ServiceError):
    """Base for every reason a bearer access token is refused."""

    reason = "unauthorized"

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class InvalidToken(AuthenticationError):
    """Structural, signature or type failure while decoding the envelope."""

    reason = "invalid_token"


class TokenExpired(AuthenticationError):
    """The envelope is past its ``exp`` claim."""

    reason = "token_expired"


class TokenRevoked(AuthenticationError):
    """The envelope's ``jti`` is on the access token blocklist."""

    reason = "token_revoked"


class IdentityNotFound(AuthenticationError):
    """The envelope's subject no longer resolves to an identity."""

    reason = "identity_not_found"


class IdentityInactive(AuthenticationError):
    """The resolved identity is deactivated."""

    reason = "identity_inactive"


# --------------------------------------------------------------------------- #
# Infrastructure-facing errors
# --------------------------------------------------------------------------- #


class TransientError(ServiceError):
    """A store timed out or was unreachable. Safe for the caller to retry."""

    def __init__(self, message: str = "Store temporarily unavailable") -> None:
        super().__init__(message)


class InternalError(ServiceError):
    """Hashing primitive failure or signing-key misconfiguration."""

    def __init__(self, message: str = "Internal error") -> None:
        super().__init__(message)


# --------------------------------------------------------------------------- #
# Input validation
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """
    A single input problem.

    :param field: Offending field name.
    :param message: Human-readable explanation.
    """

    field: str
    message: str


@dataclass(slots=True)
class ValidationFailed(ServiceError):
    """Raised by the delivery layer when input validation returned issues."""

    issues: list[ValidationIssue] = field(default_factory=list)

    def __str__(self) -> str:  # pragma: no cover
        return f"Validation failed ({len(self.issues)} issue(s))"

    def as_dict(self) -> dict[str, list[str]]:
        """Group messages by field, the shape marshmallow clients expect."""
        grouped: dict[str, list[str]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.field, []).append(issue.message)
        return grouped
