from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from sessionauth.services._shared.errors import EmailAlreadyRegistered


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Identity record as seen by the credential core.

    :ivar id: Identity identifier (UUID string).
    :ivar email: Unique, normalized login email.
    :ivar first_name: Given name.
    :ivar last_name: Family name.
    :ivar password_digest: Self-describing password digest (never exposed).
    :ivar is_active: Deactivated identities cannot log in or authenticate.
    :ivar last_login_at: Last successful login (UTC), if any.
    """

    id: str
    email: str
    first_name: str
    last_name: str
    password_digest: str = field(repr=False)
    is_active: bool = True
    last_login_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class NewIdentity:
    """
    Fields required to create an identity.

    :ivar email: Login email (normalized by the store).
    :ivar first_name: Given name.
    :ivar last_name: Family name.
    :ivar password_digest: Digest produced by the password hasher.
    """

    email: str
    first_name: str
    last_name: str
    password_digest: str = field(repr=False)


class UserStore(Protocol):
    """Key-value style identity lookup; the email key is unique."""

    def find_by_email(self, email: str) -> Identity | None: ...
    def find_by_id(self, identity_id: str) -> Identity | None: ...

    def create(self, fields: NewIdentity) -> Identity:
        """
        Insert a new identity.

        :raises EmailAlreadyRegistered: When the email key already exists.
        """
        ...

    def touch_last_login(self, identity_id: str) -> None: ...
    def update_password_digest(self, identity_id: str, digest: str) -> None: ...


class InMemoryUserStore(UserStore):
    """Dict-backed identity store keyed by normalized email."""

    def __init__(self) -> None:
        self._by_id: dict[str, Identity] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(email: str) -> str:
        return email.strip().lower()

    def find_by_email(self, email: str) -> Identity | None:
        key = self._key(email)
        with self._lock:
            return next((i for i in self._by_id.values() if i.email == key), None)

    def find_by_id(self, identity_id: str) -> Identity | None:
        with self._lock:
            return self._by_id.get(identity_id)

    def create(self, fields: NewIdentity) -> Identity:
        key = self._key(fields.email)
        with self._lock:
            if any(i.email == key for i in self._by_id.values()):
                raise EmailAlreadyRegistered(fields.email)
            identity = Identity(
                id=str(uuid4()),
                email=key,
                first_name=fields.first_name.strip(),
                last_name=fields.last_name.strip(),
                password_digest=fields.password_digest,
            )
            self._by_id[identity.id] = identity
            return identity

    def touch_last_login(self, identity_id: str) -> None:
        with self._lock:
            identity = self._by_id.get(identity_id)
            if identity is not None:
                self._by_id[identity_id] = replace(identity, last_login_at=datetime.now(UTC))

    def update_password_digest(self, identity_id: str, digest: str) -> None:
        with self._lock:
            identity = self._by_id.get(identity_id)
            if identity is not None:
                self._by_id[identity_id] = replace(identity, password_digest=digest)

    def deactivate(self, identity_id: str) -> None:
        """Flip ``is_active`` off (test and admin helper)."""
        with self._lock:
            identity = self._by_id[identity_id]
            self._by_id[identity_id] = replace(identity, is_active=False)
