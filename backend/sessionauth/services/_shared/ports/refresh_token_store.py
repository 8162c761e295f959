from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Ledger entry for one issued refresh token.

    :ivar id: Internal record identifier.
    :ivar secret: Opaque random secret handed to the client (never logged).
    :ivar subject_id: Owner identity id.
    :ivar expires_at: Absolute expiration (UTC).
    :ivar revoked: Flips to ``True`` once, on rotation or revocation.
    :ivar created_at: Issuance timestamp (UTC).
    """

    id: str
    secret: str = field(repr=False)
    subject_id: str
    expires_at: datetime
    revoked: bool
    created_at: datetime

    def is_active(self, now: datetime) -> bool:
        """Return ``True`` when the record can still be rotated at ``now``."""
        return not self.revoked and self.expires_at > now


class RefreshTokenStore(Protocol):
    """
    Persistent ledger of refresh tokens.

    ``mark_revoked`` MUST be a conditional update guarded by ``revoked=false``
    so that exactly one concurrent caller observes ``True`` for a given id.
    """

    def insert(self, record: RefreshTokenRecord) -> None:
        """Persist a brand-new, non-revoked record."""

    def find_active_by_secret(self, secret: str) -> RefreshTokenRecord | None:
        """Return the record with this exact secret if not revoked and not expired."""

    def mark_revoked(self, record_id: str) -> bool:
        """
        Flip ``revoked`` to true if it is still false.

        :returns: ``True`` only for the caller that performed the flip.
        """

    def mark_all_revoked_for_subject(self, subject_id: str) -> int:
        """
        Revoke every non-revoked record of a subject.

        :returns: Number of records affected (``0`` when re-invoked).
        """

    def consume_active(self, secret: str) -> RefreshTokenRecord | None:
        """
        Atomically look up an active record by secret and revoke it.

        :returns: The record as it was before revocation, or ``None`` when the
            secret is unknown, revoked, expired, or lost a concurrent race.
        """

    def get(self, record_id: str) -> RefreshTokenRecord | None:
        """Fetch a single record snapshot (if present)."""


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh token ledger.

    .. note::
       Uses a threading lock to provide the conditional-update guarantee.
    """

    def __init__(self) -> None:
        self._by_id: dict[str, RefreshTokenRecord] = {}
        self._id_by_secret: dict[str, str] = {}
        self._lock = threading.Lock()

    # ------------------------- helpers -------------------------

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    def _find_active(self, secret: str) -> RefreshTokenRecord | None:
        record_id = self._id_by_secret.get(secret)
        if record_id is None:
            return None
        record = self._by_id[record_id]
        return record if record.is_active(self._now()) else None

    def _flip(self, record_id: str) -> bool:
        record = self._by_id.get(record_id)
        if record is None or record.revoked:
            return False
        self._by_id[record_id] = replace(record, revoked=True)
        return True

    # -------------------------- API ----------------------------

    def insert(self, record: RefreshTokenRecord) -> None:
        with self._lock:
            if record.secret in self._id_by_secret:
                raise ValueError("Refresh secret already present.")
            self._by_id[record.id] = record
            self._id_by_secret[record.secret] = record.id

    def find_active_by_secret(self, secret: str) -> RefreshTokenRecord | None:
        with self._lock:
            return self._find_active(secret)

    def mark_revoked(self, record_id: str) -> bool:
        with self._lock:
            return self._flip(record_id)

    def mark_all_revoked_for_subject(self, subject_id: str) -> int:
        with self._lock:
            ids = [
                r.id for r in self._by_id.values() if r.subject_id == subject_id and not r.revoked
            ]
            return sum(1 for record_id in ids if self._flip(record_id))

    def consume_active(self, secret: str) -> RefreshTokenRecord | None:
        with self._lock:
            record = self._find_active(secret)
            if record is None or not self._flip(record.id):
                return None
            return record

    def get(self, record_id: str) -> RefreshTokenRecord | None:
        with self._lock:
            return self._by_id.get(record_id)
