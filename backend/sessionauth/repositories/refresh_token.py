"""Refresh token ledger repository."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import select, update

from sessionauth.models.refresh_token import RefreshToken
from sessionauth.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken`.

    Revocation helpers are conditional UPDATEs guarded by ``revoked = false``;
    the returned row count tells the caller whether *it* performed the flip.
    """

    model = RefreshToken

    def get_active_by_secret(self, secret: str, now: datetime) -> RefreshToken | None:
        """Exact-match lookup restricted to non-revoked, non-expired rows.

        :param secret: Presented refresh secret.
        :param now: Reference time for the expiry check.
        :returns: Matching row or ``None``.
        """
        stmt = select(RefreshToken).where(
            RefreshToken.secret == secret,
            RefreshToken.revoked.is_(False),
            RefreshToken.expires_at > now,
        )
        result = self.session.execute(stmt).scalars().first()
        return cast(RefreshToken | None, result)

    def revoke_if_active(self, record_id: str) -> int:
        """``UPDATE refresh_tokens SET revoked = true WHERE id = :id AND revoked = false``.

        :returns: ``1`` for the single winning caller, ``0`` otherwise.
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.id == record_id, RefreshToken.revoked.is_(False))
            .values(revoked=True)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount

    def revoke_all_for_subject(self, subject_id: str) -> int:
        """Revoke every non-revoked row of a subject.

        :returns: Number of rows flipped by this call.
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.subject_id == subject_id, RefreshToken.revoked.is_(False))
            .values(revoked=True)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount
