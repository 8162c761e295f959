"""Access token blocklist repository."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from sessionauth.models.blocked_token import BlockedToken
from sessionauth.repositories.base import BaseRepository


class BlockedTokenRepository(BaseRepository[BlockedToken]):
    """Persistence-only repository for :class:`BlockedToken`."""

    model = BlockedToken

    def _pk_attr(self):
        return BlockedToken.token_id

    def upsert(self, token_id: str, expires_at: datetime) -> None:
        """Insert or overwrite the entry for ``token_id``.

        A concurrent insert of the same id loses inside a SAVEPOINT; the
        result is the same dead entry either way.
        """
        existing = self.session.get(BlockedToken, token_id)
        if existing is not None:
            existing.expires_at = expires_at
            self.flush()
            return
        try:
            with self.session.begin_nested():
                self.session.add(BlockedToken(token_id=token_id, expires_at=expires_at))
        except IntegrityError:
            return

    def is_blocked(self, token_id: str, now: datetime) -> bool:
        """Return ``True`` when a non-expired entry exists for ``token_id``."""
        stmt = select(BlockedToken.token_id).where(
            BlockedToken.token_id == token_id,
            BlockedToken.expires_at >= now,
        )
        return self.session.execute(stmt).first() is not None

    def delete_expired(self, now: datetime) -> int:
        """Physically remove entries whose ``expires_at`` is before ``now``."""
        stmt = (
            delete(BlockedToken)
            .where(BlockedToken.expires_at < now)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount
