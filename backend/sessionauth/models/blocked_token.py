"""Blocklisted access token model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from sessionauth.core.extensions import db


class BlockedToken(db.Model):
    """
    Revoked access token, keyed by its ``jti``.

    Rows past ``expires_at`` are logically dead; lookups filter them out and
    the purge command removes them.
    """

    __tablename__ = "blocked_tokens"

    token_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("ix_blocked_tokens_expires_at", "expires_at"),)

    def __repr__(self) -> str:
        return f"<BlockedToken token_id={self.token_id}>"
