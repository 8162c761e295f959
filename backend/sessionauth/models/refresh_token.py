"""Refresh token ledger model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, UniqueConstraint, false, func
from sqlalchemy.orm import Mapped, mapped_column

from sessionauth.core.extensions import db

from .base import ReprMixin, UUIDPKMixin


class RefreshToken(UUIDPKMixin, ReprMixin, db.Model):
    """
    One issued refresh token.

    ``revoked`` flips to true exactly once (rotation or revocation) and is
    never unset. Rows are not deleted by the service; retention is an
    out-of-band concern.

    Fields
    ------
    secret : str
        Opaque random secret, looked up by exact match only. Unique.
    subject_id : str
        Owning user (``users.id``), cascade-deleted with the user.
    expires_at : datetime
        Absolute expiry.
    revoked : bool
        Revocation flag.
    created_at : datetime
        Issuance timestamp.
    """

    __tablename__ = "refresh_tokens"

    secret: Mapped[str] = mapped_column(String(128), nullable=False)
    subject_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("secret", name="uq_refresh_tokens_secret"),
        Index("ix_refresh_tokens_subject_id", "subject_id"),
    )
