"""User model definition for the identity service."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, UniqueConstraint, true
from sqlalchemy.orm import Mapped, mapped_column, validates

from sessionauth.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin


class User(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity.

    The password itself never reaches this model: callers store the digest
    produced by the configured password hasher.

    Fields
    ------
    email : str
        Login email. Stored normalized (lowercase, trimmed). Unique.
    first_name : str
        Given name.
    last_name : str
        Family name.
    password_digest : str
        Self-describing argon2 digest.
    is_active : bool
        Deactivated users can neither log in nor authenticate.
    last_login_at : datetime | None
        Timestamp of the last successful login.
    """

    __tablename__ = "users"

    # Columns
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    password_digest: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Constraints & indexes
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :param key: Field name (``email``).
        :type key: str
        :param value: Email to normalize.
        :type value: str
        :returns: Normalized email (lowercased/trimmed).
        :rtype: str
        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens before the core.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("first_name", "last_name")
    def _normalize_name(self, key: str, value: str) -> str:
        """
        Trim and require a non-blank name.

        :raises ValueError: If the name is missing or only whitespace.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{key} is required.")
        return value.strip()
