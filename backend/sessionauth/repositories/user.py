"""User repository for identity persistence."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import select, update

from sessionauth.models.user import User
from sessionauth.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    This repository focuses on safe lookup and identity bookkeeping.
    It NEVER handles password hashing or token creation.
    """

    model = User

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.lower().strip())
        stmt = self._default_eagerload(stmt)
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    # ---------------------------- Bookkeeping ----------------------------

    def touch_last_login(self, user_id: str, at: datetime) -> int:
        """Stamp ``last_login_at`` with a single UPDATE.

        :returns: Number of rows affected (``0`` for an unknown id).
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(last_login_at=at)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount

    def set_password_digest(self, user_id: str, digest: str) -> int:
        """Replace the stored password digest.

        :returns: Number of rows affected (``0`` for an unknown id).
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(password_digest=digest)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount
