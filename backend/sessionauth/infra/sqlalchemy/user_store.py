# sessionauth/infra/sqlalchemy/user_store.py
from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError

from sessionauth.infra.sqlalchemy.errors import translate_store_errors
from sessionauth.models.base import as_utc
from sessionauth.models.user import User
from sessionauth.services._shared.errors import EmailAlreadyRegistered, violates
from sessionauth.services._shared.ports import Identity, NewIdentity, UserStore
from sessionauth.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


def _to_identity(user: User) -> Identity:
    return Identity(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        password_digest=user.password_digest,
        is_active=bool(user.is_active),
        last_login_at=as_utc(user.last_login_at) if user.last_login_at else None,
    )


class SQLAlchemyUserStore(UserStore):
    """``UserStore`` backed by the ``users`` table."""

    def __init__(
        self,
        *,
        rw_uow: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
        ro_uow: Callable[[], SQLAlchemyReadOnlyUnitOfWork] = SQLAlchemyReadOnlyUnitOfWork,
    ) -> None:
        self._rw_uow = rw_uow
        self._ro_uow = ro_uow

    def find_by_email(self, email: str) -> Identity | None:
        with translate_store_errors("users.find_by_email"), self._ro_uow() as uow:
            user = uow.users.get_by_email(email)
            return _to_identity(user) if user is not None else None

    def find_by_id(self, identity_id: str) -> Identity | None:
        with translate_store_errors("users.find_by_id"), self._ro_uow() as uow:
            user = uow.users.get(identity_id)
            if user is None:
                return None
            uow.session.refresh(user)
            return _to_identity(user)

    def create(self, fields: NewIdentity) -> Identity:
        """
        Insert a user row.

        :raises EmailAlreadyRegistered: On the ``uq_users_email`` constraint.
        """
        try:
            with translate_store_errors("users.create"), self._rw_uow() as uow:
                user = uow.users.add(
                    User(
                        email=fields.email,
                        first_name=fields.first_name,
                        last_name=fields.last_name,
                        password_digest=fields.password_digest,
                    )
                )
                uow.session.refresh(user)
                identity = _to_identity(user)
        except IntegrityError as exc:
            if violates(exc, "uq_users_email"):
                raise EmailAlreadyRegistered(fields.email) from exc
            raise
        return identity

    def touch_last_login(self, identity_id: str) -> None:
        with translate_store_errors("users.touch_last_login"), self._rw_uow() as uow:
            uow.users.touch_last_login(identity_id, datetime.now(UTC))

    def update_password_digest(self, identity_id: str, digest: str) -> None:
        with translate_store_errors("users.update_password_digest"), self._rw_uow() as uow:
            uow.users.set_password_digest(identity_id, digest)
