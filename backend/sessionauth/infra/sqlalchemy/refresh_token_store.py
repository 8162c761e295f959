# sessionauth/infra/sqlalchemy/refresh_token_store.py
from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from sessionauth.infra.sqlalchemy.errors import translate_store_errors
from sessionauth.models.base import as_utc
from sessionauth.models.refresh_token import RefreshToken
from sessionauth.services._shared.ports import RefreshTokenRecord, RefreshTokenStore
from sessionauth.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


def _to_record(row: RefreshToken) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        id=row.id,
        secret=row.secret,
        subject_id=row.subject_id,
        expires_at=as_utc(row.expires_at),
        revoked=bool(row.revoked),
        created_at=as_utc(row.created_at) if row.created_at else datetime.now(UTC),
    )


class SQLAlchemyRefreshTokenStore(RefreshTokenStore):
    """
    Refresh token ledger on the ``refresh_tokens`` table.

    Each port call runs in its own Unit of Work. Revocation relies on the
    repository's conditional UPDATE, so two processes racing on the same
    record cannot both observe a successful flip.
    """

    def __init__(
        self,
        *,
        rw_uow: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
        ro_uow: Callable[[], SQLAlchemyReadOnlyUnitOfWork] = SQLAlchemyReadOnlyUnitOfWork,
    ) -> None:
        self._rw_uow = rw_uow
        self._ro_uow = ro_uow

    def insert(self, record: RefreshTokenRecord) -> None:
        with translate_store_errors("refresh.insert"), self._rw_uow() as uow:
            uow.refresh_tokens.add(
                RefreshToken(
                    id=record.id,
                    secret=record.secret,
                    subject_id=record.subject_id,
                    expires_at=record.expires_at,
                    revoked=record.revoked,
                    created_at=record.created_at,
                )
            )

    def find_active_by_secret(self, secret: str) -> RefreshTokenRecord | None:
        with translate_store_errors("refresh.find_active"), self._ro_uow() as uow:
            row = uow.refresh_tokens.get_active_by_secret(secret, datetime.now(UTC))
            return _to_record(row) if row is not None else None

    def mark_revoked(self, record_id: str) -> bool:
        with translate_store_errors("refresh.mark_revoked"), self._rw_uow() as uow:
            return uow.refresh_tokens.revoke_if_active(record_id) == 1

    def mark_all_revoked_for_subject(self, subject_id: str) -> int:
        with translate_store_errors("refresh.mark_all_revoked"), self._rw_uow() as uow:
            return uow.refresh_tokens.revoke_all_for_subject(subject_id)

    def consume_active(self, secret: str) -> RefreshTokenRecord | None:
        with translate_store_errors("refresh.consume"), self._rw_uow() as uow:
            row = uow.refresh_tokens.get_active_by_secret(secret, datetime.now(UTC))
            if row is None:
                return None
            record = _to_record(row)
            if uow.refresh_tokens.revoke_if_active(record.id) != 1:
                return None
            return record

    def get(self, record_id: str) -> RefreshTokenRecord | None:
        with translate_store_errors("refresh.get"), self._ro_uow() as uow:
            row = uow.refresh_tokens.get(record_id)
            if row is None:
                return None
            # The conditional UPDATE bypasses the identity map.
            uow.session.refresh(row)
            return _to_record(row)
