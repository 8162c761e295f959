# sessionauth/infra/sqlalchemy/blocklist.py
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from sessionauth.infra.sqlalchemy.errors import translate_store_errors
from sessionauth.services._shared.ports import AccessTokenBlocklist
from sessionauth.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


class SQLAlchemyAccessTokenBlocklist(AccessTokenBlocklist):
    """
    Access token blocklist on the ``blocked_tokens`` table.

    Entries are keyed by ``jti``; lookups ignore rows past ``expires_at`` so
    correctness never depends on :meth:`purge_expired` having run.
    """

    def __init__(
        self,
        *,
        rw_uow: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
        ro_uow: Callable[[], SQLAlchemyReadOnlyUnitOfWork] = SQLAlchemyReadOnlyUnitOfWork,
    ) -> None:
        self._rw_uow = rw_uow
        self._ro_uow = ro_uow

    def insert(self, token_id: str, expires_at: datetime) -> None:
        with translate_store_errors("blocklist.insert"), self._rw_uow() as uow:
            uow.blocked_tokens.upsert(token_id, expires_at)

    def contains(self, token_id: str) -> bool:
        with translate_store_errors("blocklist.contains"), self._ro_uow() as uow:
            return uow.blocked_tokens.is_blocked(token_id, datetime.now(UTC))

    def purge_expired(self) -> int:
        with translate_store_errors("blocklist.purge"), self._rw_uow() as uow:
            removed = uow.blocked_tokens.delete_expired(datetime.now(UTC))
        log.info("Purged %d expired blocklist entries", removed)
        return removed
