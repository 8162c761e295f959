# sessionauth/infra/sqlalchemy/errors.py
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from sessionauth.services._shared.errors import TransientError

log = logging.getLogger(__name__)


@contextmanager
def translate_store_errors(operation: str) -> Iterator[None]:
    """
    Map connectivity failures raised inside a store operation to ``TransientError``.

    Pool checkout timeouts, dropped connections and operational errors are
    retryable. Everything else (integrity, programming errors) propagates
    unchanged.

    :param operation: Short label used in the warning log (e.g. ``"refresh.insert"``).
    """
    try:
        yield
    except (PoolTimeoutError, OperationalError, InterfaceError) as exc:
        log.warning("Store operation %s unavailable: %s", operation, type(exc).__name__)
        raise TransientError() from exc
    except DBAPIError as exc:
        if not exc.connection_invalidated:
            raise
        log.warning("Store operation %s lost its connection", operation)
        raise TransientError() from exc
