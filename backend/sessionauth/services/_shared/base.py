# sessionauth/services/_shared/base.py
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (request ids, clock).

    :param request_id: Correlation id for logging/tracing.
    :param clock: Callable returning the current aware UTC time.
    """

    request_id: str | None = None
    clock: Callable[[], datetime] | None = None


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide a single clock so token timestamps stay consistent.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services never touch a session or a Unit of Work directly; storage is
      reached through the ports injected at construction time.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context.
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx or ServiceContext()

    def now(self) -> datetime:
        """
        Current aware UTC time, from the context clock when one is set.

        :rtype: datetime
        """
        clock = self.ctx.clock or utcnow
        return clock()
