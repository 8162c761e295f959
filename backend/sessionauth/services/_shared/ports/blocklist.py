from __future__ import annotations

import threading
from datetime import UTC, datetime
from typing import Protocol


class AccessTokenBlocklist(Protocol):
    """
    Abstraction for the blocklist of revoked **access tokens** (by ``jti``).

    ``contains`` MUST evaluate expiry at query time: an entry whose
    ``expires_at`` is in the past is reported as absent even when no purge
    has run. ``insert`` is idempotent on duplicate token ids.
    """

    def insert(self, token_id: str, expires_at: datetime) -> None: ...
    def contains(self, token_id: str) -> bool: ...
    def purge_expired(self) -> int: ...


class InMemoryAccessTokenBlocklist(AccessTokenBlocklist):
    """Simple in-memory blocklist for access tokens by JTI."""

    def __init__(self) -> None:
        self._entries: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def insert(self, token_id: str, expires_at: datetime) -> None:
        with self._lock:
            self._entries[token_id] = expires_at

    def contains(self, token_id: str) -> bool:
        with self._lock:
            expires_at = self._entries.get(token_id)
        return expires_at is not None and expires_at >= datetime.now(UTC)

    def purge_expired(self) -> int:
        now = datetime.now(UTC)
        with self._lock:
            dead = [k for k, exp in self._entries.items() if exp < now]
            for k in dead:
                del self._entries[k]
        return len(dead)
