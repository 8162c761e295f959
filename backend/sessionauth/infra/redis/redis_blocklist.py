import math
from datetime import UTC, datetime
from typing import cast

import redis  # type: ignore[import-untyped]

from sessionauth.services._shared.errors import TransientError
from sessionauth.services._shared.ports import AccessTokenBlocklist


class RedisAccessTokenBlocklist(AccessTokenBlocklist):
    """
    Blocklist for **access tokens** by jti.

    Each entry is a marker key whose TTL matches the token's remaining
    lifetime, so Redis evicts it on expiry and no purge is ever needed.
    """

    def __init__(self, r: redis.Redis):
        self.r = r

    @staticmethod
    def _k(jti: str) -> str:
        return f"blocked:at:{jti}"

    def insert(self, token_id: str, expires_at: datetime) -> None:
        if expires_at <= datetime.now(UTC):
            return
        # absolute expiry rounded up: the key must not vanish before the token's exp
        exat = math.ceil(expires_at.timestamp())
        try:
            self.r.set(self._k(token_id), "1", exat=exat)
        except redis.RedisError as exc:
            raise TransientError() from exc

    def contains(self, token_id: str) -> bool:
        try:
            return cast(int, self.r.exists(self._k(token_id))) == 1
        except redis.RedisError as exc:
            raise TransientError() from exc

    def purge_expired(self) -> int:
        """Nothing to sweep: expired keys are evicted by Redis itself."""
        return 0
