from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol


@dataclass(frozen=True, slots=True)
class AccessClaims:
    """
    Verified content of an access token envelope.

    :ivar subject_id: Identity the token was minted for (``sub``).
    :ivar token_id: Unique id per mint (``jti``), the blocklist key.
    :ivar issued_at: ``iat`` claim (UTC).
    :ivar expires_at: ``exp`` claim (UTC).
    """

    subject_id: str
    token_id: str
    issued_at: datetime
    expires_at: datetime


class EnvelopeSigner(Protocol):
    """Port for minting and verifying signed access token envelopes."""

    def mint(self, *, subject_id: str, ttl: timedelta) -> tuple[str, AccessClaims]:
        """
        Seal a new access token with a fresh ``jti``.

        :returns: The encoded envelope and the claims it carries.
        """
        ...

    def verify(self, token: str) -> AccessClaims:
        """
        Check signature, structure, type and expiry.

        :raises InvalidToken: On any structural or signature failure.
        :raises TokenExpired: When past ``exp``.
        """
        ...

    def peek(self, token: str) -> AccessClaims:
        """
        Like :meth:`verify` but tolerate an elapsed ``exp``.

        Used by logout to blocklist a token that may have just expired.

        :raises InvalidToken: On any structural or signature failure.
        """
        ...
