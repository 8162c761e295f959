# sessionauth/services/tokens/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from sessionauth.services._shared.ports import AccessClaims

# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class CredentialPair:
    """
    Freshly issued access + refresh credentials.

    Never persisted as a unit: the refresh half lives in the ledger, the
    access half is self-contained.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Opaque refresh secret.
    :type refresh_token: str
    :param access_claims: Claims sealed in ``access_token``.
    :type access_claims: AccessClaims
    """

    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
    access_claims: AccessClaims


# ---------------------------- Config DTO ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPolicy:
    """
    Token emission configuration.

    :param access_ttl: Access token lifetime.
    :type access_ttl: timedelta
    :param refresh_ttl: Refresh token lifetime.
    :type refresh_ttl: timedelta
    :param refresh_secret_bytes: Entropy of refresh secrets, in bytes.
    :type refresh_secret_bytes: int
    """

    access_ttl: timedelta = timedelta(minutes=15)
    refresh_ttl: timedelta = timedelta(days=7)
    refresh_secret_bytes: int = 32

    @property
    def access_ttl_seconds(self) -> int:
        return int(self.access_ttl.total_seconds())
