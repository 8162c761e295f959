# sessionauth/services/tokens/lifecycle.py
from __future__ import annotations

import logging
import secrets
import uuid

from sessionauth.services._shared.base import BaseService, ServiceContext
from sessionauth.services._shared.errors import (
    AuthenticationError,
    InternalError,
    InvalidCredential,
    TransientError,
)
from sessionauth.services._shared.ports import (
    AccessClaims,
    AccessTokenBlocklist,
    EnvelopeSigner,
    RefreshTokenRecord,
    RefreshTokenStore,
)
from sessionauth.services.tokens.dto import CredentialPair, TokenPolicy

log = logging.getLogger(__name__)


class TokenLifecycleManager(BaseService):
    """
    Issue, rotate and revoke session credentials.

    Refresh tokens are opaque single-use secrets kept in a
    :class:`RefreshTokenStore`; access tokens are short-lived signed
    envelopes whose early revocation goes through an
    :class:`AccessTokenBlocklist`.

    Security
    --------
    - Rotation revokes the presented record **before** minting the new pair,
      through the store's conditional update: of N concurrent callers with
      the same secret exactly one gets a pair.
    - Absent, revoked and expired secrets are indistinguishable to callers.
    - Secrets and encoded tokens are never logged; ids are.
    """

    def __init__(
        self,
        *,
        signer: EnvelopeSigner,
        refresh_store: RefreshTokenStore,
        blocklist: AccessTokenBlocklist,
        policy: TokenPolicy | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        :param signer: Access token minting/verification adapter.
        :param refresh_store: Refresh token ledger.
        :param blocklist: Revoked access token ids.
        :param policy: Lifetimes and secret size.
        """
        super().__init__(ctx=ctx)
        self.signer = signer
        self.refresh_store = refresh_store
        self.blocklist = blocklist
        self.policy = policy or TokenPolicy()

    # ------------------------------------------------------------------ #
    # Issuance & rotation
    # ------------------------------------------------------------------ #

    def issue_pair(self, subject_id: str) -> CredentialPair:
        """
        Mint a fresh access token and persist a new refresh record.

        Prior records of ``subject_id`` are left untouched (several devices
        may hold live refresh tokens at once).

        :param subject_id: Identity the pair is issued to.
        :rtype: CredentialPair
        """
        now = self.now()
        record = RefreshTokenRecord(
            id=str(uuid.uuid4()),
            secret=secrets.token_urlsafe(self.policy.refresh_secret_bytes),
            subject_id=subject_id,
            expires_at=now + self.policy.refresh_ttl,
            revoked=False,
            created_at=now,
        )
        # Register server state FIRST, then seal the access token.
        self.refresh_store.insert(record)
        access_token, claims = self.signer.mint(subject_id=subject_id, ttl=self.policy.access_ttl)

        log.info(
            "Issued credential pair",
            extra={"subject_id": subject_id, "record_id": record.id, "token_id": claims.token_id},
        )
        return CredentialPair(
            access_token=access_token,
            refresh_token=record.secret,
            access_claims=claims,
        )

    def rotate(self, presented_secret: str) -> CredentialPair:
        """
        Exchange a refresh secret for a brand-new pair (single use).

        :raises InvalidCredential: Unknown, revoked or expired secret, or a
            lost race against a concurrent rotation of the same secret.
        """
        if not presented_secret:
            raise InvalidCredential()

        consumed = self.refresh_store.consume_active(presented_secret)
        if consumed is None:
            log.info("Refresh rejected", extra={"reason": "inactive_or_unknown"})
            raise InvalidCredential()

        log.info(
            "Refresh token rotated",
            extra={"subject_id": consumed.subject_id, "record_id": consumed.id},
        )
        return self.issue_pair(consumed.subject_id)

    # ------------------------------------------------------------------ #
    # Revocation
    # ------------------------------------------------------------------ #

    def revoke_all_for_subject(self, subject_id: str) -> int:
        """
        Revoke every active refresh record of ``subject_id``.

        Idempotent: a second call returns ``0``.
        """
        count = self.refresh_store.mark_all_revoked_for_subject(subject_id)
        log.info("Revoked refresh tokens", extra={"subject_id": subject_id, "count": count})
        return count

    def block_access_token(self, claims: AccessClaims) -> None:
        """Blocklist an access token until its own ``exp``. Idempotent."""
        self.blocklist.insert(claims.token_id, claims.expires_at)
        log.info("Access token blocked", extra={"subject_id": claims.subject_id, "token_id": claims.token_id})

    def is_blocked(self, token_id: str) -> bool:
        """Return ``True`` for a non-expired blocklist entry."""
        return self.blocklist.contains(token_id)

    def logout(self, subject_id: str, access_token: str) -> bool:
        """
        End every session of ``subject_id`` and kill the presented access token.

        Both steps are always attempted. A refresh-revocation failure is
        re-raised after the blocking attempt; a blocking failure is logged
        and reported as ``False``.

        :returns: ``True`` when the access token was blocklisted.
        :raises TransientError: When the refresh ledger was unreachable.
        """
        revoke_error: TransientError | None = None
        try:
            self.revoke_all_for_subject(subject_id)
        except TransientError as exc:
            revoke_error = exc
            log.warning("Logout could not revoke refresh tokens", extra={"subject_id": subject_id})

        blocked = self._block_presented(subject_id, access_token)

        if revoke_error is not None:
            raise revoke_error
        return blocked

    def _block_presented(self, subject_id: str, access_token: str) -> bool:
        try:
            claims = self.signer.peek(access_token)
        except AuthenticationError as exc:
            log.warning(
                "Logout could not decode access token",
                extra={"subject_id": subject_id, "reason": exc.reason},
            )
            return False

        if claims.subject_id != subject_id:
            log.warning(
                "Logout token subject mismatch",
                extra={"subject_id": subject_id, "token_id": claims.token_id},
            )
            return False

        try:
            self.block_access_token(claims)
        except (TransientError, InternalError) as exc:
            log.warning(
                "Logout could not block access token",
                extra={"subject_id": subject_id, "token_id": claims.token_id, "reason": type(exc).__name__},
            )
            return False
        return True
