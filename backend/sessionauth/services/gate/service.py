# sessionauth/services/gate/service.py
from __future__ import annotations

import logging

from sessionauth.services._shared.base import BaseService, ServiceContext
from sessionauth.services._shared.errors import IdentityInactive, IdentityNotFound, TokenRevoked
from sessionauth.services._shared.ports import EnvelopeSigner, Identity, UserStore
from sessionauth.services.tokens.lifecycle import TokenLifecycleManager

log = logging.getLogger(__name__)


class AuthenticationGate(BaseService):
    """
    Resolve a bearer access token to a live identity.

    Checks run in order: envelope (signature, type, expiry), blocklist,
    identity lookup, active flag. Each failure is a distinct
    :class:`AuthenticationError` subclass for logging; the HTTP layer
    renders all of them as the same 401.
    """

    def __init__(
        self,
        *,
        signer: EnvelopeSigner,
        tokens: TokenLifecycleManager,
        users: UserStore,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(ctx=ctx)
        self.signer = signer
        self.tokens = tokens
        self.users = users

    def authenticate(self, bearer_token: str) -> Identity:
        """
        :param bearer_token: Encoded access JWT (without the ``Bearer`` prefix).
        :returns: The identity the token was minted for.
        :raises InvalidToken: Malformed, badly signed or non-access token.
        :raises TokenExpired: Past ``exp``.
        :raises TokenRevoked: ``jti`` is blocklisted.
        :raises IdentityNotFound: Subject no longer exists.
        :raises IdentityInactive: Subject is deactivated.
        """
        claims = self.signer.verify(bearer_token)

        if self.tokens.is_blocked(claims.token_id):
            log.info("Rejected blocklisted token", extra={"token_id": claims.token_id})
            raise TokenRevoked()

        identity = self.users.find_by_id(claims.subject_id)
        if identity is None:
            raise IdentityNotFound()
        if not identity.is_active:
            raise IdentityInactive()
        return identity

    def identify_for_logout(self, bearer_token: str) -> Identity:
        """
        Resolve the owner of a token presented to logout.

        Only the signature and type are checked: an expired or already
        blocklisted token still names its subject, so repeating a logout
        succeeds instead of failing with 401.

        :raises InvalidToken: Malformed, badly signed or non-access token.
        :raises IdentityNotFound: Subject no longer exists.
        """
        claims = self.signer.peek(bearer_token)
        identity = self.users.find_by_id(claims.subject_id)
        if identity is None:
            raise IdentityNotFound()
        return identity
