# sessionauth/services/credentials/service.py
from __future__ import annotations

import logging
from dataclasses import replace

from sessionauth.services._shared.base import BaseService, ServiceContext
from sessionauth.services._shared.errors import InvalidCredential, TransientError
from sessionauth.services._shared.ports import NewIdentity, PasswordHasher, UserStore
from sessionauth.services.credentials.dto import (
    IdentityPublicOut,
    LoginIn,
    LoginOut,
    RefreshOut,
    RegisterIn,
    RegistrationOut,
)
from sessionauth.services.tokens.lifecycle import TokenLifecycleManager

log = logging.getLogger(__name__)


class CredentialService(BaseService):
    """
    Use cases exposed to the delivery layer: register, login, refresh, logout.

    Inputs are assumed validated (see :mod:`sessionauth.services.validation`).
    Login failures are uniform: unknown email, wrong password and a
    deactivated account all raise :class:`InvalidCredential`.
    """

    def __init__(
        self,
        *,
        users: UserStore,
        hasher: PasswordHasher,
        tokens: TokenLifecycleManager,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(ctx=ctx)
        self.users = users
        self.hasher = hasher
        self.tokens = tokens
        self._dummy_digest: str | None = None

    @property
    def access_token_expiry_seconds(self) -> int:
        return self.tokens.policy.access_ttl_seconds

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> RegistrationOut:
        """
        Create an identity with a hashed password.

        :raises EmailAlreadyRegistered: When the email is taken.
        """
        digest = self.hasher.hash(dto.password)
        identity = self.users.create(
            NewIdentity(
                email=dto.email.strip().lower(),
                first_name=dto.first_name,
                last_name=dto.last_name,
                password_digest=digest,
            )
        )
        log.info("Identity registered", extra={"subject_id": identity.id})
        return RegistrationOut(
            identity=IdentityPublicOut.from_identity(identity),
            access_token_expiry_seconds=self.access_token_expiry_seconds,
        )

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Verify credentials and issue a fresh credential pair.

        :raises InvalidCredential: For any credential problem.
        """
        identity = self.users.find_by_email(dto.email)
        if identity is None:
            # Burn a comparable amount of work so unknown emails are not faster.
            self.hasher.verify(self._get_dummy_digest(), dto.password)
            log.info("Login rejected", extra={"reason": "invalid_credentials"})
            raise InvalidCredential()

        if not self.hasher.verify(identity.password_digest, dto.password) or not identity.is_active:
            log.info("Login rejected", extra={"subject_id": identity.id, "reason": "invalid_credentials"})
            raise InvalidCredential()

        if self.hasher.needs_rehash(identity.password_digest):
            self._upgrade_digest(identity.id, dto.password)

        self.users.touch_last_login(identity.id)
        pair = self.tokens.issue_pair(identity.id)
        identity = replace(identity, last_login_at=self.now())

        return LoginOut(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            identity=IdentityPublicOut.from_identity(identity),
            access_token_expiry_seconds=self.access_token_expiry_seconds,
        )

    # ------------------------------------------------------------------ #
    # Refresh / Logout
    # ------------------------------------------------------------------ #

    def refresh(self, refresh_token: str) -> RefreshOut:
        """
        Rotate a refresh secret.

        :raises InvalidCredential: Unknown, used, revoked or expired secret.
        """
        pair = self.tokens.rotate(refresh_token)
        return RefreshOut(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            access_token_expiry_seconds=self.access_token_expiry_seconds,
        )

    def logout(self, identity_id: str, access_token: str) -> None:
        """
        Revoke every refresh token of the identity and blocklist the access token.

        Blocklist failures are logged by the lifecycle manager and never
        surface here.

        :raises TransientError: When the refresh ledger was unreachable.
        """
        self.tokens.logout(identity_id, access_token)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _get_dummy_digest(self) -> str:
        if self._dummy_digest is None:
            self._dummy_digest = self.hasher.hash("dummy-password-for-timing")
        return self._dummy_digest

    def _upgrade_digest(self, identity_id: str, password: str) -> None:
        """Re-hash with current parameters; failure leaves the old digest valid."""
        try:
            self.users.update_password_digest(identity_id, self.hasher.hash(password))
        except TransientError:
            log.warning("Password digest upgrade deferred", extra={"subject_id": identity_id})
            return
        log.info("Password digest upgraded", extra={"subject_id": identity_id})
