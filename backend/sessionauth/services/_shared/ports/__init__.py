"""
sessionauth.services._shared.ports
==================================

Collection of *ports* (hexagonal interfaces) that define the contracts
for credential storage, token sealing and password hashing.

These ports decouple the token lifecycle core from concrete implementations
of persistence, signing and hashing.

Modules
-------
- :mod:`envelope_signer`:
    Defines :class:`~.EnvelopeSigner` and :class:`~.AccessClaims`: access
    token minting and verification.

- :mod:`blocklist`:
    Defines :class:`~.AccessTokenBlocklist`: revoked access token ids with expiry.

- :mod:`refresh_token_store`:
    Defines :class:`~.RefreshTokenStore` and :class:`~.RefreshTokenRecord`:
    the refresh token ledger with a conditional revoke.

- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher`: memory-hard digest and verify.

- :mod:`user_store`:
    Defines :class:`~.UserStore`, :class:`~.Identity` and :class:`~.NewIdentity`.

Design Notes
------------
Ports are :class:`typing.Protocol` capability sets. Concrete adapters
(SQLAlchemy, Redis, argon2, flask-jwt-extended) live under
``sessionauth.infra``; in-memory variants live next to their port.
"""

from __future__ import annotations

from .blocklist import AccessTokenBlocklist, InMemoryAccessTokenBlocklist
from .envelope_signer import AccessClaims, EnvelopeSigner
from .password_hasher import PasswordHasher
from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshTokenRecord,
    RefreshTokenStore,
)
from .user_store import Identity, InMemoryUserStore, NewIdentity, UserStore

__all__ = [
    "AccessClaims",
    "AccessTokenBlocklist",
    "EnvelopeSigner",
    "Identity",
    "InMemoryAccessTokenBlocklist",
    "InMemoryRefreshTokenStore",
    "InMemoryUserStore",
    "NewIdentity",
    "PasswordHasher",
    "RefreshTokenRecord",
    "RefreshTokenStore",
    "UserStore",
]
