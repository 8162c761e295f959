"""Repository package exposing persistence-layer access for the credential models."""

from __future__ import annotations

from sessionauth.repositories.base import BaseRepository
from sessionauth.repositories.blocked_token import BlockedTokenRepository
from sessionauth.repositories.refresh_token import RefreshTokenRepository
from sessionauth.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "BlockedTokenRepository",
    "RefreshTokenRepository",
    "UserRepository",
]
