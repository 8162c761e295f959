from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """
    One-way, salted, memory-hard hashing of credential secrets.

    Digests are self-describing (cost parameters are encoded in them), so a
    cost change never breaks verification of older digests.
    """

    def hash(self, secret: str) -> str:
        """
        Produce a digest for ``secret``.

        :raises InternalError: If the primitive fails.
        """
        ...

    def verify(self, digest: str, secret: str) -> bool:
        """
        Check ``secret`` against ``digest``.

        MUST NOT raise on malformed digests: both a wrong secret and a
        garbage digest yield ``False``.
        """
        ...

    def needs_rehash(self, digest: str) -> bool:
        """Return ``True`` when ``digest`` was produced with outdated parameters."""
        ...
