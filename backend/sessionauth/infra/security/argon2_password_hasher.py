# sessionauth/infra/security/argon2_password_hasher.py
from __future__ import annotations

from dataclasses import dataclass, field

from argon2 import PasswordHasher as _Argon2
from argon2 import Type
from argon2.exceptions import HashingError, InvalidHashError, VerificationError, VerifyMismatchError

from sessionauth.services._shared.errors import InternalError
from sessionauth.services._shared.ports import PasswordHasher


@dataclass(slots=True)
class Argon2PasswordHasher(PasswordHasher):
    """
    Argon2id hasher (argon2-cffi).

    Cost parameters are encoded in every digest, so digests made with older
    settings keep verifying; :meth:`needs_rehash` flags them for upgrade.

    :param memory_cost: Memory in KiB (default 65536, i.e. 64 MiB).
    :param time_cost: Number of iterations.
    :param parallelism: Lanes.
    """

    memory_cost: int = 2**16
    time_cost: int = 3
    parallelism: int = 1
    _impl: _Argon2 = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._impl = _Argon2(
            time_cost=self.time_cost,
            memory_cost=self.memory_cost,
            parallelism=self.parallelism,
            type=Type.ID,
        )

    def hash(self, secret: str) -> str:
        try:
            return self._impl.hash(secret)
        except HashingError as exc:
            raise InternalError("Password hashing failed.") from exc

    def verify(self, digest: str, secret: str) -> bool:
        if not digest or not isinstance(digest, str):
            return False
        try:
            return self._impl.verify(digest, secret)
        except (VerifyMismatchError, VerificationError, InvalidHashError, ValueError):
            # ValueError: argon2-cffi ASCII-encodes the digest first
            return False

    def needs_rehash(self, digest: str) -> bool:
        try:
            return self._impl.check_needs_rehash(digest)
        except (InvalidHashError, ValueError):
            return False
