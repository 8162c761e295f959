"""Factory Boy definition for :class:`sessionauth.models.user.User`."""

from __future__ import annotations

import factory

from sessionauth.infra.security.argon2_password_hasher import Argon2PasswordHasher
from sessionauth.models.user import User
from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd!"

#: Same cheap parameters as ``TestingConfig``.
test_hasher = Argon2PasswordHasher(memory_cost=1024, time_cost=1, parallelism=1)


class UserFactory(BaseFactory):
    """
    Build persisted :class:`User` instances with a real argon2id digest.

    Pass ``password="..."`` to choose the plaintext; it is hashed before the
    row is flushed and never stored on the instance.
    """

    class Meta:
        model = User

    class Params:
        password = DEFAULT_PASSWORD

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    password_digest = factory.LazyAttribute(lambda o: test_hasher.hash(o.password))
    is_active = True
