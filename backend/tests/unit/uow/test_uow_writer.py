"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import func, select

from sessionauth.models import RefreshToken, User
from sessionauth.uow import SQLAlchemyUnitOfWork
from tests.factories.user import UserFactory


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, app, db, session):
        """
        GIVEN a writer UoW
        WHEN we create a user via repo inside the context and leave without exception
        THEN the transaction is committed and the row is visible afterwards.
        """
        initial = db.session.query(User).count()

        with SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())

        after = db.session.query(User).count()
        assert after == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, app, db, session):
        """
        GIVEN a writer UoW
        WHEN an exception is raised inside the context
        THEN the transaction is rolled back and no rows are persisted.
        """
        initial = db.session.query(User).count()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())
            raise RuntimeError("boom")

        after = db.session.query(User).count()
        assert after == initial

    def test_repositories_share_one_session(self, app, db, session):
        """All repositories of a UoW see each other's pending rows."""
        with SQLAlchemyUnitOfWork() as uow:
            assert uow.users.session is uow.refresh_tokens.session is uow.blocked_tokens.session
            user = uow.users.add(UserFactory.build())
            uow.refresh_tokens.add(
                RefreshToken(
                    secret="s" * 43,
                    subject_id=user.id,
                    expires_at=datetime.now(UTC) + timedelta(days=1),
                )
            )

        count = db.session.execute(
            select(func.count()).select_from(RefreshToken).where(RefreshToken.subject_id == user.id)
        ).scalar()
        assert count == 1
