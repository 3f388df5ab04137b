"""Tests for the per-call store deadline."""

import asyncio

import pytest
from sqlalchemy import select

from app.core.exceptions import InternalError
from app.models.user import User
from app.repositories import UserRepository


class TestBoundedCalls:

    @pytest.mark.asyncio
    async def test_call_past_deadline_raises_internal_error(self, db_session):
        repo = UserRepository(db_session, timeout=0.01)

        with pytest.raises(InternalError) as exc_info:
            await repo._bounded(asyncio.sleep(1))

        assert exc_info.value.message == "Database operation timed out"
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_call_within_deadline_returns_result(self, db_session):
        repo = UserRepository(db_session, timeout=5)
        assert await repo._bounded(asyncio.sleep(0, result="done")) == "done"

    @pytest.mark.asyncio
    async def test_default_deadline_comes_from_settings(self, db_session):
        repo = UserRepository(db_session)
        assert repo.timeout == 5.0
        assert await repo._all(select(User)) == []
