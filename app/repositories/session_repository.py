"""Session store: persisted refresh-token sessions."""

import uuid
from datetime import timedelta
from typing import Optional

import structlog
from sqlalchemy import delete, select

from app.core.exceptions import SessionExpiredError
from app.models.user_session import UserSession
from app.repositories.base import BaseRepository
from app.utils.helpers import utcnow

logger = structlog.get_logger(__name__)

DEFAULT_SESSION_TTL = timedelta(days=7)


class SessionRepository(BaseRepository):

    async def create(
        self, user_id: uuid.UUID, refresh_token: str, ttl: timedelta = DEFAULT_SESSION_TTL
    ) -> UserSession:
        session = UserSession(
            user_id=user_id,
            refresh_token=refresh_token,
            expires_at=utcnow() + ttl,
        )
        return await self._save(session)

    async def find_by_token_and_user(self, refresh_token: str, user_id: uuid.UUID) -> Optional[UserSession]:
        return await self._first(
            select(UserSession).where(
                UserSession.refresh_token == refresh_token,
                UserSession.user_id == user_id,
            )
        )

    async def get_active(self, refresh_token: str, user_id: uuid.UUID) -> Optional[UserSession]:
        """Look up a session and enforce its expiry.

        Returns None when no row matches. An expired row is deleted before
        ``SessionExpiredError`` is raised.
        """
        session = await self.find_by_token_and_user(refresh_token, user_id)
        if session is None:
            return None
        if session.expires_at < utcnow():
            await self._execute(delete(UserSession).where(UserSession.id == session.id))
            await self._commit()
            logger.info("session_expired_removed", session_id=str(session.id), user_id=str(user_id))
            raise SessionExpiredError()
        return session

    async def rotate(
        self, session: UserSession, new_refresh_token: str, ttl: timedelta = DEFAULT_SESSION_TTL
    ) -> UserSession:
        """Replace the token and expiry in place; the old token stops matching."""
        session.refresh_token = new_refresh_token
        session.expires_at = utcnow() + ttl
        return await self._save(session)

    async def delete_one(self, refresh_token: str) -> int:
        result = await self._execute(delete(UserSession).where(UserSession.refresh_token == refresh_token))
        await self._commit()
        return result.rowcount

    async def delete_all_for_user(self, user_id: uuid.UUID) -> int:
        result = await self._execute(delete(UserSession).where(UserSession.user_id == user_id))
        await self._commit()
        return result.rowcount

    async def purge_expired(self) -> int:
        result = await self._execute(delete(UserSession).where(UserSession.expires_at < utcnow()))
        await self._commit()
        return result.rowcount
