"""Administrative block/unblock/delete of user accounts."""

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.user import User
from app.repositories import SessionRepository, UserRepository, VerificationTokenRepository

logger = structlog.get_logger(__name__)


class UserAdminService:
    """Blocking or deleting a user also revokes every session and pending code."""

    def __init__(self, db: AsyncSession):
        self.users = UserRepository(db)
        self.sessions = SessionRepository(db)
        self.codes = VerificationTokenRepository(db)

    async def _get(self, user_id: uuid.UUID) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def _revoke_credentials(self, user: User) -> None:
        sessions = await self.sessions.delete_all_for_user(user.id)
        codes = await self.codes.delete_all_for_user(user.id)
        logger.info("credentials_revoked", user_id=str(user.id), sessions_removed=sessions, codes_removed=codes)

    async def block(self, user_id: uuid.UUID, actor_id: uuid.UUID) -> User:
        user = await self._get(user_id)
        user = await self.users.set_blocked(user, True)
        await self._revoke_credentials(user)
        logger.info("user_blocked", user_id=str(user.id), actor_id=str(actor_id))
        return user

    async def unblock(self, user_id: uuid.UUID, actor_id: uuid.UUID) -> User:
        user = await self._get(user_id)
        user = await self.users.set_blocked(user, False)
        logger.info("user_unblocked", user_id=str(user.id), actor_id=str(actor_id))
        return user

    async def soft_delete(self, user_id: uuid.UUID, actor_id: uuid.UUID) -> User:
        user = await self._get(user_id)
        user = await self.users.soft_delete(user)
        await self._revoke_credentials(user)
        logger.info("user_deleted", user_id=str(user.id), actor_id=str(actor_id))
        return user
