"""Credential store."""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import ConflictError
from app.models.user import User
from app.repositories.base import BaseRepository
from app.utils.helpers import utcnow


class UserRepository(BaseRepository):

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return await self._bounded(self.db.get(User, user_id))

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self._first(select(User).where(User.email == email))

    async def create(self, user: User) -> User:
        """Insert a new user; the unique email index turns a race into a conflict."""
        try:
            return await self._save(user)
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError("User with this email already exists") from exc

    async def touch_last_login(self, user: User) -> User:
        user.last_login_at = utcnow()
        return await self._save(user)

    async def mark_email_verified(self, user: User) -> User:
        user.email_verified = utcnow()
        return await self._save(user)

    async def set_password_hash(self, user: User, password_hash: str) -> User:
        user.password_hash = password_hash
        return await self._save(user)

    async def set_blocked(self, user: User, blocked: bool) -> User:
        user.is_blocked = blocked
        return await self._save(user)

    async def soft_delete(self, user: User) -> User:
        user.is_deleted = True
        return await self._save(user)
