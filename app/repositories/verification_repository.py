"""Verification code rows."""

import uuid
from typing import Optional

from sqlalchemy import delete, select

from app.models.verification_token import VerificationToken
from app.repositories.base import BaseRepository
from app.utils.helpers import utcnow


class VerificationTokenRepository(BaseRepository):

    async def create(self, token: VerificationToken) -> VerificationToken:
        return await self._save(token)

    async def find(self, user_id: uuid.UUID, code: str, kind: str) -> Optional[VerificationToken]:
        return await self._first(
            select(VerificationToken).where(
                VerificationToken.user_id == user_id,
                VerificationToken.code == code,
                VerificationToken.kind == kind,
            )
        )

    async def delete(self, token: VerificationToken) -> None:
        await self._execute(delete(VerificationToken).where(VerificationToken.id == token.id))
        await self._commit()

    async def delete_expired_for_user(self, user_id: uuid.UUID) -> int:
        result = await self._execute(
            delete(VerificationToken).where(
                VerificationToken.user_id == user_id,
                VerificationToken.expires_at < utcnow(),
            )
        )
        await self._commit()
        return result.rowcount

    async def delete_all_for_user(self, user_id: uuid.UUID) -> int:
        result = await self._execute(delete(VerificationToken).where(VerificationToken.user_id == user_id))
        await self._commit()
        return result.rowcount

    async def purge_expired(self) -> int:
        result = await self._execute(delete(VerificationToken).where(VerificationToken.expires_at < utcnow()))
        await self._commit()
        return result.rowcount
