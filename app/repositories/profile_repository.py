"""Profile storage."""

import uuid
from typing import Any, Dict, Optional

from sqlalchemy import select

from app.models.profile import Profile
from app.repositories.base import BaseRepository


class ProfileRepository(BaseRepository):

    async def get_by_user_id(self, user_id: uuid.UUID) -> Optional[Profile]:
        return await self._first(select(Profile).where(Profile.user_id == user_id))

    async def upsert(self, user_id: uuid.UUID, fields: Dict[str, Any]) -> Profile:
        profile = await self.get_by_user_id(user_id)
        if profile is None:
            profile = Profile(user_id=user_id)
        for key, value in fields.items():
            setattr(profile, key, value)
        return await self._save(profile)
