"""Shared plumbing for repositories."""

import asyncio
from typing import Any, Awaitable, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable

from app.config import settings
from app.core.exceptions import InternalError

logger = structlog.get_logger(__name__)


class BaseRepository:
    """Runs every store call under a bounded deadline.

    Each write commits on its own, so a single-row update is atomic and
    survives an error raised later in the same request.
    """

    def __init__(self, db: AsyncSession, timeout: Optional[float] = None):
        self.db = db
        self.timeout = timeout if timeout is not None else settings.DB_OPERATION_TIMEOUT_SECONDS

    async def _bounded(self, awaitable: Awaitable[Any]) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.error("store_call_timed_out", repository=type(self).__name__, timeout=self.timeout)
            raise InternalError("Database operation timed out") from exc

    async def _execute(self, statement: Executable):
        return await self._bounded(self.db.execute(statement))

    async def _first(self, statement: Executable):
        result = await self._execute(statement)
        return result.scalars().first()

    async def _all(self, statement: Executable) -> list:
        result = await self._execute(statement)
        return list(result.scalars().all())

    async def _save(self, instance):
        self.db.add(instance)
        await self._commit()
        await self._bounded(self.db.refresh(instance))
        return instance

    async def _commit(self) -> None:
        await self._bounded(self.db.commit())
