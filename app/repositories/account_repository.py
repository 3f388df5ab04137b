"""Linked provider accounts."""

from typing import Optional

from sqlalchemy import select

from app.models.account import Account
from app.repositories.base import BaseRepository


class AccountRepository(BaseRepository):

    async def get_by_provider_id(self, provider: str, provider_id: str) -> Optional[Account]:
        return await self._first(
            select(Account).where(Account.provider == provider, Account.provider_id == provider_id)
        )

    async def create(self, account: Account) -> Account:
        return await self._save(account)

    async def update_tokens(
        self, account: Account, access_token: Optional[str], refresh_token: Optional[str]
    ) -> Account:
        account.access_token = access_token
        account.refresh_token = refresh_token
        return await self._save(account)
