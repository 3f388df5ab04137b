"""Credential authentication and refresh-token sessions."""

import uuid
from datetime import timedelta
from typing import Tuple

import structlog
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InvalidTokenError,
    NotFoundError,
)
from app.core.security import (
    PasswordHasher,
    TokenPair,
    TokenPayload,
    TokenService,
    password_hasher,
    token_service,
)
from app.models.account import Account
from app.models.user import User
from app.repositories import AccountRepository, SessionRepository, UserRepository
from app.schemas.auth import RegisterRequest
from app.utils.constants import AccountProvider, LoginMethod
from app.utils.helpers import mask_email, normalize_email, to_uuid

logger = structlog.get_logger(__name__)


def ensure_account_active(user: User) -> None:
    """Blocked and deleted accounts may not obtain new tokens."""
    if user.is_blocked:
        raise AuthorizationError("Account is blocked. Please contact administrator.")
    if user.is_deleted:
        raise AuthorizationError("Account is deleted. Please contact administrator.")


class AuthService:
    """Register, login, refresh and logout flows."""

    def __init__(
        self,
        db: AsyncSession,
        hasher: PasswordHasher = password_hasher,
        tokens: TokenService = token_service,
    ):
        self.users = UserRepository(db)
        self.accounts = AccountRepository(db)
        self.sessions = SessionRepository(db)
        self.hasher = hasher
        self.tokens = tokens
        self.session_ttl = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    async def start_session(self, user: User) -> TokenPair:
        """Mint a token pair, persist its refresh token and stamp the login time."""
        pair = self.tokens.generate_token_pair(
            TokenPayload(user_id=str(user.id), email=user.email, role=user.role)
        )
        await self.sessions.create(user.id, pair.refresh_token, self.session_ttl)
        await self.users.touch_last_login(user)
        return pair

    async def register(self, data: RegisterRequest) -> Tuple[User, TokenPair]:
        if await self.users.get_by_email(data.email) is not None:
            logger.info("register_conflict", email=mask_email(data.email))
            raise ConflictError("User with this email already exists")

        password_hash = await run_in_threadpool(self.hasher.hash, data.password)
        user = await self.users.create(
            User(
                email=data.email,
                password_hash=password_hash,
                name=data.name,
                role=data.role.value,
                login_method=LoginMethod.CREDENTIALS.value,
                is_blocked=False,
                is_deleted=False,
            )
        )
        await self.accounts.create(Account(user_id=user.id, provider=AccountProvider.CREDENTIALS.value))

        pair = await self.start_session(user)
        logger.info("user_registered", user_id=str(user.id), role=user.role)
        return user, pair

    async def login(self, email: str, password: str) -> Tuple[User, TokenPair]:
        user = await self.users.get_by_email(email)
        if user is None:
            # Same bcrypt cost as a wrong password so timing does not reveal accounts
            await run_in_threadpool(self.hasher.verify_dummy, password)
            logger.warning("login_failed", reason="unknown_email", email=mask_email(email))
            raise AuthenticationError("Invalid email or password")

        if not await run_in_threadpool(self.hasher.verify, password, user.password_hash):
            logger.warning("login_failed", reason="bad_password", user_id=str(user.id))
            raise AuthenticationError("Invalid email or password")

        ensure_account_active(user)

        pair = await self.start_session(user)
        logger.info("login_succeeded", user_id=str(user.id))
        return user, pair

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new pair, rotating the session in place."""
        payload = self.tokens.verify_refresh_token(refresh_token)
        user_id = to_uuid(payload.user_id)
        if user_id is None:
            raise InvalidTokenError("Invalid or expired refresh token")

        session = await self.sessions.get_active(refresh_token, user_id)
        if session is None:
            logger.warning("refresh_rejected", reason="session_not_found", user_id=str(user_id))
            raise AuthenticationError("Refresh token not found")

        user = await self.users.get_by_id(user_id)
        if user is None:
            raise AuthenticationError("User not found")
        ensure_account_active(user)

        pair = self.tokens.generate_token_pair(
            TokenPayload(user_id=str(user.id), email=user.email, role=user.role)
        )
        await self.sessions.rotate(session, pair.refresh_token, self.session_ttl)
        logger.info("session_rotated", session_id=str(session.id), user_id=str(user.id))
        return pair

    async def logout(self, refresh_token: str) -> None:
        removed = await self.sessions.delete_one(refresh_token)
        logger.info("logout", sessions_removed=removed)

    async def logout_all(self, user_id: uuid.UUID) -> int:
        removed = await self.sessions.delete_all_for_user(user_id)
        logger.info("logout_all", user_id=str(user_id), sessions_removed=removed)
        return removed

    async def get_user(self, user_id: uuid.UUID) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def email_exists(self, email: str) -> bool:
        return await self.users.get_by_email(normalize_email(email)) is not None
