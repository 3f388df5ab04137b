"""Google account linking and ID-token sign-in."""

import secrets
from datetime import datetime, timezone
from typing import Optional, Tuple, Union

import structlog
from fastapi.concurrency import run_in_threadpool
from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InternalError,
    ValidationError,
)
from app.core.security import TokenPair
from app.models.account import Account
from app.models.user import User
from app.repositories import AccountRepository, UserRepository
from app.schemas.google import GoogleRegisterRequest
from app.services.auth_service import AuthService, ensure_account_active
from app.utils.constants import AccountProvider, LoginMethod, Role
from app.utils.helpers import mask_email, normalize_email, utcnow

logger = structlog.get_logger(__name__)


def _email_verified_at(value: Optional[Union[datetime, bool]]) -> Optional[datetime]:
    if isinstance(value, bool):
        return utcnow() if value else None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    return None


class GoogleService:
    """Links Google identities to users."""

    def __init__(self, db: AsyncSession, client_id: Optional[str] = None):
        self.users = UserRepository(db)
        self.accounts = AccountRepository(db)
        self.auth = AuthService(db)
        self.client_id = client_id if client_id is not None else settings.GOOGLE_CLIENT_ID

    async def _create_google_user(
        self,
        email: str,
        name: Optional[str],
        image: Optional[str],
        email_verified: Optional[datetime],
    ) -> User:
        # Google users never sign in with a password; store an unusable random one
        password_hash = await run_in_threadpool(self.auth.hasher.hash, secrets.token_hex(16))
        user = await self.users.create(
            User(
                email=email,
                name=name,
                profile_image=image,
                password_hash=password_hash,
                role=Role.STUDENT.value,
                login_method=LoginMethod.GOOGLE.value,
                email_verified=email_verified,
                is_blocked=False,
                is_deleted=False,
            )
        )
        logger.info("google_user_created", user_id=str(user.id))
        return user

    async def _link_account(
        self,
        user: User,
        provider: str,
        provider_id: str,
        access_token: Optional[str],
        refresh_token: Optional[str],
    ) -> Account:
        account = await self.accounts.get_by_provider_id(provider, provider_id)
        if account is None:
            account = await self.accounts.create(
                Account(
                    user_id=user.id,
                    provider=provider,
                    provider_id=provider_id,
                    access_token=access_token,
                    refresh_token=refresh_token,
                )
            )
            logger.info("account_linked", user_id=str(user.id), provider=provider)
            return account

        if account.user_id != user.id:
            raise ConflictError("Account is already linked to another user")
        if access_token is not None or refresh_token is not None:
            account = await self.accounts.update_tokens(account, access_token, refresh_token)
        return account

    async def register(self, data: GoogleRegisterRequest) -> Tuple[User, Account]:
        """Find or create the user and the provider account the frontend reports."""
        required = (data.email, data.provider, data.provider_id, data.access_token, data.refresh_token)
        if not all(required):
            raise ValidationError("Missing required fields")
        if data.provider not in {p.value for p in AccountProvider}:
            raise ValidationError("Unsupported provider")

        # Refuse a provider id owned by someone else before creating anything
        existing = await self.accounts.get_by_provider_id(data.provider, data.provider_id)
        user = await self.users.get_by_email(data.email)
        if existing is not None and (user is None or existing.user_id != user.id):
            logger.info("account_link_conflict", provider=data.provider, email=mask_email(data.email))
            raise ConflictError("Account is already linked to another user")

        if user is None:
            user = await self._create_google_user(
                data.email, data.name, data.image, _email_verified_at(data.email_verified)
            )

        account = await self._link_account(
            user, data.provider, data.provider_id, data.access_token, data.refresh_token
        )
        return user, account

    async def login_with_id_token(self, token: str) -> Tuple[User, TokenPair]:
        """Verify a Google ID token, auto-registering unknown users."""
        if not self.client_id:
            logger.error("google_client_id_missing")
            raise InternalError("Google client ID is not configured")

        try:
            payload = await run_in_threadpool(
                google_id_token.verify_oauth2_token,
                token,
                google_requests.Request(),
                self.client_id,
            )
        except ValueError as e:
            logger.warning("google_token_invalid", error=str(e))
            raise AuthenticationError("Invalid Google token") from e
        except google_exceptions.GoogleAuthError as e:
            logger.error("google_token_verification_failed", error=type(e).__name__)
            raise InternalError("Google token verification failed") from e

        email = payload.get("email")
        if not email:
            raise AuthenticationError("Google token missing email")
        if payload.get("email_verified") is False:
            raise AuthorizationError("Google email not verified")
        email = normalize_email(email)

        user = await self.users.get_by_email(email)
        if user is None:
            logger.info("google_auto_register", email=mask_email(email))
            user = await self._create_google_user(email, payload.get("name"), payload.get("picture"), utcnow())

        ensure_account_active(user)
        await self._link_account(user, AccountProvider.GOOGLE.value, payload["sub"], None, None)

        pair = await self.auth.start_session(user)
        logger.info("google_login_succeeded", user_id=str(user.id))
        return user, pair
