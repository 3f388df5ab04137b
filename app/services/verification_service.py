"""One-time verification codes: email verification and password reset."""

import secrets
from datetime import timedelta
from typing import Optional, Tuple

import structlog
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import CodeExpiredError, NotFoundError, ValidationError
from app.core.security import PasswordHasher, password_hasher
from app.models.user import User
from app.models.verification_token import VerificationToken
from app.repositories import SessionRepository, UserRepository, VerificationTokenRepository
from app.utils.constants import VERIFICATION_CODE_MAX, VERIFICATION_CODE_MIN, VerificationKind
from app.utils.helpers import mask_email, normalize_email, utcnow
from app.utils.validators import validate_verification_code

logger = structlog.get_logger(__name__)


def generate_code() -> str:
    """Six digits, uniform over the whole range."""
    return str(VERIFICATION_CODE_MIN + secrets.randbelow(VERIFICATION_CODE_MAX - VERIFICATION_CODE_MIN + 1))


class VerificationService:
    """Issues and consumes verification codes.

    Expired codes are removed lazily: when a consume attempt finds one, and
    when a new code is issued for the same user.
    """

    def __init__(self, db: AsyncSession, hasher: PasswordHasher = password_hasher):
        self.users = UserRepository(db)
        self.codes = VerificationTokenRepository(db)
        self.sessions = SessionRepository(db)
        self.hasher = hasher
        self.ttl = timedelta(hours=settings.VERIFICATION_CODE_TTL_HOURS)

    async def issue(self, user: User, kind: VerificationKind = VerificationKind.EMAIL_VERIFICATION) -> str:
        """Create a new code. Other unexpired codes for the user stay valid."""
        await self.codes.delete_expired_for_user(user.id)
        code = generate_code()
        await self.codes.create(
            VerificationToken(
                user_id=user.id,
                code=code,
                expires_at=utcnow() + self.ttl,
                kind=kind.value,
            )
        )
        logger.info("verification_code_issued", user_id=str(user.id), kind=kind.value)
        return code

    async def consume(
        self, user: User, code: str, kind: VerificationKind = VerificationKind.EMAIL_VERIFICATION
    ) -> None:
        """Spend a code. Raises ``ValidationError`` or ``CodeExpiredError``."""
        if not validate_verification_code(code):
            raise ValidationError("Invalid code")

        token = await self.codes.find(user.id, code, kind.value)
        if token is None:
            logger.info("verification_code_rejected", user_id=str(user.id), kind=kind.value)
            raise ValidationError("Invalid code")

        if token.expires_at < utcnow():
            await self.codes.delete(token)
            logger.info("verification_code_expired", user_id=str(user.id), kind=kind.value)
            raise CodeExpiredError()

        if kind == VerificationKind.EMAIL_VERIFICATION:
            await self.users.mark_email_verified(user)
        await self.codes.delete(token)
        logger.info("verification_code_consumed", user_id=str(user.id), kind=kind.value)

    async def _require_user(self, email: str) -> User:
        user = await self.users.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def create_email_verification(self, email: str) -> Tuple[User, str]:
        user = await self._require_user(email)
        code = await self.issue(user, VerificationKind.EMAIL_VERIFICATION)
        return user, code

    async def verify_email(self, email: str, code: str) -> User:
        user = await self._require_user(email)
        await self.consume(user, code, VerificationKind.EMAIL_VERIFICATION)
        return user

    async def is_email_verified(self, email: str) -> bool:
        user = await self.users.get_by_email(normalize_email(email))
        return user is not None and user.email_verified is not None

    async def request_password_reset(self, email: str) -> Optional[Tuple[User, str]]:
        """Issue a reset code, or None when there is no usable account."""
        user = await self.users.get_by_email(email)
        if user is None or user.is_blocked or user.is_deleted:
            logger.info("password_reset_skipped", email=mask_email(email))
            return None
        code = await self.issue(user, VerificationKind.PASSWORD_RESET)
        return user, code

    async def reset_password(self, email: str, code: str, new_password: str) -> User:
        """Spend a reset code, store the new secret and end every session."""
        user = await self.users.get_by_email(email)
        if user is None:
            raise ValidationError("Invalid code")
        await self.consume(user, code, VerificationKind.PASSWORD_RESET)

        new_hash = await run_in_threadpool(self.hasher.hash_if_changed, new_password, user.password_hash)
        if new_hash != user.password_hash:
            await self.users.set_password_hash(user, new_hash)
        removed = await self.sessions.delete_all_for_user(user.id)
        logger.info("password_reset", user_id=str(user.id), sessions_removed=removed)
        return user
