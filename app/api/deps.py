"""
API Dependencies
Authentication gate, role gate and service factories for API endpoints
"""

from typing import Callable, Optional
from uuid import UUID

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    InvalidTokenError,
    NotFoundError,
)
from app.core.security import extract_token_from_header, token_service
from app.db.session import get_db
from app.repositories import UserRepository
from app.services.auth_service import AuthService
from app.services.google_service import GoogleService
from app.services.user_admin_service import UserAdminService
from app.services.verification_service import VerificationService
from app.utils.constants import Role
from app.utils.helpers import to_uuid

logger = structlog.get_logger(__name__)

# Registers the bearer scheme in OpenAPI; the header itself is parsed below
bearer_scheme = HTTPBearer(auto_error=False)


class AuthContext(BaseModel):
    """Identity of an authenticated request.

    Only ``get_auth_context`` produces one, so a handler that takes an
    ``AuthContext`` cannot run before authentication.
    """

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    email: str
    role: Role


async def get_auth_context(
    request: Request,
    _credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> AuthContext:
    """
    Validate the bearer access token and the account behind it
    """
    token = extract_token_from_header(request.headers.get("Authorization"))
    if token is None:
        raise AuthenticationError("Access token required")

    try:
        payload = token_service.verify_access_token(token)
    except InvalidTokenError:
        logger.info("access_token_rejected", path=request.url.path)
        raise

    user_id = to_uuid(payload.user_id)
    if user_id is None:
        raise InvalidTokenError("Invalid or expired access token")

    user = await UserRepository(db).get_by_id(user_id)
    if user is None:
        raise AuthenticationError("User no longer exists")
    if user.is_blocked:
        logger.info("blocked_account_rejected", user_id=str(user_id))
        raise AuthorizationError("Account is blocked")
    if user.is_deleted:
        raise NotFoundError("Account is deleted")

    return AuthContext(user_id=user.id, email=payload.email, role=payload.role)


def require_roles(*allowed_roles: Role) -> Callable:
    """Dependency that admits only the given roles. Runs the identity gate first."""

    async def role_checker(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if auth.role not in allowed_roles:
            logger.info("role_rejected", user_id=str(auth.user_id), role=auth.role.value)
            raise AuthorizationError("Insufficient permissions")
        return auth

    return role_checker


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_verification_service(db: AsyncSession = Depends(get_db)) -> VerificationService:
    return VerificationService(db)


def get_google_service(db: AsyncSession = Depends(get_db)) -> GoogleService:
    return GoogleService(db)


def get_user_admin_service(db: AsyncSession = Depends(get_db)) -> UserAdminService:
    return UserAdminService(db)
