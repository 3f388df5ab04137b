"""Admin endpoints for user moderation."""

from fastapi import APIRouter, Depends

from app.api.deps import AuthContext, get_user_admin_service, require_roles
from app.core.exceptions import NotFoundError
from app.schemas.admin import AdminUserResponse
from app.services.user_admin_service import UserAdminService
from app.utils.constants import Role
from app.utils.helpers import to_uuid

router = APIRouter()

require_admin = require_roles(Role.ADMIN)


def _user_uuid(user_id: str):
    # A malformed id cannot name an existing user
    value = to_uuid(user_id)
    if value is None:
        raise NotFoundError("User not found")
    return value


@router.patch("/users/{user_id}/block", response_model=AdminUserResponse)
async def block_user(
    user_id: str,
    admin: AuthContext = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
):
    """Block a user and revoke their sessions."""
    user = await service.block(_user_uuid(user_id), admin.user_id)
    return AdminUserResponse.model_validate(user)


@router.patch("/users/{user_id}/unblock", response_model=AdminUserResponse)
async def unblock_user(
    user_id: str,
    admin: AuthContext = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
):
    user = await service.unblock(_user_uuid(user_id), admin.user_id)
    return AdminUserResponse.model_validate(user)


@router.delete("/users/{user_id}", response_model=AdminUserResponse)
async def delete_user(
    user_id: str,
    admin: AuthContext = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
):
    """Soft-delete a user and revoke their sessions."""
    user = await service.soft_delete(_user_uuid(user_id), admin.user_id)
    return AdminUserResponse.model_validate(user)
