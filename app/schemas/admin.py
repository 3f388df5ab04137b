"""Admin schemas for user moderation."""

from app.schemas.auth import UserResponse


class AdminUserResponse(UserResponse):
    is_blocked: bool
    is_deleted: bool
