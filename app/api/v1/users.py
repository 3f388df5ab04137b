"""
User Profile API
GET/PUT for the authenticated user's profile
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import AuthContext, get_auth_context
from app.core.exceptions import NotFoundError
from app.db.session import get_db
from app.repositories import ProfileRepository, UserRepository
from app.schemas.profile import ProfileResponse, ProfileUpdate

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Get the current user's profile."""
    profile = await ProfileRepository(db).get_by_user_id(auth.user_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    return ProfileResponse.model_validate(profile)


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Create or update the current user's profile.
    Only fields present in the request are changed.
    """
    profiles = ProfileRepository(db)
    fields = profile_data.model_dump(mode="json", exclude_unset=True, exclude_none=True)

    if await profiles.get_by_user_id(auth.user_id) is None:
        # A new profile starts from the account's name and email
        user = await UserRepository(db).get_by_id(auth.user_id)
        if user is None:
            raise NotFoundError("User not found")
        fields.setdefault("name", user.name or user.email.split("@")[0])
        fields.setdefault("email", user.email)

    profile = await profiles.upsert(auth.user_id, fields)
    return ProfileResponse.model_validate(profile)
