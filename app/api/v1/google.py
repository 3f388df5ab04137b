"""Google OAuth endpoints."""

from fastapi import APIRouter, Depends, status

from app.api.deps import get_google_service
from app.schemas.auth import AuthResponse, UserResponse
from app.schemas.google import (
    AccountResponse,
    GoogleLoginRequest,
    GoogleRegisterRequest,
    GoogleRegisterResponse,
)
from app.services.google_service import GoogleService

router = APIRouter()


@router.post("/register", response_model=GoogleRegisterResponse, status_code=status.HTTP_201_CREATED)
async def google_register(request: GoogleRegisterRequest, service: GoogleService = Depends(get_google_service)):
    """Store a Google user and linked account as reported by the frontend."""
    user, account = await service.register(request)
    return GoogleRegisterResponse(
        message="Google user registered successfully",
        user=UserResponse.model_validate(user),
        account=AccountResponse.model_validate(account),
    )


@router.post("/login", response_model=AuthResponse)
async def google_login(request: GoogleLoginRequest, service: GoogleService = Depends(get_google_service)):
    """Login with a Google ID token; auto-registers users that do not exist yet."""
    user, tokens = await service.login_with_id_token(request.id_token)
    return AuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )
