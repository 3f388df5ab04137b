"""Authentication endpoints."""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, status

from app.api.deps import (
    AuthContext,
    get_auth_context,
    get_auth_service,
    get_verification_service,
)
from app.schemas.auth import (
    AuthResponse,
    EmailExistsResponse,
    EmailRequest,
    EmailVerifiedResponse,
    LoginRequest,
    PasswordResetConfirm,
    ProfileEnvelope,
    RefreshTokenRequest,
    RegisterRequest,
    TokenRefreshResponse,
    UserResponse,
    VerifyEmailRequest,
    VerifyEmailResponse,
)
from app.schemas.common import MessageResponse
from app.services.auth_service import AuthService
from app.services.email_service import email_service
from app.services.verification_service import VerificationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    """Register a new user."""
    user, tokens = await service.register(request)
    return AuthResponse(
        message="User registered successfully",
        user=UserResponse.model_validate(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """Login with email and password."""
    user, tokens = await service.login(request.email, request.password)
    return AuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


@router.post("/refresh-token", response_model=TokenRefreshResponse)
async def refresh_token(request: RefreshTokenRequest, service: AuthService = Depends(get_auth_service)):
    """Exchange a refresh token for a new token pair."""
    tokens = await service.refresh(request.refresh_token)
    return TokenRefreshResponse(
        message="Tokens refreshed successfully",
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(request: RefreshTokenRequest, service: AuthService = Depends(get_auth_service)):
    """Logout (invalidate one refresh token)."""
    await service.logout(request.refresh_token)
    return MessageResponse(message="Logout successful")


@router.post("/logout-all", response_model=MessageResponse)
async def logout_all(
    auth: AuthContext = Depends(get_auth_context),
    service: AuthService = Depends(get_auth_service),
):
    """Logout from all devices."""
    await service.logout_all(auth.user_id)
    return MessageResponse(message="Logged out from all devices successfully")


@router.get("/profile", response_model=ProfileEnvelope)
async def get_profile(
    auth: AuthContext = Depends(get_auth_context),
    service: AuthService = Depends(get_auth_service),
):
    """Get current user information."""
    user = await service.get_user(auth.user_id)
    return ProfileEnvelope(user=UserResponse.model_validate(user))


@router.post("/create-verification-token", response_model=MessageResponse)
async def create_verification_token(
    request: EmailRequest,
    background_tasks: BackgroundTasks,
    service: VerificationService = Depends(get_verification_service),
):
    """Issue an email verification code and mail it."""
    user, code = await service.create_email_verification(request.email)
    background_tasks.add_task(email_service.send_verification_email, user.email, code)
    return MessageResponse(message="Verification email sent")


@router.post("/verify-email", response_model=VerifyEmailResponse)
async def verify_email(
    request: VerifyEmailRequest,
    service: VerificationService = Depends(get_verification_service),
):
    """Consume an email verification code."""
    await service.verify_email(request.data.email, request.data.code)
    return VerifyEmailResponse(message="Email verified successfully", success=True)


@router.get("/check-email/{email}", response_model=EmailExistsResponse)
async def check_email_exists(email: str, service: AuthService = Depends(get_auth_service)):
    return EmailExistsResponse(exists=await service.email_exists(email))


@router.get("/check-email-verification/{email}", response_model=EmailVerifiedResponse)
async def check_email_verification(
    email: str, service: VerificationService = Depends(get_verification_service)
):
    return EmailVerifiedResponse(verified=await service.is_email_verified(email))


@router.post("/request-password-reset", response_model=MessageResponse)
async def request_password_reset(
    request: EmailRequest,
    background_tasks: BackgroundTasks,
    service: VerificationService = Depends(get_verification_service),
):
    """Mail a password reset code. Same answer whether or not the account exists."""
    issued = await service.request_password_reset(request.email)
    if issued is not None:
        user, code = issued
        background_tasks.add_task(email_service.send_password_reset_email, user.email, code)
    return MessageResponse(message="If the account exists, a reset code has been sent.")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    request: PasswordResetConfirm,
    service: VerificationService = Depends(get_verification_service),
):
    """Set a new password with a reset code; signs out every device."""
    await service.reset_password(request.email, request.code, request.new_password)
    logger.info("Password reset completed")
    return MessageResponse(message="Password updated successfully")
