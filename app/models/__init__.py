"""Database models."""

# Import all models in dependency order so foreign keys resolve
from app.models.user import User

from app.models.account import Account
from app.models.user_session import UserSession
from app.models.verification_token import VerificationToken
from app.models.profile import Profile

# Export all models
__all__ = [
    "User",
    "Account",
    "UserSession",
    "VerificationToken",
    "Profile",
]
