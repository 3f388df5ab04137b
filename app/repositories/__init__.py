"""Repositories: the only code that talks to the database."""

from app.repositories.account_repository import AccountRepository
from app.repositories.profile_repository import ProfileRepository
from app.repositories.session_repository import SessionRepository
from app.repositories.user_repository import UserRepository
from app.repositories.verification_repository import VerificationTokenRepository

__all__ = [
    "AccountRepository",
    "ProfileRepository",
    "SessionRepository",
    "UserRepository",
    "VerificationTokenRepository",
]
