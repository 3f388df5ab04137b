"""User model."""

from sqlalchemy import Boolean, Column, DateTime, String

from app.db.base import Base
from app.utils.constants import LoginMethod, Role


class User(Base):
    """User model for authentication.

    Users are never physically removed; ``is_deleted`` marks a soft delete.
    """

    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=True)
    profile_image = Column(String(500), nullable=True)
    role = Column(String(20), nullable=False, default=Role.STUDENT.value)
    login_method = Column(String(20), nullable=False, default=LoginMethod.CREDENTIALS.value)
    email_verified = Column(DateTime, nullable=True)
    last_login_at = Column(DateTime, nullable=True)
    is_blocked = Column(Boolean, default=False, nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
