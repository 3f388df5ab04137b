"""One-time verification code model."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid

from app.db.base import Base
from app.utils.constants import VerificationKind


class VerificationToken(Base):
    __tablename__ = "verification_tokens"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    code = Column(String(6), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    kind = Column(String(30), nullable=False, default=VerificationKind.EMAIL_VERIFICATION.value)

    def __repr__(self):
        return f"<VerificationToken {self.kind} user={self.user_id}>"
