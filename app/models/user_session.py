"""Refresh-token session model."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid

from app.db.base import Base


class UserSession(Base):
    """One signed-in device. The row keeps its id across refresh-token rotation."""

    __tablename__ = "sessions"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    refresh_token = Column(String(2048), index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<UserSession user={self.user_id} expires={self.expires_at}>"
