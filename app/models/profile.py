"""Student profile model."""

from sqlalchemy import JSON, Column, ForeignKey, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB

from app.db.base import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")


class Profile(Base):
    """Profile fields shown on a user's public page."""

    __tablename__ = "profiles"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20))
    image = Column(String(500))
    location = Column(String(255))
    bio = Column(Text)

    # JSON fields
    skills = Column(JSONType, default=list)  # ["Python", "React", ...]
    experience = Column(JSONType, default=list)  # [{"company": "X", "role": "Dev", ...}, ...]
    education = Column(JSONType, default=list)
    projects = Column(JSONType, default=list)
    achievements = Column(JSONType, default=list)

    def __repr__(self):
        return f"<Profile {self.name}>"
