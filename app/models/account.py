"""Linked external identity model."""

from sqlalchemy import Column, ForeignKey, String, Text, UniqueConstraint, Uuid

from app.db.base import Base


class Account(Base):
    """A provider identity linked to a user.

    ``access_token``/``refresh_token`` are the provider's own opaque tokens, not
    the JWTs this service issues.
    """

    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint("provider", "provider_id", name="uq_accounts_provider_provider_id"),
    )

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    provider = Column(String(20), nullable=False)
    provider_id = Column(String(255), nullable=True)
    access_token = Column(Text, nullable=True)
    refresh_token = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Account {self.provider}:{self.provider_id} user={self.user_id}>"
