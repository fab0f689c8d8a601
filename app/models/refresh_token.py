"""Refresh token credential model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.db.base import Base


class RefreshToken(Base):
    """
    Hashed refresh token of an account's current session.

    Keyed by user_id, so an account holds at most one record. Issuing a new
    session overwrites the hash in place.
    """

    __tablename__ = "refresh_tokens"

    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    token_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    # Relationships
    user = relationship("User", back_populates="refresh_token")

    def __repr__(self) -> str:
        return f"<RefreshToken(user_id={self.user_id}, updated_at={self.updated_at})>"
