"""Resume status change log model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.db.base import Base


class ResumeLog(Base):
    """Append-only audit record of one resume status transition."""

    __tablename__ = "resume_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    resume_id = Column(
        UUID(as_uuid=True), ForeignKey("resumes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    recruiter_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    previous_status = Column(String(50), nullable=False)
    new_status = Column(String(50), nullable=False)
    reason = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False, index=True)

    # Relationships
    resume = relationship("Resume", back_populates="logs")
    recruiter = relationship("User", lazy="joined")

    def __repr__(self) -> str:
        return (
            f"<ResumeLog(id={self.id}, resume_id={self.resume_id}, "
            f"{self.previous_status}->{self.new_status})>"
        )
