"""Resume model."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.db.base import Base


class Resume(Base):
    """Resume submitted by an applicant."""

    __tablename__ = "resumes"
    __table_args__ = (
        UniqueConstraint("user_id", "user_resume_id", name="uq_resumes_user_sequence"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_resume_id = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False)
    introduction = Column(Text, nullable=False)
    # Written only by StatusWorkflowService once the resume exists
    status = Column(String(50), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    # Relationships
    owner = relationship("User", back_populates="resumes")
    logs = relationship(
        "ResumeLog", back_populates="resume", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Resume(id={self.id}, user_resume_id={self.user_resume_id}, status={self.status})>"
