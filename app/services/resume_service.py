"""Resume service for creating and reading resumes."""

from uuid import UUID

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.state_machine import ResumeStatusPolicy
from app.models.resume import Resume

logger = structlog.get_logger(__name__)

# Per-user sequence numbers are assigned as max + 1; a concurrent create for
# the same user can collide on the unique constraint and is retried.
_SEQUENCE_ATTEMPTS = 3


class ResumeService:
    """Service for resume management operations."""

    def __init__(self, db: AsyncSession, policy: ResumeStatusPolicy) -> None:
        """Initialize resume service with database session and status policy."""
        self.db = db
        self.policy = policy

    async def _next_user_resume_id(self, user_id: UUID) -> int:
        result = await self.db.execute(
            select(func.max(Resume.user_resume_id)).where(Resume.user_id == user_id)
        )
        current = result.scalar_one_or_none()
        return (current or 0) + 1

    async def create_resume(self, user_id: UUID, title: str, introduction: str) -> Resume:
        """
        Create a resume for its owner.

        Args:
            user_id: Owner of the resume
            title: Resume title
            introduction: Resume body text

        Returns:
            Created Resume in the policy's initial status
        """
        for attempt in range(1, _SEQUENCE_ATTEMPTS + 1):
            resume = Resume(
                user_id=user_id,
                user_resume_id=await self._next_user_resume_id(user_id),
                title=title,
                introduction=introduction,
                status=self.policy.initial_status,
            )
            self.db.add(resume)
            try:
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                if attempt == _SEQUENCE_ATTEMPTS:
                    raise
                logger.warning("resume_sequence_conflict", user_id=str(user_id), attempt=attempt)
                continue

            logger.info(
                "resume_created",
                resume_id=str(resume.id),
                user_id=str(user_id),
                user_resume_id=resume.user_resume_id,
            )
            return resume

    async def get_resume(self, resume_id: UUID) -> Resume | None:
        """Get resume by ID with its owner loaded."""
        result = await self.db.execute(
            select(Resume).options(selectinload(Resume.owner)).where(Resume.id == resume_id)
        )
        return result.scalar_one_or_none()
