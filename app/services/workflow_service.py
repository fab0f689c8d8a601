"""Resume review workflow: guarded status changes with an audit trail."""

from typing import AsyncIterator
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidStatus, MissingReason, PersistenceUnavailable, ResumeNotFound
from app.core.state_machine import ResumeStatusPolicy
from app.models.resume import Resume
from app.models.resume_log import ResumeLog

logger = structlog.get_logger(__name__)


class StatusHistory:
    """
    Status change records of one resume, newest first.

    Nothing is queried until iteration starts, and every ``async for``
    runs the query again.
    """

    def __init__(self, db: AsyncSession, resume_id: UUID) -> None:
        self.db = db
        self.resume_id = resume_id

    def _query(self):
        return (
            select(ResumeLog)
            .where(ResumeLog.resume_id == self.resume_id)
            .order_by(ResumeLog.created_at.desc(), ResumeLog.id.desc())
        )

    async def __aiter__(self) -> AsyncIterator[ResumeLog]:
        try:
            result = await self.db.execute(self._query())
            records = result.unique().scalars().all()
        except SQLAlchemyError as e:
            logger.error("persistence_error", operation="list_history", error=str(e))
            raise PersistenceUnavailable() from e
        for record in records:
            yield record

    async def all(self) -> list[ResumeLog]:
        return [record async for record in self]


class StatusWorkflowService:
    """Service for changing resume review status."""

    def __init__(self, db: AsyncSession, policy: ResumeStatusPolicy) -> None:
        """Initialize workflow service with database session and status policy."""
        self.db = db
        self.policy = policy

    async def change_status(
        self, resume_id: UUID, acting_account_id: UUID, new_status: str, reason: str
    ) -> ResumeLog:
        """
        Move a resume to a new status and record the transition.

        The status update and the audit insert commit together or not at
        all. The resume row is locked for the read, so concurrent changes to
        the same resume are applied one after another.

        Args:
            resume_id: Resume to change
            acting_account_id: Reviewer performing the change
            new_status: Target status, must be in the policy whitelist
            reason: Free-text justification, must not be blank

        Returns:
            The created ResumeLog

        Raises:
            InvalidStatus: If new_status is not an allowed status
            MissingReason: If reason is empty
            ResumeNotFound: If the resume does not exist
            PersistenceUnavailable: If the database failed; nothing was written
        """
        is_valid, error = self.policy.validate_status(new_status)
        if not is_valid:
            raise InvalidStatus(error)

        if not reason or not reason.strip():
            raise MissingReason()

        try:
            result = await self.db.execute(
                select(Resume)
                .where(Resume.id == resume_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            resume = result.scalar_one_or_none()
            if resume is None:
                await self.db.rollback()
                raise ResumeNotFound(f"Resume not found: {resume_id}")

            previous_status = resume.status
            resume.status = new_status
            log = ResumeLog(
                resume_id=resume.id,
                recruiter_id=acting_account_id,
                previous_status=previous_status,
                new_status=new_status,
                reason=reason,
            )
            self.db.add(log)

            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("persistence_error", operation="change_status", error=str(e))
            raise PersistenceUnavailable() from e

        logger.info(
            "resume_status_changed",
            resume_id=str(resume_id),
            recruiter_id=str(acting_account_id),
            previous_status=previous_status,
            new_status=new_status,
        )
        return log

    def history(self, resume_id: UUID) -> StatusHistory:
        """Lazy, restartable view of a resume's status change records."""
        return StatusHistory(self.db, resume_id)

    async def list_history(self, resume_id: UUID) -> list[ResumeLog]:
        """Get all status change records of a resume, newest first."""
        return await self.history(resume_id).all()
