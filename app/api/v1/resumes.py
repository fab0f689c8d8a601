"""Resume and review workflow endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from app.models.user import User, UserRole
from app.schemas.resume import (
    ResumeCreate,
    ResumeResponse,
    ResumeStatusUpdate,
    StatusChangeResponse,
    StatusLogResponse,
)
from app.services.resume_service import ResumeService
from app.services.workflow_service import StatusWorkflowService
from app.dependencies import (
    get_current_user,
    get_resume_service,
    get_workflow_service,
    require_roles,
)

router = APIRouter()


@router.post("", response_model=ResumeResponse, status_code=status.HTTP_201_CREATED)
async def create_resume(
    resume_data: ResumeCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    resumes: Annotated[ResumeService, Depends(get_resume_service)],
) -> ResumeResponse:
    """
    Create a resume owned by the current user.

    - **title**: Resume title
    - **introduction**: Self introduction (min 150 characters)
    """
    resume = await resumes.create_resume(
        user_id=current_user.id, title=resume_data.title, introduction=resume_data.introduction
    )
    return ResumeResponse.model_validate(resume)


@router.get("/{resume_id}", response_model=ResumeResponse, status_code=status.HTTP_200_OK)
async def get_resume(
    resume_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    resumes: Annotated[ResumeService, Depends(get_resume_service)],
) -> ResumeResponse:
    """
    Get resume details by ID.

    Recruiters may read any resume; applicants only their own.
    Returns 404 if resume not found, 403 if not authorized.
    """
    resume = await resumes.get_resume(resume_id)
    if not resume:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume not found")

    if resume.user_id != current_user.id and not current_user.is_recruiter:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to access this resume"
        )

    return ResumeResponse.model_validate(resume)


@router.patch(
    "/{resume_id}/status", response_model=StatusChangeResponse, status_code=status.HTTP_200_OK
)
async def change_resume_status(
    resume_id: UUID,
    update: ResumeStatusUpdate,
    current_user: Annotated[User, Depends(require_roles(UserRole.RECRUITER))],
    workflow: Annotated[StatusWorkflowService, Depends(get_workflow_service)],
) -> StatusChangeResponse:
    """
    Change a resume's review status. Recruiters only.

    - **status**: New status, one of the configured statuses
    - **reason**: Why the status is changing (required)

    Returns the created status change record.
    """
    log = await workflow.change_status(
        resume_id=resume_id,
        acting_account_id=current_user.id,
        new_status=update.status,
        reason=update.reason,
    )
    return StatusChangeResponse.model_validate(log)


@router.get(
    "/{resume_id}/logs", response_model=list[StatusLogResponse], status_code=status.HTTP_200_OK
)
async def list_resume_logs(
    resume_id: UUID,
    current_user: Annotated[User, Depends(require_roles(UserRole.RECRUITER))],
    workflow: Annotated[StatusWorkflowService, Depends(get_workflow_service)],
) -> list[StatusLogResponse]:
    """List a resume's status changes, newest first. Recruiters only."""
    return [
        StatusLogResponse(
            **StatusChangeResponse.model_validate(log).model_dump(),
            recruiter_name=log.recruiter.name,
        )
        async for log in workflow.history(resume_id)
    ]
