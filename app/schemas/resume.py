"""Resume and review workflow schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

MIN_INTRODUCTION_LENGTH = 150


class ResumeCreate(BaseModel):
    """Schema for creating a resume."""

    title: str = Field(..., min_length=1, max_length=255)
    introduction: str = Field(..., min_length=MIN_INTRODUCTION_LENGTH)


class ResumeResponse(BaseModel):
    """Schema for resume response."""

    id: UUID
    user_id: UUID
    user_resume_id: int
    title: str
    introduction: str
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ResumeStatusUpdate(BaseModel):
    """
    Schema for a status change request.

    Status membership and reason presence are checked by the workflow
    service so they surface as typed workflow errors.
    """

    status: str
    reason: str = ""


class StatusChangeResponse(BaseModel):
    """Schema for one status change record."""

    id: int
    resume_id: UUID
    recruiter_id: UUID
    previous_status: str
    new_status: str
    reason: str
    created_at: datetime

    class Config:
        from_attributes = True


class StatusLogResponse(StatusChangeResponse):
    """Status change record with the acting recruiter's name."""

    recruiter_name: str
