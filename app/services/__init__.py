"""Application services."""

from app.services.session_service import SessionConfig, SessionManager
from app.services.workflow_service import StatusHistory, StatusWorkflowService
from app.services.resume_service import ResumeService

__all__ = [
    "SessionConfig",
    "SessionManager",
    "StatusHistory",
    "StatusWorkflowService",
    "ResumeService",
]
