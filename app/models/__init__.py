"""SQLAlchemy models."""

from app.models.user import User, UserRole
from app.models.refresh_token import RefreshToken
from app.models.resume import Resume
from app.models.resume_log import ResumeLog

__all__ = ["User", "UserRole", "RefreshToken", "Resume", "ResumeLog"]
