"""Pydantic schemas for request/response validation."""

from app.schemas.session import AccountClaims, TokenPair
from app.schemas.user import UserCreate, UserLogin, UserResponse, Token, SignOutResponse
from app.schemas.resume import (
    ResumeCreate,
    ResumeResponse,
    ResumeStatusUpdate,
    StatusChangeResponse,
    StatusLogResponse,
)

__all__ = [
    "AccountClaims",
    "TokenPair",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "Token",
    "SignOutResponse",
    "ResumeCreate",
    "ResumeResponse",
    "ResumeStatusUpdate",
    "StatusChangeResponse",
    "StatusLogResponse",
]
