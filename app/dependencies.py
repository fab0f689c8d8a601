"""FastAPI dependencies for authentication, authorization and services."""

from typing import Annotated, Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer, OAuth2PasswordBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidToken, PersistenceUnavailable
from app.core.state_machine import ResumeStatusPolicy
from app.db.session import get_db
from app.models.user import User, UserRole
from app.schemas.session import AccountClaims
from app.services.resume_service import ResumeService
from app.services.session_service import SessionConfig, SessionManager
from app.services.workflow_service import StatusWorkflowService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/sign-in")
refresh_scheme = HTTPBearer(scheme_name="RefreshToken")


def get_session_config(request: Request) -> SessionConfig:
    """Signing config built at startup."""
    return request.app.state.session_config


def get_status_policy(request: Request) -> ResumeStatusPolicy:
    """Resume status whitelist built at startup."""
    return request.app.state.status_policy


async def get_session_manager(
    db: Annotated[AsyncSession, Depends(get_db)],
    config: Annotated[SessionConfig, Depends(get_session_config)],
) -> SessionManager:
    return SessionManager(db, config)


async def get_workflow_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    policy: Annotated[ResumeStatusPolicy, Depends(get_status_policy)],
) -> StatusWorkflowService:
    return StatusWorkflowService(db, policy)


async def get_resume_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    policy: Annotated[ResumeStatusPolicy, Depends(get_status_policy)],
) -> ResumeService:
    return ResumeService(db, policy)


async def _load_account(db: AsyncSession, claims: AccountClaims) -> User:
    try:
        user = await db.get(User, claims.account_id)
    except SQLAlchemyError as e:
        raise PersistenceUnavailable() from e
    if user is None:
        raise InvalidToken("Account no longer exists")
    return user


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get current authenticated user from an access token."""
    claims = sessions.verify_access(token)
    return await _load_account(db, claims)


async def get_refresh_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(refresh_scheme)],
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get the user presenting a live refresh token."""
    claims = await sessions.verify_refresh(credentials.credentials)
    return await _load_account(db, claims)


def require_roles(*roles: UserRole) -> Callable:
    """Build a dependency that admits only users holding one of ``roles``."""
    allowed = {role.value for role in roles}

    async def _require_roles(
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        if current_user.role not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Permission denied")
        return current_user

    return _require_roles
