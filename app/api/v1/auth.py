"""Authentication endpoints."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.models.user import User, UserRole
from app.schemas.user import UserCreate, UserResponse, UserLogin, Token, SignOutResponse
from app.core.security import verify_password, get_password_hash
from app.dependencies import get_refresh_user, get_session_manager
from app.services.session_service import SessionManager

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.post("/sign-up", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(user_data: UserCreate, db: Annotated[AsyncSession, Depends(get_db)]) -> UserResponse:
    """
    Register a new applicant account.

    - **email**: User email (must be unique)
    - **password**: User password (min 8 characters)
    - **confirm_password**: Must match password
    - **name**: Display name
    """
    result = await db.execute(select(User).where(User.email == user_data.email))
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered"
        )

    hashed_password = await run_in_threadpool(get_password_hash, user_data.password)
    user = User(
        email=user_data.email,
        hashed_password=hashed_password,
        name=user_data.name,
        role=UserRole.APPLICANT.value,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent sign-up for the same email
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered"
        )
    await db.refresh(user)

    logger.info("user_registered", user_id=str(user.id))
    return UserResponse.model_validate(user)


@router.post("/sign-in", response_model=Token, status_code=status.HTTP_200_OK)
async def sign_in(
    credentials: UserLogin,
    db: Annotated[AsyncSession, Depends(get_db)],
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
) -> Token:
    """
    Authenticate user and start a session.

    Returns an access token (12 hours) and a refresh token (7 days).
    Signing in again replaces any earlier session.
    """
    result = await db.execute(select(User).where(User.email == credentials.email))
    user = result.scalar_one_or_none()
    if not user or not await run_in_threadpool(
        verify_password, credentials.password, user.hashed_password
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect email or password"
        )

    pair = await sessions.issue_session(user.id)
    return Token(access_token=pair.access_token, refresh_token=pair.refresh_token)


@router.post("/token", response_model=Token, status_code=status.HTTP_200_OK)
async def refresh_session(
    current_user: Annotated[User, Depends(get_refresh_user)],
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
) -> Token:
    """
    Exchange a refresh token for a new token pair.

    Requires the refresh token as a bearer credential. The presented
    refresh token cannot be used again.
    """
    pair = await sessions.rotate_session(current_user.id)
    return Token(access_token=pair.access_token, refresh_token=pair.refresh_token)


@router.post("/sign-out", response_model=SignOutResponse, status_code=status.HTTP_200_OK)
async def sign_out(
    current_user: Annotated[User, Depends(get_refresh_user)],
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
) -> SignOutResponse:
    """Revoke the caller's session. Requires the refresh token as a bearer credential."""
    await sessions.revoke(current_user.id)
    return SignOutResponse(user_id=current_user.id)
