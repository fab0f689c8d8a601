"""Pytest configuration and fixtures."""

import os

# Must be set before app modules read settings
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.core.security import get_password_hash, sign_token
from app.core.state_machine import ResumeStatusPolicy
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.resume import Resume
from app.models.user import User, UserRole
from app.services.session_service import SessionConfig, SessionManager
from app.services.workflow_service import StatusWorkflowService


# Test database URL (use in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "testpassword"
INTRODUCTION = (
    "Backend engineer with six years of experience building payment and "
    "logistics platforms in Python, focused on reliable data pipelines, "
    "clear APIs and careful operational practices."
)


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_config() -> SessionConfig:
    """Signing config matching the application's test settings."""
    return SessionConfig.from_settings(settings)


@pytest.fixture
def status_policy() -> ResumeStatusPolicy:
    """Default resume status whitelist."""
    return ResumeStatusPolicy.from_settings(settings)


@pytest.fixture
def session_manager(db_session: AsyncSession, session_config: SessionConfig) -> SessionManager:
    """Create session manager instance."""
    return SessionManager(db_session, session_config)


@pytest.fixture
def workflow_service(
    db_session: AsyncSession, status_policy: ResumeStatusPolicy
) -> StatusWorkflowService:
    """Create workflow service instance."""
    return StatusWorkflowService(db_session, status_policy)


async def _create_user(db_session: AsyncSession, email: str, name: str, role: UserRole) -> User:
    user = User(
        email=email,
        hashed_password=get_password_hash(TEST_PASSWORD),
        name=name,
        role=role.value,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory creating extra users with the shared test password."""
    async def _make(email: str, name: str, role: UserRole = UserRole.APPLICANT) -> User:
        return await _create_user(db_session, email, name, role)

    return _make


@pytest.fixture
def resume_payload() -> dict[str, str]:
    """Valid resume creation body."""
    return {"title": "Backend Engineer", "introduction": INTRODUCTION}


@pytest.fixture
async def applicant(db_session: AsyncSession) -> User:
    """Create a test applicant."""
    return await _create_user(db_session, "applicant@example.com", "Applicant", UserRole.APPLICANT)


@pytest.fixture
async def recruiter(db_session: AsyncSession) -> User:
    """Create a test recruiter."""
    return await _create_user(db_session, "recruiter@example.com", "Recruiter", UserRole.RECRUITER)


@pytest.fixture
async def resume(db_session: AsyncSession, applicant: User) -> Resume:
    """Create a resume owned by the test applicant, in SUBMITTED status."""
    resume = Resume(
        user_id=applicant.id,
        user_resume_id=1,
        title="Backend Engineer",
        introduction=INTRODUCTION,
        status="SUBMITTED",
    )
    db_session.add(resume)
    await db_session.commit()
    await db_session.refresh(resume)
    return resume


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(session_manager: SessionManager):
    """Build bearer headers carrying a fresh access token for a user."""
    def _headers(user: User) -> dict[str, str]:
        config = session_manager.config
        token = sign_token(
            {"sub": str(user.id), "type": "access"},
            config.access_secret_key,
            config.access_token_ttl,
            config.algorithm,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
