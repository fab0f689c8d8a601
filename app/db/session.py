"""Database session management with async SQLAlchemy."""

from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from app.config import settings


def enable_immediate_transactions(async_engine: AsyncEngine) -> None:
    """
    Make every SQLite transaction take the write lock up front.

    pysqlite defers BEGIN until the first write, so two transactions can read
    the same row before either writes it. Emitting BEGIN IMMEDIATE ourselves
    serializes read-modify-write units across connections.
    """

    @event.listens_for(async_engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(async_engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


# Determine if we're using SQLite (for tests or local dev)
is_sqlite = "sqlite" in settings.DATABASE_URL.lower()
is_memory = ":memory:" in settings.DATABASE_URL

# Create async engine with appropriate pool settings
engine_kwargs = {
    "url": settings.DATABASE_URL,
    "echo": False,
    "pool_pre_ping": True,
}

if is_sqlite and is_memory:
    # One shared connection, otherwise each checkout sees an empty database
    engine_kwargs["poolclass"] = StaticPool
    engine_kwargs["connect_args"] = {"check_same_thread": False}
elif is_sqlite:
    engine_kwargs["poolclass"] = NullPool
    engine_kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
else:
    if settings.ENVIRONMENT == "test":
        engine_kwargs["poolclass"] = NullPool
    else:
        engine_kwargs["pool_size"] = 10
        engine_kwargs["max_overflow"] = 20

engine = create_async_engine(**engine_kwargs)

if is_sqlite and not is_memory:
    enable_immediate_transactions(engine)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
