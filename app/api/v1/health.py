"""Health check endpoints."""

from typing import Any

from fastapi import APIRouter, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.db.session import engine

router = APIRouter()


async def check_database() -> dict[str, Any]:
    """Check database connectivity."""
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        return {"status": "healthy", "message": "Database connection successful"}
    except SQLAlchemyError as e:
        return {"status": "unhealthy", "message": str(e)}


@router.get("", status_code=status.HTTP_200_OK)
async def health_check() -> dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "healthy"}


@router.get("/detailed", status_code=status.HTTP_200_OK)
async def detailed_health_check() -> dict[str, Any]:
    """Detailed health check with component status."""
    db_status = await check_database()

    return {
        "status": "healthy" if db_status["status"] == "healthy" else "degraded",
        "components": {
            "database": db_status,
        },
    }
