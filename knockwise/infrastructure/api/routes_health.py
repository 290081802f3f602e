"""Health check: database connectivity and the activation job."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from knockwise.adapters.persistence.database import get_session
from knockwise.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request, session: AsyncSession = Depends(get_session)):
    """Degraded when the database is unreachable or the enabled scheduler has died."""
    try:
        await session.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {e}"

    job = getattr(request.app.state, "activation_job", None)
    if not settings.scheduler_enabled:
        scheduler_status = "disabled"
    elif job is not None and job.running:
        scheduler_status = "running"
    else:
        scheduler_status = "stopped"

    healthy = db_status == "connected" and scheduler_status != "stopped"
    return {
        "status": "ok" if healthy else "degraded",
        "database": db_status,
        "activation_job": scheduler_status,
    }
