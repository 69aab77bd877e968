"""
Health check endpoints
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quizhub import __version__
from quizhub.api.deps import get_session_store
from quizhub.core.config import settings
from quizhub.core.database import DatabaseHealthCheck, get_db
from quizhub.db.session_store import DeliverySessionStore

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check"""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": __version__,
    }


@router.get("/health/detailed")
async def detailed_health_check(
    db: Session = Depends(get_db),
    store: DeliverySessionStore = Depends(get_session_store),
):
    """Detailed health check"""
    health_status = {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": __version__,
        "environment": settings.ENVIRONMENT,
        "checks": {},
    }

    database = DatabaseHealthCheck.check_connection(db)
    health_status["checks"]["database"] = database
    if database["status"] != "healthy":
        health_status["status"] = "degraded"

    health_status["checks"]["sessions"] = {
        "backend": store.backend,
        "redis": "connected" if store.is_connected else "disconnected",
    }

    return health_status
