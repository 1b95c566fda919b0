# server/routes/health_routes.py
"""
Health Check Endpoints

- GET /health - Liveness
- GET /health/db - Database status
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session

from core.config import settings
from core.database import get_db
from core.logger import get_logger
from utils.datetime_utils import get_utc_now, to_iso_string

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def get_overall_health():
    """Liveness probe"""
    return {
        "status": "healthy",
        "service": settings.api_title,
        "version": settings.api_version,
        "timestamp": to_iso_string(get_utc_now()),
    }


@router.get("/db")
def check_database_health(db: Session = Depends(get_db)):
    """Check database connection health"""
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        raise HTTPException(status_code=503, detail="Database unavailable")

    return {"status": "healthy", "component": "database", "timestamp": to_iso_string(get_utc_now())}
