"""Health check routes"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session
import logging

from adapters import llm_adapter
from api.responses import HealthResponse
from app.config import settings
from domain.models import get_db_session

router = APIRouter(tags=["Health"])
logger = logging.getLogger("chefos.api.health")


@router.get("/health-check", response_model=HealthResponse)
def health_check():
    """Basic liveness check"""
    return HealthResponse(status="ok", service=settings.app_name, version=settings.app_version)


@router.get("/health/ready", response_model=HealthResponse)
def readiness_check(db: Session = Depends(get_db_session)):
    """Readiness: database round trip plus AI wizard availability."""
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        logger.warning(f"Database readiness check failed: {e}")
        database = "unavailable"
    return HealthResponse(
        status="ok" if database == "ok" else "degraded",
        service=settings.app_name,
        version=settings.app_version,
        database=database,
        ai="ok" if settings.ai_enabled and llm_adapter.is_available() else "disabled",
    )
