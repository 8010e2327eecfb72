from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlmodel import Session, text

from app.core.config import settings
from app.db.core import get_session

router = APIRouter(tags=["Health"])


@router.get("/", status_code=status.HTTP_200_OK, summary="Liveness probe")
def index():
    return {"status": "API is running", "service": settings.app_name}


@router.get("/readiness", status_code=status.HTTP_200_OK, summary="Readiness probe")
def readiness_check(session: Session = Depends(get_session)):
    """Ready only when the record store answers a trivial query."""
    try:
        session.exec(text("SELECT 1")).one()
    except Exception:
        logger.exception("Record store readiness check failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not ready"
        )

    return {"status": "ready", "database": "online"}
