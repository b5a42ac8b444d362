import time
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from school_records.config.settings import settings
from school_records.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("")
def health_check():
    """Liveness probe. Never touches the database."""
    return {
        "status": "healthy",
        "environment": settings.APP_ENV,
        "timestamp": time.time(),
    }


@router.get("/database")
def database_health(db: Session = Depends(get_db)):
    """
    Run a trivial query; 503 when the database can't answer.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {str(e)}")
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": {"connected": False, "error": str(e)}},
        )
    return {"status": "healthy", "database": {"connected": True}}
