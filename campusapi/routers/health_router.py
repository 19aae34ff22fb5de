import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campusapi.config import settings
from campusapi.database.session import get_db
from campusapi.schemas.health import HealthCheckResponse
from campusapi.utils.timezone_utils import utc_now

router = APIRouter()
logger = logging.getLogger("campusapi")


@router.get("/health", response_model=HealthCheckResponse)
def health_check(db: Session = Depends(get_db)) -> HealthCheckResponse:
    """Health check endpoint with a database ping."""

    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check database ping failed: {str(e)}")
        return HealthCheckResponse(
            status="degraded",
            environment=settings.ENVIRONMENT,
            database="unavailable",
            checked_at=utc_now(),
            error=str(e),
        )

    return HealthCheckResponse(environment=settings.ENVIRONMENT, checked_at=utc_now())
