"""Pydantic models for health endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class HealthCheckResponse(BaseModel):
    """Response model for service health checks."""

    status: str = "healthy"
    environment: str
    database: str = "ok"
    checked_at: datetime
    error: Optional[str] = None
