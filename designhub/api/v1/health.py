"""Health check endpoint with database connectivity."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from designhub.core.config import get_settings
from designhub.core.database import check_db_connected, get_db
from designhub.schemas.health import DatabaseStatus, HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """Always 200; a down database shows up as status 'degraded'."""
    connected = check_db_connected(db)
    return HealthResponse(
        status="ok" if connected else "degraded",
        environment=get_settings().APP_ENV,
        database=DatabaseStatus(connected=connected, kind="ok" if connected else "store_unavailable"),
    )
