"""Health check endpoint with optional database connectivity check."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inventory.core.config import settings
from inventory.core.database import check_db_connected, get_db
from inventory.schemas.health import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring; does not require a session.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
        session_backend=settings.SESSION_BACKEND,
    )
