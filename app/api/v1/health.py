"""Health check endpoint with database connectivity and session count."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import get_session_store
from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.core.sessions import SessionStore
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
        active_sessions=len(store),
    )
