"""History endpoints for the logged-in user: save a calculation, list own records."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import require_user
from app.core.database import get_db
from app.schemas.auth import SessionUser
from app.schemas.history import (
    HistoryListResponse,
    HistoryRecordOut,
    SaveHistoryRequest,
    SaveHistoryResponse,
)
from app.services.history import list_own, save_history

router = APIRouter()


@router.post("", response_model=SaveHistoryResponse, status_code=201)
def post_history(
    body: SaveHistoryRequest,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[SessionUser, Depends(require_user)],
) -> SaveHistoryResponse:
    """
    Save one usage calculation for the current user.

    The owner is always the session user; the timestamp is assigned by the server.
    """
    record = save_history(
        db,
        owner_id=user.id,
        appliances_json=body.appliances_json,
        total_kwh=body.total_kwh,
        total_cost=body.total_cost,
        model_used=body.model_used,
    )
    return SaveHistoryResponse(message="History saved successfully", id=record.id)


@router.get("", response_model=HistoryListResponse)
def get_own_history(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[SessionUser, Depends(require_user)],
) -> HistoryListResponse:
    """Return the current user's records, most recent first."""
    records = list_own(db, user.id)
    return HistoryListResponse(
        data=[HistoryRecordOut.model_validate(r) for r in records]
    )
