"""Admin-only history endpoints: list every user's records and purge them."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin
from app.core.database import get_db
from app.schemas.auth import SessionUser, StatusResponse
from app.schemas.history import (
    AdminHistoryListResponse,
    AdminHistoryRecordOut,
    DeleteAllResponse,
    HistoryRecordOut,
)
from app.services.history import delete_all, delete_one, list_all

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/history", response_model=AdminHistoryListResponse)
def get_all_history(
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[SessionUser, Depends(require_admin)],
) -> AdminHistoryListResponse:
    """Return all records with owner username, email and location, most recent first."""
    items = []
    for record, username, email, location in list_all(db):
        base = HistoryRecordOut.model_validate(record)
        items.append(
            AdminHistoryRecordOut(
                **base.model_dump(),
                username=username,
                email=email,
                location=location,
            )
        )
    return AdminHistoryListResponse(data=items)


@router.delete("/history/{record_id}", response_model=StatusResponse)
def delete_history_entry(
    record_id: int,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[SessionUser, Depends(require_admin)],
) -> StatusResponse:
    """Delete one record by id. 404 if it does not exist."""
    delete_one(db, record_id)
    logger.info("Admin id=%s deleted history id=%s", admin.id, record_id)
    return StatusResponse(message="Entry deleted")


@router.delete("/history", response_model=DeleteAllResponse)
def delete_all_history(
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[SessionUser, Depends(require_admin)],
) -> DeleteAllResponse:
    """Delete every history record. Returns how many were removed."""
    deleted = delete_all(db)
    logger.info("Admin id=%s purged history: records_deleted=%s", admin.id, deleted)
    return DeleteAllResponse(message="All history deleted", deleted=deleted)
