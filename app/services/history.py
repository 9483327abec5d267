"""Usage history persistence, scoped by owner for users and global for admins."""

import logging
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import HistoryRecord, User
from app.services.errors import RecordNotFoundError, StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (record, owner username, owner email, owner location); owner fields are None
# when the owning user no longer exists.
OwnedRecord = tuple[HistoryRecord, str | None, str | None, str | None]


def _run(db: Session, action: str, message: str, fn: Callable[[], T]) -> T:
    """Run fn, translating database failures into StoreError with a generic message."""
    try:
        return fn()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("History %s failed", action)
        raise StoreError(message) from e


def save_history(
    db: Session,
    owner_id: int,
    appliances_json: str | None,
    total_kwh: float | None,
    total_cost: float | None,
    model_used: str | None,
) -> HistoryRecord:
    """Insert one record for owner_id. The timestamp is set by the database."""

    def _insert() -> HistoryRecord:
        record = HistoryRecord(
            user_id=owner_id,
            appliances_json=appliances_json,
            total_kwh=total_kwh,
            total_cost=total_cost,
            model_used=model_used,
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    record = _run(db, "save", "Failed to save history", _insert)
    logger.info("Saved history id=%s for user_id=%s", record.id, owner_id)
    return record


def list_own(db: Session, owner_id: int) -> list[HistoryRecord]:
    """Records owned by owner_id, newest (highest id) first."""
    return _run(
        db,
        "list",
        "Failed to fetch history",
        lambda: db.query(HistoryRecord)
        .filter(HistoryRecord.user_id == owner_id)
        .order_by(HistoryRecord.id.desc())
        .all(),
    )


def list_all(db: Session) -> list[OwnedRecord]:
    """Every record joined with its owner's username, email and location, newest first."""
    rows = _run(
        db,
        "list-all",
        "Failed to fetch data",
        lambda: db.query(HistoryRecord, User.username, User.email, User.location)
        .outerjoin(User, User.id == HistoryRecord.user_id)
        .order_by(HistoryRecord.id.desc())
        .all(),
    )
    return [(row[0], row[1], row[2], row[3]) for row in rows]


def delete_one(db: Session, record_id: int) -> None:
    """Delete a single record. Raises RecordNotFoundError if it does not exist."""

    def _delete() -> int:
        count = (
            db.query(HistoryRecord)
            .filter(HistoryRecord.id == record_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return count

    deleted = _run(db, "delete", "Delete failed", _delete)
    if deleted == 0:
        raise RecordNotFoundError()
    logger.info("Deleted history id=%s", record_id)


def delete_all(db: Session) -> int:
    """Delete every record. Returns the number removed."""

    def _delete() -> int:
        count = db.query(HistoryRecord).delete(synchronize_session=False)
        db.commit()
        return count

    deleted = _run(db, "delete-all", "Delete failed", _delete)
    logger.info("Deleted all history: records_deleted=%s", deleted)
    return deleted
