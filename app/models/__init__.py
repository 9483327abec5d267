"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.history import HistoryRecord
from app.models.user import Role, User

__all__ = ["Base", "HistoryRecord", "Role", "User"]
