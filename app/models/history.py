"""ORM model for saved energy-usage calculations."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, func

from app.models.base import Base


class HistoryRecord(Base):
    """
    One saved usage calculation, owned by exactly one user.

    appliances_json is stored as submitted and never interpreted server-side.
    timestamp is assigned by the database on insert.
    """

    __tablename__ = "history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    appliances_json = Column(Text, nullable=True)
    total_kwh = Column(Float, nullable=True)
    total_cost = Column(Float, nullable=True)
    model_used = Column(String(255), nullable=True)
    timestamp = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
