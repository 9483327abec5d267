"""Request/response schemas for usage history endpoints."""

import json
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SaveHistoryRequest(BaseModel):
    """One computed usage session as submitted by the calculator client."""

    appliances_json: str | None = Field(
        default=None,
        description="Serialized appliance list; JSON arrays/objects are serialized on receipt.",
    )
    total_kwh: float | None = Field(
        default=None, allow_inf_nan=False, description="Total energy (kWh)"
    )
    total_cost: float | None = Field(
        default=None, allow_inf_nan=False, description="Total estimated cost"
    )
    model_used: str | None = Field(
        default=None,
        max_length=255,
        description="Label of the estimation model that produced the numbers",
    )

    @field_validator("appliances_json", mode="before")
    @classmethod
    def serialize_appliances(cls, v: Any) -> Any:
        if isinstance(v, (list, dict)):
            return json.dumps(v)
        return v


class HistoryRecordOut(BaseModel):
    """A history row as returned to its owner."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int | None
    appliances_json: str | None
    total_kwh: float | None
    total_cost: float | None
    model_used: str | None
    timestamp: datetime | None

    @field_validator("timestamp")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        # SQLite returns CURRENT_TIMESTAMP (UTC) without an offset.
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class AdminHistoryRecordOut(HistoryRecordOut):
    """A history row joined with its owner's account details."""

    username: str | None = None
    email: str | None = None
    location: str | None = None


class HistoryListResponse(BaseModel):
    """Response for the owner's history list."""

    status: Literal["ok"] = "ok"
    data: list[HistoryRecordOut]


class AdminHistoryListResponse(BaseModel):
    """Response for the admin-wide history list."""

    status: Literal["ok"] = "ok"
    data: list[AdminHistoryRecordOut]


class SaveHistoryResponse(BaseModel):
    """Response after persisting a history record."""

    status: Literal["ok"] = "ok"
    message: str
    id: int


class DeleteAllResponse(BaseModel):
    """Response after purging all history."""

    status: Literal["ok"] = "ok"
    message: str
    deleted: int = Field(..., ge=0, description="Number of records removed")
