"""Pydantic request/response schemas."""

from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    RegisterRequest,
    SessionUser,
    StatusResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.history import (
    AdminHistoryListResponse,
    AdminHistoryRecordOut,
    DeleteAllResponse,
    HistoryListResponse,
    HistoryRecordOut,
    SaveHistoryRequest,
    SaveHistoryResponse,
)

__all__ = [
    "AdminHistoryListResponse",
    "AdminHistoryRecordOut",
    "DeleteAllResponse",
    "HealthResponse",
    "HistoryListResponse",
    "HistoryRecordOut",
    "LoginRequest",
    "LoginResponse",
    "MeResponse",
    "RegisterRequest",
    "SaveHistoryRequest",
    "SaveHistoryResponse",
    "SessionUser",
    "StatusResponse",
]
