"""Request/response schemas for auth endpoints and the session snapshot."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.models.user import Role


class RegisterRequest(BaseModel):
    """New account details. Length and format rules are enforced by the user service."""

    username: str = Field(..., description="Display name")
    email: str = Field(..., description="Login email (unique)")
    password: str = Field(..., description="Password (at least 6 characters)")
    location: str | None = Field(default=None, description="Optional free-form location")


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., description="Login email")
    password: str = Field(..., description="Password")


class SessionUser(BaseModel):
    """
    Snapshot of the authenticated user, captured once at login.

    Frozen: the session keeps the values from login time even if the
    underlying users row changes later.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    email: str
    username: str
    location: str | None = None
    role: Role


class StatusResponse(BaseModel):
    """Generic outcome envelope shared by all mutating endpoints."""

    status: Literal["ok", "error"] = "ok"
    message: str


class LoginResponse(StatusResponse):
    """Successful login; the session token travels in a cookie, not the body."""

    role: Role


class MeResponse(BaseModel):
    """Current session state; all fields are null for anonymous callers."""

    logged_in: bool
    role: Role | None = None
    username: str | None = None
    location: str | None = None
