"""Session login/logout, registration and auth dependencies (require_user, require_admin)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.rbac import AccessLevel, authorize
from app.core.sessions import SessionStore
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    RegisterRequest,
    SessionUser,
    StatusResponse,
)
from app.services.errors import UnauthorizedError
from app.services.users import authenticate, create_user

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_CREDENTIALS = "Invalid email or password."


def get_session_store(request: Request) -> SessionStore:
    """Dependency: the application-wide session store."""
    return request.app.state.session_store


def get_session_token(request: Request) -> str | None:
    """Dependency: the session token from the request cookie, if any."""
    return request.cookies.get(get_settings().SESSION_COOKIE_NAME)


def get_session_user(
    store: Annotated[SessionStore, Depends(get_session_store)],
    token: Annotated[str | None, Depends(get_session_token)],
) -> SessionUser | None:
    """Dependency: the caller's session snapshot, or None for anonymous callers."""
    return store.resolve(token)


def require_user(
    user: Annotated[SessionUser | None, Depends(get_session_user)],
) -> SessionUser:
    """Dependency: require any logged-in user. Raises 401 otherwise."""
    return authorize(user, AccessLevel.USER)


def require_admin(
    user: Annotated[SessionUser | None, Depends(get_session_user)],
) -> SessionUser:
    """Dependency: require a logged-in admin. Same 401 as require_user for everyone else."""
    return authorize(user, AccessLevel.ADMIN)


def _set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite=settings.SESSION_COOKIE_SAMESITE,
        path="/",
    )


def _clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite=settings.SESSION_COOKIE_SAMESITE,
        path="/",
    )


@router.post("/register", response_model=StatusResponse)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> StatusResponse:
    """
    Create a user account with role 'user'.

    Username must be non-empty, email must contain '@' and password must be
    at least 6 characters. Returns 409 if the email is already registered.
    """
    create_user(
        db,
        username=body.username,
        email=body.email,
        password=body.password,
        location=body.location,
    )
    return StatusResponse(message="Registration successful. Please log in.")


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[SessionStore, Depends(get_session_store)],
    token: Annotated[str | None, Depends(get_session_token)],
) -> LoginResponse:
    """
    Authenticate with email and password and start a session.

    The session token is returned in an HttpOnly cookie. Unknown email and
    wrong password produce the same 401 response.
    """
    user = authenticate(db, body.email, body.password)
    if user is None:
        logger.info("Login failed for email=%s", body.email)
        raise UnauthorizedError(INVALID_CREDENTIALS)

    # A client holds at most one session; drop any it is still presenting.
    store.destroy(token)
    snapshot = SessionUser.model_validate(user)
    _set_session_cookie(response, store.create(snapshot))
    logger.info("Login succeeded for user id=%s role=%s", user.id, user.role.value)
    return LoginResponse(role=snapshot.role, message="Login successful")


@router.get("/me", response_model=MeResponse)
def me(
    user: Annotated[SessionUser | None, Depends(get_session_user)],
) -> MeResponse:
    """Report whether the caller is logged in, and as whom."""
    if user is None:
        return MeResponse(logged_in=False)
    return MeResponse(
        logged_in=True,
        role=user.role,
        username=user.username,
        location=user.location,
    )


@router.api_route("/logout", methods=["GET", "POST"], response_model=StatusResponse)
def logout(
    response: Response,
    store: Annotated[SessionStore, Depends(get_session_store)],
    token: Annotated[str | None, Depends(get_session_token)],
) -> StatusResponse:
    """End the caller's session. Safe to call repeatedly."""
    _clear_session_cookie(response)
    if not store.destroy(token):
        return StatusResponse(message="No active session")
    logger.info("Session ended")
    return StatusResponse(message="Logged out")
