"""In-process session store mapping opaque tokens to user snapshots."""

import logging
import secrets
import threading

from app.schemas.auth import SessionUser

logger = logging.getLogger(__name__)

# 32 random bytes -> 43 url-safe characters
SESSION_TOKEN_BYTES = 32


class SessionStore:
    """
    Thread-safe map of session token -> SessionUser.

    Tokens come from the OS CSPRNG and are never reused while live. State lives
    only in this process: a restart logs everybody out. There is no expiry;
    sessions end on logout.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, SessionUser] = {}
        self._lock = threading.Lock()

    def create(self, user: SessionUser) -> str:
        """Store a snapshot and return the new token."""
        with self._lock:
            token = secrets.token_urlsafe(SESSION_TOKEN_BYTES)
            while token in self._sessions:
                token = secrets.token_urlsafe(SESSION_TOKEN_BYTES)
            self._sessions[token] = user
        logger.debug("Session created for user id=%s", user.id)
        return token

    def resolve(self, token: str | None) -> SessionUser | None:
        """Return the snapshot for token, or None when there is no such session."""
        if not token:
            return None
        with self._lock:
            return self._sessions.get(token)

    def destroy(self, token: str | None) -> bool:
        """Remove the session. Returns False if it did not exist."""
        if not token:
            return False
        with self._lock:
            user = self._sessions.pop(token, None)
        if user is None:
            return False
        logger.debug("Session destroyed for user id=%s", user.id)
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
