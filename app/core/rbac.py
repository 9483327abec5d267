"""Access levels and the authorization check used by every protected route."""

from enum import IntEnum

from app.models.user import Role
from app.schemas.auth import SessionUser
from app.services.errors import UnauthorizedError


class AccessLevel(IntEnum):
    """Caller classes, ordered so a higher level satisfies any lower requirement."""

    ANONYMOUS = 0
    USER = 1
    ADMIN = 2


def classify(user: SessionUser | None) -> AccessLevel:
    """Map a resolved session (or its absence) to an access level."""
    if user is None:
        return AccessLevel.ANONYMOUS
    if user.role == Role.ADMIN:
        return AccessLevel.ADMIN
    return AccessLevel.USER


def authorize(user: SessionUser | None, required: AccessLevel) -> SessionUser | None:
    """
    Return user if its level meets required, else raise UnauthorizedError.

    The error is identical for "not logged in" and "wrong role" so callers
    cannot probe which roles exist.
    """
    if required > AccessLevel.ANONYMOUS and user is None:
        raise UnauthorizedError()
    if classify(user) < required:
        raise UnauthorizedError()
    return user
