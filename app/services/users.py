"""User accounts: registration rules, lookup, authentication and admin bootstrap."""

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.security import PASSWORD_MIN_LEN, hash_password, verify_password
from app.models.user import Role, User
from app.services.errors import DuplicateEmailError, StoreError, ValidationFailedError

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "Not Provided"


@lru_cache
def _dummy_hash() -> str:
    """Stand-in hash checked for unknown emails so every failed login costs one bcrypt check."""
    return hash_password("not-a-real-password")


def validate_registration(username: str | None, email: str | None, password: str | None) -> None:
    """Reject empty username, email without "@" and short passwords."""
    if not username or not username.strip():
        raise ValidationFailedError("Username cannot be empty.")
    if not email or not email.strip() or "@" not in email:
        raise ValidationFailedError("Please enter a valid email address.")
    if not password or len(password) < PASSWORD_MIN_LEN:
        raise ValidationFailedError(
            f"Password must be at least {PASSWORD_MIN_LEN} characters long."
        )


def find_user_by_email(db: Session, email: str) -> User | None:
    """Exact (case-sensitive) email lookup."""
    return db.query(User).filter(User.email == email).first()


def create_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    location: str | None = None,
    role: Role = Role.USER,
) -> User:
    """
    Validate, hash and insert a new user.

    Raises ValidationFailedError before touching the database, DuplicateEmailError
    if the email is taken and StoreError for any other database failure.
    """
    validate_registration(username, email, password)
    user = User(
        username=username.strip(),
        email=email,
        password_hash=hash_password(password),
        location=location or DEFAULT_LOCATION,
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info("Registration rejected, email already exists: %s", user.email)
        raise DuplicateEmailError() from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to insert user %s", user.email)
        raise StoreError("Registration failed due to server error.") from e
    db.refresh(user)
    logger.info("Created user id=%s role=%s", user.id, user.role.value)
    return user


def authenticate(db: Session, email: str, password: str) -> User | None:
    """Return the user if email and password match, else None (no reason given)."""
    try:
        user = find_user_by_email(db, email)
    except SQLAlchemyError as e:
        logger.exception("User lookup failed during login")
        raise StoreError("Login failed due to server error.") from e
    if user is None:
        verify_password(password, _dummy_hash())
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def bootstrap_admin_if_absent(db: Session, settings: "Settings") -> bool:
    """
    Seed the well-known admin account if no user has ADMIN_EMAIL.

    Returns True when the account was created. Idempotent.
    """
    if not settings.ADMIN_BOOTSTRAP_ENABLED:
        logger.info("Admin bootstrap is disabled (ADMIN_BOOTSTRAP_ENABLED=false); skipping.")
        return False
    if find_user_by_email(db, settings.ADMIN_EMAIL) is not None:
        logger.info("Admin already exists: %s", settings.ADMIN_EMAIL)
        return False
    try:
        create_user(
            db,
            username=settings.ADMIN_USERNAME,
            email=settings.ADMIN_EMAIL,
            password=settings.ADMIN_PASSWORD.get_secret_value(),
            location=settings.ADMIN_LOCATION,
            role=Role.ADMIN,
        )
    except DuplicateEmailError:
        # Another worker seeded it between our lookup and insert.
        return False
    logger.info("Admin created: %s", settings.ADMIN_EMAIL)
    return True
