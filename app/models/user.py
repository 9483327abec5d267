"""ORM model for application users (credentials and RBAC role)."""

import enum

from sqlalchemy import Column, Enum, Integer, String

from app.models.base import Base


class Role(str, enum.Enum):
    """Closed set of roles a user can hold."""

    USER = "user"
    ADMIN = "admin"


class User(Base):
    """
    User account for session authentication and role-based access control.

    email is the login identifier and is unique; username is display-only.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    role = Column(
        Enum(
            Role,
            name="user_role",
            native_enum=False,
            length=32,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=Role.USER,
        server_default=Role.USER.value,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
