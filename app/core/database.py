"""Database engine, session management and schema creation."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.models import Base

IN_MEMORY_SQLITE_URLS = ("sqlite://", "sqlite:///:memory:")


def _engine_options(url: str) -> dict[str, Any]:
    """Driver-specific engine options; SQLite is shared across request threads."""
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if url in IN_MEMORY_SQLITE_URLS:
        # One connection, otherwise every checkout sees a fresh empty database.
        options["poolclass"] = StaticPool
    return options


engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **_engine_options(settings.DATABASE_URL),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=engine)


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
