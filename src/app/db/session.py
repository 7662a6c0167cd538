"""SQLAlchemy engine, session factory, and table bootstrap."""

from collections.abc import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.schema import Base

_connect_args = (
    {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
)
engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    connect_args=_connect_args,
)


def init_db(bind: Engine = engine) -> None:
    """Create missing tables (clients are never dropped here)."""
    Base.metadata.create_all(bind)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a database session."""
    with Session(engine) as session:
        yield session
