"""Database engine and session management.

The store is a single local SQLite file whose location comes from
DATABASE_PATH (see timebill.config.settings).
"""
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from timebill.config.settings import get_config

from .models import Base

logger = logging.getLogger(__name__)


def get_db_path() -> Path:
    """Local SQLite file path from configuration."""
    return get_config().get_database_file()


def get_engine(db_path: Optional[Path] = None, echo: Optional[bool] = None) -> Engine:
    """Create a SQLAlchemy engine for the local SQLite file."""
    path = Path(db_path) if db_path is not None else get_db_path()
    if echo is None:
        echo = get_config().database_echo
    path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(f"sqlite:///{path}", echo=echo)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def get_session_factory(engine: Optional[Engine] = None) -> sessionmaker:
    """Create a session factory."""
    if engine is None:
        engine = get_engine()
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def get_session(engine: Optional[Engine] = None) -> Generator[Session, None, None]:
    """Context manager for database sessions with auto-commit/rollback."""
    factory = get_session_factory(engine)
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Optional[Engine] = None) -> None:
    """Create all tables that do not exist yet."""
    if engine is None:
        engine = get_engine()
    Base.metadata.create_all(engine)
    logger.info(f"Database schema ready at {engine.url}")
