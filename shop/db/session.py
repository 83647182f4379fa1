from contextlib import contextmanager
from pathlib import Path
from typing import Callable, ContextManager

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from ..models.base import Base

SessionFactory = Callable[[], ContextManager[Session]]


def _ensure_sqlite_dir(database_url: str) -> None:
    # avoid 'unable to open database file' for a fresh data/ directory
    if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
        db_path = database_url.split("sqlite:///")[-1]
        Path(db_path).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)


def build_session_factory(database_url: str, create_tables: bool = True) -> SessionFactory:
    """Return a ``get_session``-style context manager bound to ``database_url``."""
    _ensure_sqlite_dir(database_url)
    engine = create_engine(database_url, future=True)
    if create_tables:
        Base.metadata.create_all(engine)
    session_local = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)

    @contextmanager
    def get_session():
        session = session_local()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return get_session
