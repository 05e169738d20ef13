# Engine/Session factory + FastAPI dependency

from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Dict, Generator, Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from shipquote.core.config import settings


def _connect_args(url: str) -> Dict[str, Any]:
    # Reference reads must be bounded; the quote orchestrator absorbs timeouts.
    if url.startswith("postgresql"):
        return {"options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"}
    return {}


# ---- Engine ----
engine = create_engine(
    settings.DATABASE_URL,
    pool_size=10,
    max_overflow=20,
    pool_pre_ping=True,      # drop dead connections before use
    pool_recycle=1800,
    connect_args=_connect_args(settings.DATABASE_URL),
    echo=False,
    future=True,
)


# ---- Session Factory ----
SessionLocal: sessionmaker[Session] = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    class_=Session,
    future=True,
)


'''
FastAPI dependency: one session per request
Usage:
from shipquote.db.session import get_db
def endpoint(db: Session = Depends(get_db)): ...
'''
def get_db() -> Generator[Session, None, None]:
    db: Session = SessionLocal()
    try:
        yield db    # commits happen explicitly in repository functions
    finally:
        db.close()


# ---- scripts / non-FastAPI callers ----
@contextmanager
def session_scope() -> Iterator[Session]:

    db: Session = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def dispose_engine() -> None:
    """Release pooled connections; called on application shutdown."""
    engine.dispose()
