# Exports for scripts / ad-hoc table creation

from .session import engine, SessionLocal, get_db, session_scope, dispose_engine
from shipquote.db.model import *  # register every model on Base.metadata
from .base import Base


"""
    Create tables on an empty dev database:
        python -c "from shipquote.db import create_all; create_all()"
    Production uses `alembic upgrade head`.
"""
def create_all() -> None:
    Base.metadata.create_all(bind=engine)
