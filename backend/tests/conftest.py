from __future__ import annotations
from typing import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from shipquote.db.base import Base
import shipquote.db.model  # noqa: F401  registers tables
from shipquote.db.seed import build_seed_payload, seed_database
from shipquote.services.shipping.engine_config import EngineConfig
from shipquote.services.shipping.quote_service import ShippingQuoteService
from shipquote.services.shipping.reference_data import InMemoryReferenceData
from shipquote.services.shipping.zone_cache import InMemoryZoneCache


# ---------- in-memory reference data ----------
@pytest.fixture()
def seed_payload() -> dict:
    return build_seed_payload()


@pytest.fixture()
def store(seed_payload) -> InMemoryReferenceData:
    return InMemoryReferenceData.from_seed(seed_payload)


@pytest.fixture()
def cfg() -> EngineConfig:
    return EngineConfig()


@pytest.fixture()
def service(store, cfg) -> ShippingQuoteService:
    return ShippingQuoteService(store, cfg, InMemoryZoneCache())


# ---------- SQLite session (shared connection so TestClient threads see the same DB) ----------
@pytest.fixture()
def sqlite_session() -> Iterator[Session]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    db = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture()
def seeded_session(sqlite_session) -> Session:
    seed_database(sqlite_session)
    return sqlite_session
