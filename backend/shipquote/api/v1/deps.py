# Request-scoped engine wiring

from __future__ import annotations
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from shipquote.core.config import settings
from shipquote.db.session import get_db
from shipquote.services.shipping.engine_config import EngineConfig
from shipquote.services.shipping.quote_service import ShippingQuoteService
from shipquote.services.shipping.reference_data import SqlReferenceData
from shipquote.services.shipping.zone_cache import ZoneCache, get_zone_cache


@lru_cache(maxsize=1)
def get_engine_config() -> EngineConfig:
    return EngineConfig.from_settings(settings)


def get_quote_service(
    db: Session = Depends(get_db),
    cache: ZoneCache = Depends(get_zone_cache),
) -> ShippingQuoteService:
    """One service per request over the request's session; the zone cache is process wide."""
    return ShippingQuoteService(SqlReferenceData(db), get_engine_config(), cache)
