# Insurance tier reads

from __future__ import annotations
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from shipquote.db.model.insurance import ShippingInsurance
from shipquote.services.shipping.quote_types import InsuranceTier
from shipquote.utils.money import optional_positive


def _to_tier(row: ShippingInsurance) -> InsuranceTier:
    return InsuranceTier(
        id=row.id,
        name=row.name,
        description=row.description,
        coverage_percentage=Decimal(str(row.coverage_percentage)),
        premium_percentage=Decimal(str(row.premium_percentage)),
        min_order_value=Decimal(str(row.min_order_value or 0)),
        max_order_value=optional_positive(row.max_order_value),
        minimum_premium=Decimal(str(row.minimum_premium or 0)),
        maximum_premium=optional_positive(row.maximum_premium),
        is_mandatory=bool(row.is_mandatory),
        is_active=bool(row.is_active),
        claim_processing_days=int(row.claim_processing_days or 0),
        conditions=tuple(row.conditions or ()),
    )


def load_active_tiers(db: Session) -> List[InsuranceTier]:
    stmt = (
        select(ShippingInsurance)
        .where(ShippingInsurance.is_active.is_(True))
        .order_by(ShippingInsurance.premium_percentage.asc(), ShippingInsurance.id.asc())
    )
    return [_to_tier(r) for r in db.execute(stmt).scalars().all()]


def get_tier(db: Session, tier_id: int) -> Optional[InsuranceTier]:
    row = db.get(ShippingInsurance, tier_id)
    return _to_tier(row) if row else None


def upsert_tier(db: Session, payload: Dict[str, Any]) -> ShippingInsurance:
    """Keyed by name."""
    row = db.execute(
        select(ShippingInsurance).where(ShippingInsurance.name == payload["name"])
    ).scalar_one_or_none()
    if row is None:
        row = ShippingInsurance(name=payload["name"])
        db.add(row)
    for k, v in payload.items():
        setattr(row, k, v)
    db.flush()
    return row
