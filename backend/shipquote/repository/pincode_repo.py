# Pincode serviceability lookups

from __future__ import annotations
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from shipquote.db.model.pincode import Pincode
from shipquote.services.shipping.quote_types import PincodeDetails


def _to_details(row: Pincode) -> PincodeDetails:
    return PincodeDetails(
        pincode=row.pincode,
        city=row.city,
        district=row.district,
        state=row.state,
        region=row.region,
        office_name=row.office_name,
        is_serviceable=bool(row.is_serviceable),
        is_cod_available=bool(row.is_cod_available),
    )


def get_pincode_details(db: Session, pincode: str) -> Optional[PincodeDetails]:
    row = db.execute(select(Pincode).where(Pincode.pincode == pincode)).scalar_one_or_none()
    return _to_details(row) if row else None


def search_by_city(db: Session, city: str, limit: int = 10) -> List[PincodeDetails]:
    rows = db.execute(
        select(Pincode).where(Pincode.city.ilike(f"%{city}%")).order_by(Pincode.pincode).limit(limit)
    ).scalars().all()
    return [_to_details(r) for r in rows]


def upsert_pincodes(db: Session, records: Iterable[PincodeDetails]) -> int:
    """Insert or update by pincode; returns the number of rows written."""
    count = 0
    for rec in records:
        row = db.execute(select(Pincode).where(Pincode.pincode == rec.pincode)).scalar_one_or_none()
        if row is None:
            row = Pincode(pincode=rec.pincode)
            db.add(row)
        row.city = rec.city
        row.district = rec.district
        row.state = rec.state
        row.region = rec.region
        row.office_name = rec.office_name
        row.is_serviceable = rec.is_serviceable
        row.is_cod_available = rec.is_cod_available
        count += 1
    db.commit()
    return count
