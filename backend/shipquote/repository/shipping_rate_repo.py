# Zone rate rows joined with their weight slabs

from __future__ import annotations
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from shipquote.db.model.shipping_rate import ShippingWeightSlab, ShippingZoneRate
from shipquote.services.shipping.quote_types import RateRow


def _to_rate_row(rate: ShippingZoneRate, slab: ShippingWeightSlab) -> RateRow:
    return RateRow(
        id=rate.id,
        zone=rate.zone,
        weight_slab_id=slab.id,
        courier_name=slab.courier_name or "Standard",
        base_weight=Decimal(str(slab.base_weight)),
        fwd_rate=Decimal(str(rate.fwd_rate)),
        aw_rate=Decimal(str(rate.aw_rate)),
        cod_charges=Decimal(str(rate.cod_charges)),
        cod_percentage=Decimal(str(rate.cod_percentage)),
        rto_rate=Decimal(str(rate.rto_rate)),
        free_shipping_enabled=rate.free_shipping_enabled,
        free_shipping_threshold=(
            Decimal(str(rate.free_shipping_threshold)) if rate.free_shipping_threshold is not None else None
        ),
    )


def load_zone_rates(db: Session, zone: str) -> List[RateRow]:
    """
    All rate rows for a zone, fetched once per quote.
    Ordering/filtering by slab weight is done by the rate selector, not here.
    """
    stmt = (
        select(ShippingZoneRate, ShippingWeightSlab)
        .join(ShippingWeightSlab, ShippingWeightSlab.id == ShippingZoneRate.shipping_weight_slab_id)
        .where(ShippingZoneRate.zone == zone)
        .order_by(ShippingZoneRate.id.asc())
    )
    return [_to_rate_row(rate, slab) for rate, slab in db.execute(stmt).all()]


def latest_zone_rate(db: Session, zone: str) -> Optional[RateRow]:
    """Most recently created rate row for the zone (carries the per-zone free-shipping config)."""
    stmt = (
        select(ShippingZoneRate, ShippingWeightSlab)
        .join(ShippingWeightSlab, ShippingWeightSlab.id == ShippingZoneRate.shipping_weight_slab_id)
        .where(ShippingZoneRate.zone == zone)
        .order_by(ShippingZoneRate.id.desc())
        .limit(1)
    )
    hit = db.execute(stmt).first()
    return _to_rate_row(hit[0], hit[1]) if hit else None


def get_or_create_slab(db: Session, courier_name: str, base_weight: Any) -> ShippingWeightSlab:
    bw = Decimal(str(base_weight))
    slab = db.execute(
        select(ShippingWeightSlab).where(
            ShippingWeightSlab.courier_name == courier_name,
            ShippingWeightSlab.base_weight == bw,
        )
    ).scalar_one_or_none()
    if slab:
        return slab
    slab = ShippingWeightSlab(courier_name=courier_name, base_weight=bw)
    db.add(slab)
    db.flush()
    return slab


def upsert_zone_rate(db: Session, zone: str, slab_id: int, values: Dict[str, Any]) -> ShippingZoneRate:
    """Only known columns in `values` are written; (zone, slab) stays unique."""
    row = db.execute(
        select(ShippingZoneRate).where(
            ShippingZoneRate.zone == zone,
            ShippingZoneRate.shipping_weight_slab_id == slab_id,
        )
    ).scalar_one_or_none()
    if row is None:
        row = ShippingZoneRate(zone=zone, shipping_weight_slab_id=slab_id)
        db.add(row)
    for k, v in values.items():
        if k in _RATE_FIELDS:
            setattr(row, k, v)
    db.flush()
    return row


_RATE_FIELDS: Iterable[str] = frozenset({
    "fwd_rate", "rto_rate", "aw_rate", "cod_charges", "cod_percentage",
    "free_shipping_enabled", "free_shipping_threshold",
})
