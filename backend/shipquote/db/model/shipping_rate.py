# Weight slabs + zone rate rows (zone x slab)

from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from shipquote.db.base import Base


class ShippingWeightSlab(Base):

    __tablename__ = "shipping_weight_slabs"
    __table_args__ = (
        CheckConstraint("base_weight > 0", name="base_weight_positive"),
    )

    id:           Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    courier_name: Mapped[str] = mapped_column(String(128), nullable=False, server_default="Standard")
    base_weight:  Mapped[Decimal] = mapped_column(Numeric(10, 3), nullable=False)   # kg included in fwd_rate

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    rates: Mapped[List["ShippingZoneRate"]] = relationship(back_populates="weight_slab")


"""
   One authoritative row per (zone, weight slab).
   free_shipping_* are nullable: NULL means "not configured", fall back to admin thresholds.
"""
class ShippingZoneRate(Base):

    __tablename__ = "shipping_zones"
    __table_args__ = (
        UniqueConstraint("zone", "shipping_weight_slab_id", name="ux_shipping_zones_zone_slab"),
    )

    id:   Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    zone: Mapped[str] = mapped_column(String(1), index=True, nullable=False)    # A..E
    shipping_weight_slab_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("shipping_weight_slabs.id", ondelete="CASCADE"), nullable=False
    )

    fwd_rate:       Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    rto_rate:       Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    aw_rate:        Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    cod_charges:    Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    cod_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=0)

    free_shipping_enabled:   Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    free_shipping_threshold: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    weight_slab: Mapped[ShippingWeightSlab] = relationship(back_populates="rates")
