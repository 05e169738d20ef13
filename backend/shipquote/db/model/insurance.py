# Insurance tiers

from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, Integer, Numeric, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column
from shipquote.db.base import Base


'''
conditions: list of {"type": ..., params}; premium modifiers
(zone_multiplier / remote_surcharge / high_value_discount / fragile_item_surcharge /
electronics_surcharge) and mandatory triggers (high_value_mandatory /
remote_area_mandatory / fragile_mandatory / electronics_mandatory)
'''
class ShippingInsurance(Base):

    __tablename__ = "shipping_insurance"
    __table_args__ = (
        CheckConstraint(
            "coverage_percentage > 0 AND coverage_percentage <= 100",
            name="coverage_percentage_range",
        ),
    )

    id:          Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name:        Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)

    min_order_value:     Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    max_order_value:     Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)   # NULL = unbounded
    coverage_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=100)
    premium_percentage:  Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=0)
    minimum_premium:     Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    maximum_premium:     Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)

    is_mandatory: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    is_active:    Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))
    conditions:   Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    claim_processing_days: Mapped[int] = mapped_column(Integer, nullable=False, default=7)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
