# Serviceability reference table

from __future__ import annotations
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, func, text
from sqlalchemy.orm import Mapped, mapped_column
from shipquote.db.base import Base


class Pincode(Base):

    __tablename__ = "pin_codes"

    id:      Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pincode: Mapped[str] = mapped_column(String(6), unique=True, index=True, nullable=False)

    city:        Mapped[Optional[str]] = mapped_column(String(128))
    district:    Mapped[Optional[str]] = mapped_column(String(128))
    state:       Mapped[Optional[str]] = mapped_column(String(128))
    region:      Mapped[Optional[str]] = mapped_column(String(128))
    office_name: Mapped[Optional[str]] = mapped_column(String(255))

    is_serviceable:   Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))
    is_cod_available: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
