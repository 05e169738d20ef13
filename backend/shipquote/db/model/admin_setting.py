# Back-office key/value settings (free-shipping thresholds etc.)

from __future__ import annotations
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column
from shipquote.db.base import Base


class AdminSetting(Base):

    __tablename__ = "admin_settings"

    id:    Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key:   Mapped[str] = mapped_column(String(128), unique=True, index=True, nullable=False)
    value: Mapped[Optional[str]] = mapped_column(String(1024))
    type:  Mapped[str] = mapped_column(String(16), nullable=False, default="string")   # string | integer | float | boolean

    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
