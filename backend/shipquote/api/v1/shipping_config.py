# Admin per-zone free-shipping default thresholds

from __future__ import annotations
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from shipquote.db.session import get_db
from shipquote.repository.admin_setting_repo import get_thresholds, update_thresholds

router = APIRouter(
    prefix="/shipping-config",
    tags=["shipping-config"],
)


class ZoneThresholds(BaseModel):
    zone_a_threshold: float = Field(..., ge=0)
    zone_b_threshold: float = Field(..., ge=0)
    zone_c_threshold: float = Field(..., ge=0)
    zone_d_threshold: float = Field(..., ge=0)
    zone_e_threshold: float = Field(..., ge=0)
    # fallback quote only
    free_shipping_threshold: float = Field(..., ge=0)


class ZoneThresholdsPartial(BaseModel):
    zone_a_threshold: Optional[float] = Field(None, ge=0)
    zone_b_threshold: Optional[float] = Field(None, ge=0)
    zone_c_threshold: Optional[float] = Field(None, ge=0)
    zone_d_threshold: Optional[float] = Field(None, ge=0)
    zone_e_threshold: Optional[float] = Field(None, ge=0)
    free_shipping_threshold: Optional[float] = Field(None, ge=0)


@router.get("/thresholds", response_model=ZoneThresholds)
def get_config(response: Response, db: Session = Depends(get_db)):
    response.headers["Cache-Control"] = "no-store"
    return _serialize(get_thresholds(db))


@router.put("/thresholds", response_model=ZoneThresholds)
def put_config(payload: ZoneThresholds, response: Response, db: Session = Depends(get_db)):
    response.headers["Cache-Control"] = "no-store"
    return _serialize(update_thresholds(db, payload.model_dump()))


@router.patch("/thresholds", response_model=ZoneThresholds)
def patch_config(payload: ZoneThresholdsPartial, response: Response, db: Session = Depends(get_db)):
    response.headers["Cache-Control"] = "no-store"
    update_data = payload.model_dump(exclude_none=True)
    if update_data:
        data = update_thresholds(db, update_data)
    else:
        data = get_thresholds(db)
    return _serialize(data)


def _serialize(data: Dict[str, Any]) -> ZoneThresholds:
    return ZoneThresholds.model_validate(data)
