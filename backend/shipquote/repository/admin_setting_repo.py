
from __future__ import annotations
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from shipquote.db.model.admin_setting import AdminSetting


# Per-zone free-shipping thresholds (INR); keys match AdminSetting.key
THRESHOLD_DEFAULTS: Dict[str, int] = {
    "zone_a_threshold": 499,
    "zone_b_threshold": 699,
    "zone_c_threshold": 999,
    "zone_d_threshold": 1499,
    "zone_e_threshold": 2499,
    # used by the fallback quote only
    "free_shipping_threshold": 500,
}

ALL_THRESHOLD_KEYS = tuple(THRESHOLD_DEFAULTS.keys())


def threshold_key(zone: str) -> str:
    return f"zone_{zone.lower()}_threshold"


def _cast(value: Optional[str], type_: str) -> Any:
    if value is None:
        return None
    if type_ == "integer":
        return int(float(value))
    if type_ == "float":
        return float(value)
    if type_ == "boolean":
        return value.strip().lower() in ("1", "true", "yes", "on")
    return value


def get_setting(db: Session, key: str, default: Any = None) -> Any:
    row = db.execute(select(AdminSetting).where(AdminSetting.key == key)).scalar_one_or_none()
    if row is None:
        return default
    val = _cast(row.value, row.type)
    return default if val is None else val


def set_setting(db: Session, key: str, value: Any, type_: str = "string") -> AdminSetting:
    row = db.execute(select(AdminSetting).where(AdminSetting.key == key)).scalar_one_or_none()
    if row is None:
        row = AdminSetting(key=key)
        db.add(row)
    row.value = None if value is None else str(value)
    row.type = type_
    db.flush()
    return row


def get_thresholds(db: Session) -> Dict[str, Any]:
    """Stored thresholds with THRESHOLD_DEFAULTS filling the gaps."""
    return {k: get_setting(db, k, default) for k, default in THRESHOLD_DEFAULTS.items()}


def update_thresholds(db: Session, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Only whitelisted keys are written; others in payload are ignored."""
    for k, v in payload.items():
        if k in ALL_THRESHOLD_KEYS and v is not None:
            set_setting(db, k, v, type_="float")
    db.commit()
    return get_thresholds(db)
