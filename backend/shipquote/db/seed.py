# Default reference data: slabs, zone rates, insurance tiers, thresholds, sample pincodes

from __future__ import annotations
from typing import Any, Dict, List

from sqlalchemy.orm import Session


COURIERS = ("Standard Courier", "Express Courier", "Premium Courier")
SLAB_WEIGHTS = (0.5, 1.0, 2.0, 5.0, 10.0)

# INR, before courier/weight multipliers
ZONE_BASE_RATES: Dict[str, Dict[str, float]] = {
    "A": {"fwd_rate": 30, "rto_rate": 25, "aw_rate": 20, "cod_charges": 15, "cod_percentage": 2.0},
    "B": {"fwd_rate": 50, "rto_rate": 40, "aw_rate": 30, "cod_charges": 20, "cod_percentage": 2.5},
    "C": {"fwd_rate": 70, "rto_rate": 55, "aw_rate": 40, "cod_charges": 25, "cod_percentage": 2.5},
    "D": {"fwd_rate": 80, "rto_rate": 65, "aw_rate": 50, "cod_charges": 30, "cod_percentage": 3.0},
    "E": {"fwd_rate": 120, "rto_rate": 95, "aw_rate": 70, "cod_charges": 40, "cod_percentage": 3.5},
}

ZONE_FREE_SHIPPING_THRESHOLDS = {"A": 499, "B": 699, "C": 999, "D": 1499, "E": 2499}

COURIER_MULTIPLIERS = {"Standard Courier": 1.0, "Express Courier": 1.3, "Premium Courier": 1.6}


def _weight_multiplier(base_weight: float) -> float:
    if base_weight >= 10.0:
        return 1.5
    if base_weight >= 5.0:
        return 1.2
    return 1.0


INSURANCE_TIERS: List[Dict[str, Any]] = [
    {
        "name": "Basic Protection",
        "description": "Basic coverage for orders up to 5,000.",
        "min_order_value": 100, "max_order_value": 5000,
        "coverage_percentage": 100, "premium_percentage": 1.5,
        "minimum_premium": 15, "maximum_premium": 75,
        "is_mandatory": False, "claim_processing_days": 5,
        "conditions": [
            {"type": "zone_multiplier", "zones": {"A": 1.0, "B": 1.1, "C": 1.2, "D": 1.3, "E": 1.5}},
        ],
    },
    {
        "name": "Standard Coverage",
        "description": "Comprehensive coverage for orders up to 25,000.",
        "min_order_value": 500, "max_order_value": 25000,
        "coverage_percentage": 100, "premium_percentage": 2.0,
        "minimum_premium": 25, "maximum_premium": 500,
        "is_mandatory": False, "claim_processing_days": 7,
        "conditions": [
            {"type": "high_value_discount", "threshold": 10000, "discount_percent": 15},
            {"type": "remote_surcharge", "amount": 30},
            {"type": "electronics_surcharge", "multiplier": 1.25},
        ],
    },
    {
        "name": "Premium Protection",
        "description": "Premium coverage for high-value orders with priority claims.",
        "min_order_value": 2500, "max_order_value": 100000,
        "coverage_percentage": 100, "premium_percentage": 2.5,
        "minimum_premium": 50, "maximum_premium": 2500,
        "is_mandatory": False, "claim_processing_days": 3,
        "conditions": [
            {"type": "high_value_discount", "threshold": 15000, "discount_percent": 20},
            {"type": "fragile_item_surcharge", "multiplier": 1.4},
            {"type": "electronics_surcharge", "multiplier": 1.3},
        ],
    },
    {
        "name": "Mandatory High-Value",
        "description": "Mandatory insurance for orders above 10,000 or fragile items.",
        "min_order_value": 10000, "max_order_value": None,
        "coverage_percentage": 100, "premium_percentage": 1.75,
        "minimum_premium": 175, "maximum_premium": 5000,
        "is_mandatory": True, "claim_processing_days": 7,
        "conditions": [
            {"type": "high_value_mandatory", "threshold": 10000},
            {"type": "fragile_mandatory"},
            {"type": "remote_area_mandatory"},
        ],
    },
    {
        "name": "Electronics Special",
        "description": "Specialised coverage for electronics and gadgets.",
        "min_order_value": 1000, "max_order_value": 150000,
        "coverage_percentage": 100, "premium_percentage": 3.0,
        "minimum_premium": 50, "maximum_premium": 4500,
        "is_mandatory": False, "claim_processing_days": 5,
        "conditions": [
            {"type": "electronics_surcharge", "multiplier": 1.0},
            {"type": "high_value_discount", "threshold": 25000, "discount_percent": 25},
        ],
    },
    {
        "name": "Books & Media",
        "description": "Affordable coverage for books, media and educational material.",
        "min_order_value": 50, "max_order_value": 5000,
        "coverage_percentage": 100, "premium_percentage": 1.0,
        "minimum_premium": 8, "maximum_premium": 50,
        "is_mandatory": False, "claim_processing_days": 5,
        "conditions": [],
    },
    {
        "name": "Transit Damage Only",
        "description": "Half-value cover against transit damage.",
        "min_order_value": 100, "max_order_value": 10000,
        "coverage_percentage": 50, "premium_percentage": 0.5,
        "minimum_premium": 5, "maximum_premium": 40,
        "is_mandatory": False, "claim_processing_days": 10,
        "conditions": [],
    },
]

SAMPLE_PINCODES: List[Dict[str, Any]] = [
    {"pincode": "110001", "city": "New Delhi", "district": "Central Delhi", "state": "Delhi", "region": "Delhi"},
    {"pincode": "110005", "city": "New Delhi", "district": "Central Delhi", "state": "Delhi", "region": "Delhi"},
    {"pincode": "122001", "city": "Gurgaon", "district": "Gurgaon", "state": "Haryana", "region": "Ambala"},
    {"pincode": "400001", "city": "Mumbai", "district": "Mumbai", "state": "Maharashtra", "region": "Mumbai"},
    {"pincode": "411001", "city": "Pune", "district": "Pune", "state": "Maharashtra", "region": "Pune"},
    {"pincode": "560001", "city": "Bangalore", "district": "Bangalore", "state": "Karnataka", "region": "Bangalore HQ"},
    {"pincode": "600001", "city": "Chennai", "district": "Chennai", "state": "Tamil Nadu", "region": "Chennai"},
    {"pincode": "641001", "city": "Coimbatore", "district": "Coimbatore", "state": "Tamil Nadu", "region": "Western"},
    {"pincode": "302001", "city": "Jaipur", "district": "Jaipur", "state": "Rajasthan", "region": "Jaipur HQ"},
    {"pincode": "781001", "city": "Guwahati", "district": "Kamrup Metro", "state": "Assam", "region": "Guwahati"},
    {"pincode": "190001", "city": "Srinagar", "district": "Srinagar", "state": "Jammu and Kashmir", "region": "Srinagar"},
    {"pincode": "680001", "city": "Thrissur", "district": "Thrissur", "state": "Kerala", "region": "Central",
     "is_cod_available": False},
    {"pincode": "744101", "city": "Port Blair", "district": "South Andaman", "state": "Andaman and Nicobar Islands",
     "region": "Port Blair", "is_serviceable": False, "is_cod_available": False},
]


def build_seed_payload() -> Dict[str, Any]:
    """Plain-dict view of the default reference data (shared by DB seeding and in-memory stores)."""
    slabs = [{"courier_name": c, "base_weight": w} for c in COURIERS for w in SLAB_WEIGHTS]

    zone_rates: List[Dict[str, Any]] = []
    for slab in slabs:
        mult = COURIER_MULTIPLIERS[slab["courier_name"]] * _weight_multiplier(slab["base_weight"])
        for zone, base in ZONE_BASE_RATES.items():
            zone_rates.append({
                "zone": zone,
                "courier_name": slab["courier_name"],
                "base_weight": slab["base_weight"],
                "fwd_rate": round(base["fwd_rate"] * mult, 2),
                "rto_rate": round(base["rto_rate"] * mult, 2),
                "aw_rate": round(base["aw_rate"] * mult, 2),
                "cod_charges": round(base["cod_charges"] * mult, 2),
                "cod_percentage": base["cod_percentage"],
                "free_shipping_enabled": True,
                "free_shipping_threshold": ZONE_FREE_SHIPPING_THRESHOLDS[zone],
            })

    admin_settings = {f"zone_{z.lower()}_threshold": t for z, t in ZONE_FREE_SHIPPING_THRESHOLDS.items()}
    admin_settings["free_shipping_threshold"] = 500

    return {
        "weight_slabs": slabs,
        "zone_rates": zone_rates,
        "insurance_tiers": [dict(t, is_active=True) for t in INSURANCE_TIERS],
        "admin_settings": admin_settings,
        "pincodes": [
            dict({"is_serviceable": True, "is_cod_available": True, "office_name": None}, **p)
            for p in SAMPLE_PINCODES
        ],
    }


def seed_database(db: Session, payload: Dict[str, Any] | None = None) -> Dict[str, int]:
    """Idempotent: re-running updates rows in place."""
    from shipquote.repository import admin_setting_repo, insurance_repo, pincode_repo, shipping_rate_repo
    from shipquote.services.shipping.quote_types import PincodeDetails

    payload = payload or build_seed_payload()

    slab_ids: Dict[tuple, int] = {}
    for s in payload["weight_slabs"]:
        slab = shipping_rate_repo.get_or_create_slab(db, s["courier_name"], s["base_weight"])
        slab_ids[(s["courier_name"], float(s["base_weight"]))] = slab.id

    for r in payload["zone_rates"]:
        slab_id = slab_ids[(r["courier_name"], float(r["base_weight"]))]
        shipping_rate_repo.upsert_zone_rate(db, r["zone"], slab_id, r)

    for t in payload["insurance_tiers"]:
        insurance_repo.upsert_tier(db, t)

    for key, value in payload["admin_settings"].items():
        admin_setting_repo.set_setting(db, key, value, type_="integer")

    db.commit()
    pincode_count = pincode_repo.upsert_pincodes(db, [PincodeDetails(**p) for p in payload["pincodes"]])

    return {
        "weight_slabs": len(slab_ids),
        "zone_rates": len(payload["zone_rates"]),
        "insurance_tiers": len(payload["insurance_tiers"]),
        "admin_settings": len(payload["admin_settings"]),
        "pincodes": pincode_count,
    }
