# Zone determination: (pickup pincode, delivery pincode) -> A..E

from __future__ import annotations
import logging
import re
from dataclasses import asdict
from typing import Any, Dict, Optional

from shipquote.services.shipping.quote_types import PincodeDetails
from shipquote.services.shipping.reference_data import ReferenceDataStore
from shipquote.services.shipping.zone_cache import NullZoneCache, ZoneCache


logger = logging.getLogger(__name__)


# --------- prefix sets ----------
METRO_CITY_PREFIXES = frozenset({
    "110", "121", "122",                # Delhi NCR
    "400", "401", "421", "422",         # Mumbai
    "560", "562",                       # Bangalore
    "600", "603",                       # Chennai
    "500", "501",                       # Hyderabad
    "700", "711",                       # Kolkata
    "380", "382",                       # Ahmedabad
    "411", "412",                       # Pune
})

NORTHEAST_JK_PREFIXES = frozenset({
    "190", "191", "192", "193", "194",  # J&K
    "781", "782", "783", "784", "785",  # Assam
    "793", "794",                       # Meghalaya
    "797",                              # Mizoram
    "798",                              # Manipur
    "799",                              # Tripura
    "790", "791", "792",                # Arunachal Pradesh
    "795", "796",                       # Nagaland
    "737",                              # Sikkim
})

DEFAULT_ZONE = "D"

ZONE_NAMES = {
    "A": "Same City",
    "B": "Same State/Region",
    "C": "Metro to Metro",
    "D": "Rest of India",
    "E": "Northeast & J&K",
}

ZONE_DESCRIPTIONS = {
    "A": "Pickup and delivery within the same city",
    "B": "Pickup and delivery within the same state or region",
    "C": "Pickup and delivery between major metro cities",
    "D": "Any pickup/delivery in Rest of India (excluding Northeast & J&K)",
    "E": "Any pickup/delivery in Northeast states or Jammu & Kashmir",
}

ZONE_DELIVERY_DAYS = {"A": 1, "B": 2, "C": 3, "D": 5, "E": 7}

ZONE_DELIVERY_ESTIMATES = {
    "A": "1-2 business days",
    "B": "2-3 business days",
    "C": "3-4 business days",
    "D": "4-6 business days",
    "E": "6-10 business days",
}

_PINCODE_RE = re.compile(r"^[1-9][0-9]{5}$")


def get_zone_name(zone: str) -> str:
    return ZONE_NAMES.get(zone, "Unknown Zone")


def get_estimated_delivery_days(zone: str) -> int:
    return ZONE_DELIVERY_DAYS.get(zone, 5)


def get_delivery_estimate(zone: str) -> str:
    return ZONE_DELIVERY_ESTIMATES.get(zone, ZONE_DELIVERY_ESTIMATES["D"])


def get_all_zones() -> Dict[str, Dict[str, Any]]:
    return {
        z: {"name": ZONE_NAMES[z], "description": ZONE_DESCRIPTIONS[z], "typical_days": ZONE_DELIVERY_DAYS[z]}
        for z in ZONE_NAMES
    }


def is_valid_pincode(pincode: str) -> bool:
    return bool(_PINCODE_RE.match(pincode or ""))


def _same(a: Optional[str], b: Optional[str]) -> bool:
    return bool(a) and a == b


# --------- ordered rules (first match wins) ----------
"""
A: same city  ->  E: either side NE/J&K  ->  C: both metro  ->  B: same state  ->  D
Metro-to-metro is checked before same-state.
"""
def zone_from_details(pickup: PincodeDetails, delivery: PincodeDetails) -> str:
    p3, d3 = pickup.pincode[:3], delivery.pincode[:3]

    if _same(pickup.city, delivery.city):
        return "A"
    if p3 in NORTHEAST_JK_PREFIXES or d3 in NORTHEAST_JK_PREFIXES:
        return "E"
    if p3 in METRO_CITY_PREFIXES and d3 in METRO_CITY_PREFIXES:
        return "C"
    if _same(pickup.state, delivery.state):
        return "B"
    return DEFAULT_ZONE


def zone_from_prefixes(pickup: str, delivery: str) -> str:
    """Same rule order with 3-digit prefix as "city" and 2-digit prefix as "state"."""
    p3, d3 = pickup[:3], delivery[:3]

    if _same(p3, d3):
        return "A"
    if p3 in NORTHEAST_JK_PREFIXES or d3 in NORTHEAST_JK_PREFIXES:
        return "E"
    if p3 in METRO_CITY_PREFIXES and d3 in METRO_CITY_PREFIXES:
        return "C"
    if _same(pickup[:2], delivery[:2]):
        return "B"
    return DEFAULT_ZONE


class ZoneEngine:
    """
    Resolves zones against reference data with an optional read-through cache.
    Never raises from determine_zone: any failure yields zone D, which is not cached.
    """

    def __init__(self, store: ReferenceDataStore, cache: Optional[ZoneCache] = None, ttl_sec: int = 3600):
        self.store = store
        self.cache = cache or NullZoneCache()
        self.ttl_sec = ttl_sec

    def determine_zone(self, pickup: str, delivery: str) -> str:
        cached = self._cache_get(pickup, delivery)
        if cached:
            return cached

        try:
            zone = self.calculate_zone(pickup, delivery)
        except Exception as exc:
            logger.error("zone calculation failed pickup=%s delivery=%s error=%s", pickup, delivery, exc)
            return DEFAULT_ZONE

        self._cache_set(pickup, delivery, zone)
        return zone

    def calculate_zone(self, pickup: str, delivery: str) -> str:
        """Uncached computation; lookup errors propagate."""
        pickup_details = self.store.get_pincode_details(pickup)
        delivery_details = self.store.get_pincode_details(delivery)

        if pickup_details and delivery_details:
            return zone_from_details(pickup_details, delivery_details)
        return zone_from_prefixes(pickup, delivery)

    def invalidate(self, pickup: Optional[str] = None, delivery: Optional[str] = None) -> int:
        return self.cache.invalidate(pickup, delivery)

    # --- location helpers ---
    def get_pincode_details(self, pincode: str) -> Optional[Dict[str, Any]]:
        details = self.store.get_pincode_details(pincode)
        return asdict(details) if details else None

    def is_serviceable(self, pincode: str) -> bool:
        """Stored record decides; unknown pincodes are serviceable when well-formed."""
        details = self.store.get_pincode_details(pincode)
        if details is not None:
            return bool(details.is_serviceable)
        return is_valid_pincode(pincode)

    def is_cod_available(self, pincode: str) -> bool:
        details = self.store.get_pincode_details(pincode)
        if details is not None:
            return bool(details.is_cod_available)
        return True

    def is_remote_location(self, pincode: str) -> bool:
        return (pincode or "")[:3] in NORTHEAST_JK_PREFIXES

    def get_zone_details(self, pickup: str, delivery: str) -> Dict[str, Any]:
        zone = self.determine_zone(pickup, delivery)
        return {
            "zone": zone,
            "zone_name": get_zone_name(zone),
            "pickup_details": self.get_pincode_details(pickup),
            "delivery_details": self.get_pincode_details(delivery),
            "estimated_days": get_estimated_delivery_days(zone),
            "cod_available": self.is_cod_available(delivery),
        }

    # --- cache access: backend failures only cost a recompute ---
    def _cache_get(self, pickup: str, delivery: str) -> Optional[str]:
        try:
            return self.cache.get(pickup, delivery)
        except Exception as exc:
            logger.warning("zone cache read failed: %s", exc)
            return None

    def _cache_set(self, pickup: str, delivery: str, zone: str) -> None:
        try:
            self.cache.set(pickup, delivery, zone, self.ttl_sec)
        except Exception as exc:
            logger.warning("zone cache write failed: %s", exc)
