from __future__ import annotations

import pytest

from shipquote.services.shipping import zone_engine
from shipquote.services.shipping.reference_data import InMemoryReferenceData
from shipquote.services.shipping.zone_cache import InMemoryZoneCache, NullZoneCache
from shipquote.services.shipping.zone_engine import ZoneEngine, zone_from_prefixes


class CountingStore:
    """Wraps a store and counts pincode lookups."""

    def __init__(self, inner):
        self.inner = inner
        self.lookups = 0

    def get_pincode_details(self, pincode):
        self.lookups += 1
        return self.inner.get_pincode_details(pincode)


class FlakyStore:
    """Raises on the first `failures` lookups, then delegates."""

    def __init__(self, inner, failures: int = 1):
        self.inner = inner
        self.failures = failures

    def get_pincode_details(self, pincode):
        if self.failures > 0:
            self.failures -= 1
            raise RuntimeError("db timeout")
        return self.inner.get_pincode_details(pincode)


@pytest.fixture()
def engine(store) -> ZoneEngine:
    return ZoneEngine(store, NullZoneCache())


@pytest.mark.parametrize(
    "pickup, delivery, expected",
    [
        ("110001", "110005", "A"),    # New Delhi -> New Delhi
        ("110001", "781001", "E"),    # Guwahati
        ("190001", "110001", "E"),    # Srinagar as pickup
        ("110001", "400001", "C"),    # Delhi -> Mumbai
        ("400001", "411001", "C"),    # Mumbai -> Pune: metro pair beats same state
        ("600001", "641001", "B"),    # Chennai -> Coimbatore
        ("110001", "302001", "D"),    # Delhi -> Jaipur
    ],
)
def test_zone_from_stored_pincodes(engine, pickup, delivery, expected):
    assert engine.determine_zone(pickup, delivery) == expected


@pytest.mark.parametrize(
    "pickup, delivery, expected",
    [
        ("110099", "110088", "A"),    # same 3-digit prefix
        ("302099", "305001", "B"),    # same 2-digit prefix
        ("560099", "400099", "C"),
        ("302099", "781099", "E"),
        ("302099", "560099", "D"),
    ],
)
def test_zone_from_prefixes_for_unknown_pincodes(engine, pickup, delivery, expected):
    assert engine.determine_zone(pickup, delivery) == expected
    assert zone_from_prefixes(pickup, delivery) == expected


def test_one_unknown_pincode_uses_prefix_rules(engine):
    # 110001 is stored, 110099 is not -> prefix rule A
    assert engine.determine_zone("110001", "110099") == "A"


def test_same_city_requires_non_empty_city():
    store = InMemoryReferenceData.from_seed({"pincodes": [
        {"pincode": "302001", "city": None, "state": "Rajasthan"},
        {"pincode": "313001", "city": None, "state": "Rajasthan"},
    ]})
    assert ZoneEngine(store).determine_zone("302001", "313001") == "B"


def test_result_is_cached_per_pair(store):
    counting = CountingStore(store)
    engine = ZoneEngine(counting, InMemoryZoneCache(), ttl_sec=60)

    assert engine.determine_zone("110001", "400001") == "C"
    first = counting.lookups
    assert engine.determine_zone("110001", "400001") == "C"
    assert counting.lookups == first

    # reversed pair is a different key
    engine.determine_zone("400001", "110001")
    assert counting.lookups > first


def test_lookup_failure_degrades_to_d_and_is_not_cached(store):
    cache = InMemoryZoneCache()
    engine = ZoneEngine(FlakyStore(store), cache, ttl_sec=60)

    assert engine.determine_zone("110001", "110005") == "D"
    assert cache.get("110001", "110005") is None

    assert engine.determine_zone("110001", "110005") == "A"
    assert cache.get("110001", "110005") == "A"


def test_cache_is_not_needed_for_correctness(store):
    cached = ZoneEngine(store, InMemoryZoneCache())
    uncached = ZoneEngine(store, NullZoneCache())
    pairs = [("110001", "110005"), ("110001", "781001"), ("600001", "641001"), ("302099", "305001")]
    for p, d in pairs:
        assert cached.determine_zone(p, d) == uncached.determine_zone(p, d) == cached.determine_zone(p, d)


def test_invalidate_drops_cached_pair(store):
    engine = ZoneEngine(store, InMemoryZoneCache())
    engine.determine_zone("110001", "110005")
    engine.determine_zone("110001", "400001")

    assert engine.invalidate("110001", "110005") == 1
    assert engine.cache.get("110001", "110005") is None
    assert engine.invalidate() == 1


def test_serviceability_and_cod(engine):
    assert engine.is_serviceable("110001") is True
    assert engine.is_serviceable("744101") is False     # stored as not serviceable
    assert engine.is_serviceable("999999") is True      # unknown, well formed
    assert engine.is_serviceable("012345") is False
    assert engine.is_serviceable("12345") is False

    assert engine.is_cod_available("680001") is False
    assert engine.is_cod_available("110001") is True
    assert engine.is_cod_available("999999") is True


def test_remote_location(engine):
    assert engine.is_remote_location("781001") is True
    assert engine.is_remote_location("737101") is True
    assert engine.is_remote_location("110001") is False


def test_zone_details(engine):
    details = engine.get_zone_details("110001", "680001")
    assert details["zone"] == "D"
    assert details["zone_name"] == "Rest of India"
    assert details["estimated_days"] == 5
    assert details["cod_available"] is False
    assert details["pickup_details"]["city"] == "New Delhi"
    assert details["delivery_details"]["city"] == "Thrissur"


def test_zone_lookup_tables():
    assert zone_engine.get_zone_name("C") == "Metro to Metro"
    assert zone_engine.get_zone_name("X") == "Unknown Zone"
    assert zone_engine.get_delivery_estimate("E") == "6-10 business days"
    assert zone_engine.get_delivery_estimate("X") == "4-6 business days"
    assert zone_engine.get_estimated_delivery_days("A") == 1
    assert zone_engine.get_estimated_delivery_days("X") == 5

    zones = zone_engine.get_all_zones()
    assert list(zones) == ["A", "B", "C", "D", "E"]
    assert zones["E"]["typical_days"] == 7
