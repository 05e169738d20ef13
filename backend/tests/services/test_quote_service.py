from __future__ import annotations
from decimal import Decimal

import pytest

from shipquote.services.shipping.engine_config import EngineConfig
from shipquote.services.shipping.errors import NoZoneResolvedError, NotServiceableError, ReferenceDataError
from shipquote.services.shipping.quote_service import QuoteOptions, ShippingQuoteService
from shipquote.services.shipping.reference_data import InMemoryReferenceData
from shipquote.services.shipping.zone_cache import InMemoryZoneCache, NullZoneCache


class BrokenRatesStore(InMemoryReferenceData):
    def zone_rates(self, zone):
        raise RuntimeError("statement timeout")


class BrokenStore(BrokenRatesStore):
    def admin_setting(self, key, default=None):
        raise RuntimeError("connection refused")


ONE_KG = [{"weight": 1}]


# ---------- happy path ----------
def test_same_city_order_above_threshold_ships_free(service):
    q = service.calculate_shipping_charges("110001", "110005", ONE_KG, 600)

    assert q.zone == "A"
    assert q.zone_name == "Same City"
    assert q.billable_weight == Decimal("1.10")
    assert q.gross_weight == Decimal("1.10")
    assert q.dimensional_weight == Decimal("0.11")
    assert q.free_shipping_enabled is True
    assert q.free_shipping_threshold == Decimal("499.00")
    assert q.shipping_options
    assert all(o.final_cost == 0 and o.is_free_shipping for o in q.shipping_options)
    assert q.shipping_options[0].total_cost == Decimal("30.00")
    assert q.delivery_estimate == "1-2 business days"
    assert q.cod_available is True
    assert q.pickup_details["city"] == "New Delhi"
    assert q.is_fallback is False
    assert q.recommended_insurance.name == "Books & Media"


def test_northeast_delivery_below_threshold_pays(service):
    q = service.calculate_shipping_charges("110001", "781001", ONE_KG, 1000)

    assert q.zone == "E"
    assert q.is_remote is False
    assert q.delivery_estimate == "6-10 business days"
    assert q.shipping_options
    assert all(o.final_cost > 0 for o in q.shipping_options)
    assert q.cheapest_option.final_cost == Decimal("120.00")


def _premium(quote, name):
    return {o.name: o.premium for o in quote.insurance_options}[name]


def test_remote_flag_is_taken_from_options(service):
    plain = service.calculate_shipping_charges("110001", "781001", ONE_KG, 1000)
    remote = service.calculate_shipping_charges("110001", "781001", ONE_KG, 1000, {"is_remote": True})

    assert plain.is_remote is False
    assert remote.is_remote is True
    assert _premium(plain, "Standard Coverage") == Decimal("25.00")
    assert _premium(remote, "Standard Coverage") == Decimal("55.00")      # +30 remote surcharge


def test_cod_charge_in_quote(service):
    q = service.calculate_shipping_charges(
        "110001", "110005", ONE_KG, 300, QuoteOptions(cod=True, collect_amount=Decimal("2000")),
    )
    first = q.shipping_options[0]
    assert first.cod_charge == Decimal("40.00")
    assert first.total_cost == Decimal("70.00")
    assert first.final_cost == Decimal("70.00")


def test_cod_unavailable_pincode_is_reported(service):
    q = service.calculate_shipping_charges("110001", "680001", ONE_KG, 100)
    assert q.cod_available is False
    assert q.is_fallback is False


def test_zone_without_rate_rows_uses_one_legacy_option(seed_payload):
    store = InMemoryReferenceData.from_seed({"pincodes": seed_payload["pincodes"]})
    q = ShippingQuoteService(store).calculate_shipping_charges("110001", "110005", ONE_KG, 600)

    assert len(q.shipping_options) == 1
    opt = q.shipping_options[0]
    assert opt.source == "legacy"
    assert opt.total_cost == Decimal("50.00")
    assert opt.final_cost == Decimal("50.00")      # no rate row -> free shipping disabled
    assert q.free_shipping_enabled is False
    assert q.is_fallback is False


def test_identical_inputs_give_identical_quotes(store, cfg):
    args = ("110001", "400001", [{"weight": 2.5, "dimensions": {"length": 30, "width": 20, "height": 15}}], 1200,
            {"cod": True, "collect_amount": 1200, "has_electronics": True})
    cached = ShippingQuoteService(store, cfg, InMemoryZoneCache())
    uncached = ShippingQuoteService(store, cfg, NullZoneCache())

    first = cached.calculate_shipping_charges(*args)
    assert cached.calculate_shipping_charges(*args) == first
    assert uncached.calculate_shipping_charges(*args) == first


# ---------- errors and fallback ----------
def test_not_serviceable_pincode_returns_error_result(service):
    result = service.try_calculate("110001", "744101", ONE_KG, 600)
    assert not result.ok
    assert isinstance(result.error, NotServiceableError)
    assert result.error.pincodes == ("744101",)


@pytest.mark.parametrize("delivery", ["744101", "12345", "012345"])
def test_not_serviceable_degrades_to_fallback_quote(service, delivery):
    q = service.calculate_shipping_charges("110001", delivery, ONE_KG, 600)

    assert q.is_fallback is True
    assert delivery in q.fallback_reason
    assert q.zone == "D"
    assert q.zone_name == "Rest of India"
    assert q.billable_weight == Decimal("0.50")
    assert len(q.shipping_options) == 1
    assert q.shipping_options[0].final_cost == Decimal("80.00")
    assert q.free_shipping_threshold == Decimal("500.00")
    assert q.delivery_estimate == "4-6 business days"
    assert q.cod_available is True


def test_unexpected_failure_is_wrapped(store):
    broken = BrokenRatesStore(pincodes=store.pincodes.values(), tiers=store.tiers, settings=store.settings)
    svc = ShippingQuoteService(broken)

    result = svc.try_calculate("110001", "110005", ONE_KG, 600)
    assert isinstance(result.error, ReferenceDataError)
    assert isinstance(result.error.__cause__, RuntimeError)

    q = svc.calculate_shipping_charges("110001", "110005", ONE_KG, 600)
    assert q.is_fallback is True
    assert "statement timeout" in q.fallback_reason


def test_fallback_survives_a_dead_store(store):
    svc = ShippingQuoteService(BrokenStore(pincodes=store.pincodes.values()))
    q = svc.calculate_shipping_charges("110001", "110005", ONE_KG, 600)
    assert q.is_fallback is True
    assert q.free_shipping_threshold == Decimal("500.00")


def test_unresolvable_zone(service, monkeypatch):
    monkeypatch.setattr(service.zones, "determine_zone", lambda p, d: "Z")
    result = service.try_calculate("110001", "110005", ONE_KG, 600)
    assert isinstance(result.error, NoZoneResolvedError)


def test_fallback_uses_injected_config(store):
    cfg = EngineConfig(fallback_base_cost=Decimal("99"), fallback_weight_kg=Decimal("1"))
    q = ShippingQuoteService(store, cfg).to_fallback_quote(NotServiceableError(["744101"]))
    assert q.shipping_options[0].total_cost == Decimal("99.00")
    assert q.billable_weight == Decimal("1.00")
    assert q.fallback_reason == "not serviceable: 744101"


# ---------- cart / totals / zones ----------
def test_cart_order_value_from_unit_prices(service):
    lines = [{"weight": 1, "quantity": 2, "unit_price": 150}, {"unit_price": 100}]
    q = service.calculate_cart_shipping(lines, "110001", "110005")

    assert q.gross_weight == Decimal("2.50")
    assert q.dimensional_weight == Decimal("0.34")
    assert q.billable_weight == Decimal("2.50")
    first = q.shipping_options[0]
    assert first.base_weight == Decimal("5")
    assert first.final_cost == Decimal("36.00")     # 400 < 499


def test_cart_reaching_threshold_ships_free(service):
    q = service.calculate_cart_shipping([{"weight": 1, "quantity": 2, "unit_price": 250}], "110001", "110005")
    assert all(o.final_cost == 0 for o in q.shipping_options)


def test_total_cost_adds_selected_insurance(service):
    q = service.calculate_shipping_charges("110001", "781001", ONE_KG, 1000)
    totals = service.calculate_total_shipping_cost(q, 1000, insurance_id=1)

    assert totals["courier"] == "Standard Courier"
    assert totals["shipping_cost"] == Decimal("120.00")
    assert totals["insurance_premium"] == Decimal("22.50")
    assert totals["total_shipping_cost"] == Decimal("142.50")
    assert totals["insurance_details"]["plan_name"] == "Basic Protection"


def test_total_cost_for_named_courier_without_insurance(service):
    q = service.calculate_shipping_charges("110001", "781001", ONE_KG, 1000)
    totals = service.calculate_total_shipping_cost(q, 1000, courier="Express Courier")
    assert totals["shipping_cost"] == Decimal("156.00")
    assert totals["insurance_premium"] == Decimal("0.00")
    assert totals["insurance_details"] is None


def test_total_cost_ignores_ineligible_insurance(service):
    q = service.calculate_shipping_charges("110001", "110005", ONE_KG, 600)
    totals = service.calculate_total_shipping_cost(q, 600, insurance_id=3)     # Premium Protection starts at 2500
    assert totals["shipping_cost"] == Decimal("0.00")
    assert totals["total_shipping_cost"] == Decimal("0.00")


def test_shipping_zones_carry_thresholds(service):
    zones = service.get_shipping_zones()
    assert zones["A"]["free_shipping_threshold"] == Decimal("499.00")
    assert zones["E"]["free_shipping_threshold"] == Decimal("2499.00")
    assert zones["C"]["name"] == "Metro to Metro"


def test_check_pincode(service):
    info = service.check_pincode("680001")
    assert info["is_serviceable"] is True
    assert info["is_cod_available"] is False
    assert info["details"]["state"] == "Kerala"
