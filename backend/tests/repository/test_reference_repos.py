from __future__ import annotations
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from shipquote.db.model import AdminSetting, ShippingZoneRate
from shipquote.db.seed import seed_database
from shipquote.repository import admin_setting_repo, insurance_repo, pincode_repo, shipping_rate_repo
from shipquote.services.shipping.quote_service import ShippingQuoteService
from shipquote.services.shipping.reference_data import SqlReferenceData


def test_pincode_lookup(seeded_session: Session):
    details = pincode_repo.get_pincode_details(seeded_session, "110001")
    assert details.city == "New Delhi"
    assert details.is_serviceable is True
    assert pincode_repo.get_pincode_details(seeded_session, "999999") is None

    port_blair = pincode_repo.get_pincode_details(seeded_session, "744101")
    assert port_blair.is_serviceable is False
    assert port_blair.is_cod_available is False


def test_search_by_city(seeded_session: Session):
    hits = pincode_repo.search_by_city(seeded_session, "delhi")
    assert [h.pincode for h in hits] == ["110001", "110005"]


def test_zone_rates_are_joined_with_slabs(seeded_session: Session):
    rows = shipping_rate_repo.load_zone_rates(seeded_session, "A")
    assert len(rows) == 15
    assert [r.id for r in rows] == sorted(r.id for r in rows)
    assert {r.courier_name for r in rows} == {"Standard Courier", "Express Courier", "Premium Courier"}
    assert rows[0].base_weight == Decimal("0.5")
    assert rows[0].fwd_rate == Decimal("30")


def test_latest_zone_rate_carries_free_shipping_config(seeded_session: Session):
    row = shipping_rate_repo.latest_zone_rate(seeded_session, "A")
    assert row.free_shipping_enabled is True
    assert row.free_shipping_threshold == Decimal("499")
    assert shipping_rate_repo.latest_zone_rate(seeded_session, "Z") is None


def test_active_tiers_by_premium_percentage(seeded_session: Session):
    tiers = insurance_repo.load_active_tiers(seeded_session)
    assert len(tiers) == 7
    assert tiers[0].name == "Transit Damage Only"
    mandatory = next(t for t in tiers if t.is_mandatory)
    assert mandatory.max_order_value is None
    assert {"type": "fragile_mandatory"} in mandatory.conditions


def test_thresholds_read_and_update(seeded_session: Session):
    assert admin_setting_repo.get_thresholds(seeded_session)["zone_a_threshold"] == 499

    out = admin_setting_repo.update_thresholds(seeded_session, {"zone_a_threshold": 599, "bogus": 1})
    assert out["zone_a_threshold"] == 599.0
    assert admin_setting_repo.get_setting(seeded_session, "bogus") is None


def test_threshold_defaults_on_empty_table(sqlite_session: Session):
    assert admin_setting_repo.get_thresholds(sqlite_session) == admin_setting_repo.THRESHOLD_DEFAULTS


def test_seed_is_idempotent(seeded_session: Session):
    before = seeded_session.execute(select(func.count()).select_from(ShippingZoneRate)).scalar_one()
    counts = seed_database(seeded_session)
    after = seeded_session.execute(select(func.count()).select_from(ShippingZoneRate)).scalar_one()

    assert before == after == counts["zone_rates"] == 75
    assert seeded_session.execute(select(func.count()).select_from(AdminSetting)).scalar_one() == 6


def test_sql_store_quotes_match_in_memory_store(seeded_session: Session, store, cfg):
    sql = ShippingQuoteService(SqlReferenceData(seeded_session), cfg)
    mem = ShippingQuoteService(store, cfg)

    cases = [
        ("110001", "110005", [{"weight": 1}], 600, None),
        ("110001", "781001", [{"weight": 3, "quantity": 2}], 12000, {"has_fragile_items": True}),
        ("400001", "411001", [{}], 300, {"cod": True, "collect_amount": 300}),
        ("110001", "744101", [{}], 300, None),
    ]
    for pickup, delivery, items, value, opts in cases:
        assert sql.calculate_shipping_charges(pickup, delivery, items, value, opts) == \
            mem.calculate_shipping_charges(pickup, delivery, items, value, opts)
