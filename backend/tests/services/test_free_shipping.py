from __future__ import annotations
from dataclasses import replace
from decimal import Decimal

from shipquote.services.shipping.free_shipping import (
    apply_free_shipping,
    get_default_thresholds,
    get_free_shipping_config,
)
from shipquote.services.shipping.quote_types import FreeShippingConfig, RateOption
from shipquote.services.shipping.reference_data import InMemoryReferenceData


def _option(total: str) -> RateOption:
    t = Decimal(total)
    return RateOption(
        zone="A", courier="Standard Courier", base_weight=Decimal("1"), charged_weight=Decimal("1"),
        base_cost=t, additional_weight_charge=Decimal("0"), cod_charge=Decimal("0"), total_cost=t,
    )


def test_latest_rate_row_config_wins(store):
    cfg = get_free_shipping_config(store, "A")
    assert cfg == FreeShippingConfig(enabled=True, threshold=Decimal("499.00"))
    assert get_free_shipping_config(store, "E").threshold == Decimal("2499.00")


def test_rate_row_without_threshold_uses_admin_default(store):
    latest = store.latest_zone_rate("B")
    store.rates = [r for r in store.rates if r.id != latest.id]
    store.rates.append(replace(latest, free_shipping_threshold=None))
    store.settings["zone_b_threshold"] = 750

    cfg = get_free_shipping_config(store, "B")
    assert cfg.enabled is True
    assert cfg.threshold == Decimal("750.00")


def test_rate_row_with_nothing_configured_is_disabled(store):
    latest = store.latest_zone_rate("C")
    store.rates = [r for r in store.rates if r.id != latest.id]
    store.rates.append(replace(latest, free_shipping_enabled=None, free_shipping_threshold=None))

    cfg = get_free_shipping_config(store, "C")
    assert cfg == FreeShippingConfig(enabled=False, threshold=Decimal("999.00"))


def test_no_rate_rows_falls_back_to_admin_setting_disabled():
    store = InMemoryReferenceData(settings={"zone_a_threshold": 600})
    assert get_free_shipping_config(store, "A") == FreeShippingConfig(enabled=False, threshold=Decimal("600.00"))


def test_built_in_thresholds_when_nothing_is_stored():
    defaults = get_default_thresholds(InMemoryReferenceData())
    assert defaults == {
        "A": Decimal("499"), "B": Decimal("699"), "C": Decimal("999"),
        "D": Decimal("1499"), "E": Decimal("2499"),
    }


def test_qualifying_order_zeroes_final_cost_but_keeps_total():
    cfg = FreeShippingConfig(enabled=True, threshold=Decimal("499"))
    opts = apply_free_shipping([_option("30"), _option("48")], cfg, 600)
    assert [o.final_cost for o in opts] == [Decimal("0"), Decimal("0")]
    assert [o.total_cost for o in opts] == [Decimal("30"), Decimal("48")]
    assert all(o.is_free_shipping for o in opts)


def test_threshold_is_inclusive():
    cfg = FreeShippingConfig(enabled=True, threshold=Decimal("499"))
    assert apply_free_shipping([_option("30")], cfg, 499)[0].final_cost == 0


def test_below_threshold_or_disabled_pays_full():
    below = apply_free_shipping([_option("30")], FreeShippingConfig(True, Decimal("499")), 498.99)[0]
    assert below.final_cost == Decimal("30.00")
    assert below.is_free_shipping is False

    disabled = apply_free_shipping([_option("30")], FreeShippingConfig(False, Decimal("0")), 10000)[0]
    assert disabled.final_cost == Decimal("30.00")


def test_zero_cost_option_is_reported_free():
    opt = apply_free_shipping([_option("0")], FreeShippingConfig(False, Decimal("499")), 10)[0]
    assert opt.is_free_shipping is True
