from __future__ import annotations
from decimal import Decimal

from shipquote.services.shipping.quote_types import RateRow
from shipquote.services.shipping.rate_selector import (
    additional_weight_charge,
    cod_charge,
    get_shipping_options,
    legacy_shipping_cost,
    select_rate_rows,
)
from shipquote.services.shipping.reference_data import InMemoryReferenceData


def _row(id_, base_weight, courier="Standard Courier", fwd=30, aw=20, cod=15, cod_pct=2):
    return RateRow(
        id=id_, zone="A", weight_slab_id=id_, courier_name=courier,
        base_weight=Decimal(str(base_weight)), fwd_rate=Decimal(str(fwd)), aw_rate=Decimal(str(aw)),
        cod_charges=Decimal(str(cod)), cod_percentage=Decimal(str(cod_pct)),
    )


# ---------- selection ----------
def test_only_slabs_that_carry_the_weight_tightest_first(store):
    opts = get_shipping_options(store, "A", Decimal("1.10"))
    assert [o.base_weight for o in opts] == [Decimal("2")] * 3 + [Decimal("5")] * 3 + [Decimal("10")] * 3
    assert [o.courier for o in opts[:3]] == ["Standard Courier", "Express Courier", "Premium Courier"]
    assert all(o.source == "rate_table" for o in opts)


def test_tied_slabs_all_returned_in_row_id_order():
    rows = [_row(3, 2, "B"), _row(1, 2, "A"), _row(2, 1, "C")]
    picked = select_rate_rows(rows, Decimal("1.5"))
    assert [r.id for r in picked] == [1, 3]


def test_weight_above_every_slab_uses_legacy_table(store):
    opts = get_shipping_options(store, "A", Decimal("12"))
    assert len(opts) == 1
    legacy = opts[0]
    assert legacy.source == "legacy"
    assert legacy.courier == "Standard"
    assert legacy.total_cost == Decimal("150.00")     # 120 + 2 extra kg * 15
    assert legacy.charged_weight == Decimal("12")


def test_no_fitting_slab_selects_nothing():
    rows = [_row(1, "0.5"), _row(2, 2)]
    assert select_rate_rows(rows, Decimal("2.01")) == []


def test_cost_breakdown(store):
    opt = get_shipping_options(store, "A", Decimal("1.10"))[0]
    assert opt.base_cost == Decimal("30.00")
    assert opt.additional_weight_charge == Decimal("0.00")
    assert opt.cod_charge == Decimal("0.00")
    assert opt.total_cost == Decimal("30.00")
    assert opt.charged_weight == Decimal("2")


# ---------- additional weight ----------
def test_additional_weight_is_zero_up_to_base():
    row = _row(1, "0.5")
    assert additional_weight_charge(Decimal("0.3"), row) == 0
    assert additional_weight_charge(Decimal("0.5"), row) == 0


def test_additional_weight_steps_in_whole_base_units():
    row = _row(1, "0.5", aw=20)
    assert additional_weight_charge(Decimal("0.51"), row) == Decimal("20")
    assert additional_weight_charge(Decimal("1.0"), row) == Decimal("20")
    assert additional_weight_charge(Decimal("1.01"), row) == Decimal("40")
    assert additional_weight_charge(Decimal("2.0"), row) == Decimal("60")


# ---------- COD ----------
def test_cod_charge_has_fixed_floor():
    row = _row(1, 1, cod=15, cod_pct=2)
    assert cod_charge(row, True, Decimal("0")) == Decimal("15")
    assert cod_charge(row, True, Decimal("100")) == Decimal("15")
    assert cod_charge(row, True, Decimal("2000")) == Decimal("40")
    assert cod_charge(row, False, Decimal("2000")) == 0


def test_cod_added_to_total(store):
    opt = get_shipping_options(store, "A", Decimal("1.10"), cod=True, collect_amount=2000)[0]
    assert opt.cod_charge == Decimal("40.00")
    assert opt.total_cost == Decimal("70.00")


# ---------- legacy table ----------
def test_zone_without_rate_rows_gets_one_legacy_option():
    empty = InMemoryReferenceData()
    opts = get_shipping_options(empty, "A", Decimal("1.10"), cod=True, collect_amount=5000)
    assert len(opts) == 1
    opt = opts[0]
    assert opt.source == "legacy"
    assert opt.courier == "Standard"
    assert opt.total_cost == Decimal("50.00")
    assert opt.cod_charge == Decimal("0")


def test_legacy_breakpoints_and_overage():
    assert legacy_shipping_cost("A", Decimal("0.5")) == Decimal("30")
    assert legacy_shipping_cost("B", Decimal("0.6")) == Decimal("65")
    assert legacy_shipping_cost("E", Decimal("10")) == Decimal("350")
    assert legacy_shipping_cost("A", Decimal("12.3")) == Decimal("165")    # 120 + 3 * 15


def test_legacy_unknown_zone_uses_d():
    assert legacy_shipping_cost("Z", Decimal("0.4")) == Decimal("80")
