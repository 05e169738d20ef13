# Zone x weight-slab rate lookup with additional-weight proration

from __future__ import annotations
import logging
from decimal import Decimal, ROUND_CEILING
from typing import Dict, List, Sequence

from shipquote.services.shipping.quote_types import RateOption, RateRow
from shipquote.services.shipping.reference_data import ReferenceDataStore
from shipquote.utils.money import ZERO, quantize_2, to_decimal


logger = logging.getLogger(__name__)


# --------- legacy table (no rate rows for the zone) ----------
LEGACY_BREAKPOINTS = (Decimal("0.5"), Decimal("1.0"), Decimal("2.0"), Decimal("5.0"), Decimal("10.0"))

LEGACY_RATES: Dict[str, Dict[str, object]] = {
    "A": {"slabs": (30, 40, 50, 80, 120), "additional_kg": 15},
    "B": {"slabs": (50, 65, 80, 120, 180), "additional_kg": 20},
    "C": {"slabs": (70, 85, 100, 150, 220), "additional_kg": 25},
    "D": {"slabs": (80, 95, 120, 180, 260), "additional_kg": 30},
    "E": {"slabs": (120, 140, 170, 250, 350), "additional_kg": 40},
}

LEGACY_COURIER = "Standard"


def _ceil_int(val: Decimal) -> Decimal:
    return val.to_integral_value(rounding=ROUND_CEILING)


def legacy_shipping_cost(zone: str, weight: Decimal) -> Decimal:
    """Smallest breakpoint >= weight; beyond the last one add whole-kg overage."""
    table = LEGACY_RATES.get(zone) or LEGACY_RATES["D"]
    slabs = table["slabs"]

    for bracket, cost in zip(LEGACY_BREAKPOINTS, slabs):
        if weight <= bracket:
            return Decimal(cost)

    extra = weight - LEGACY_BREAKPOINTS[-1]
    return Decimal(slabs[-1]) + _ceil_int(extra) * Decimal(table["additional_kg"])


def legacy_option(zone: str, weight: Decimal) -> RateOption:
    cost = quantize_2(legacy_shipping_cost(zone, weight))
    return RateOption(
        zone=zone,
        courier=LEGACY_COURIER,
        base_weight=weight,
        charged_weight=weight,
        base_cost=cost,
        additional_weight_charge=ZERO,
        cod_charge=ZERO,
        total_cost=cost,
        source="legacy",
    )


# --------- per-row pricing ----------
def additional_weight_charge(weight: Decimal, row: RateRow) -> Decimal:
    """Whole multiples of base_weight beyond the base, rounded up, times aw_rate."""
    base = row.base_weight
    if base <= 0 or weight <= base:
        return ZERO
    units = _ceil_int((weight - base) / base)
    return units * row.aw_rate


def cod_charge(row: RateRow, cod: bool, collect_amount: Decimal) -> Decimal:
    if not cod:
        return ZERO
    return max(row.cod_charges, row.cod_percentage / Decimal(100) * collect_amount)


def price_row(row: RateRow, weight: Decimal, cod: bool, collect_amount: Decimal) -> RateOption:
    awc = additional_weight_charge(weight, row)
    codc = cod_charge(row, cod, collect_amount)
    return RateOption(
        zone=row.zone,
        courier=row.courier_name or LEGACY_COURIER,
        base_weight=row.base_weight,
        charged_weight=max(weight, row.base_weight),
        base_cost=quantize_2(row.fwd_rate),
        additional_weight_charge=quantize_2(awc),
        cod_charge=quantize_2(codc),
        total_cost=quantize_2(row.fwd_rate + awc + codc),
    )


# --------- selection ----------
def select_rate_rows(rows: Sequence[RateRow], weight: Decimal) -> List[RateRow]:
    """
    Rows whose slab carries the weight, tightest slab first, ties by row id.
    Empty when no slab carries it; the caller then prices from the legacy table.
    """
    fitting = [r for r in rows if r.base_weight >= weight]
    return sorted(fitting, key=lambda r: (r.base_weight, r.id))


def get_shipping_options(
    store: ReferenceDataStore,
    zone: str,
    weight: Decimal,
    cod: bool = False,
    collect_amount=0,
) -> List[RateOption]:
    """
    Always returns at least one option: the legacy table stands in when no
    rate row of the zone carries the weight.
    """
    weight = to_decimal(weight, ZERO)
    collect = to_decimal(collect_amount, ZERO)

    rows = store.zone_rates(zone)
    selected = select_rate_rows(rows, weight)
    if not selected:
        logger.info("no rate rows for zone=%s weight=%s, using legacy table", zone, weight)
        return [legacy_option(zone, weight)]

    return [price_row(r, weight, bool(cod), collect) for r in selected]
