# Insurance tier eligibility, premiums and the mandatory check

from __future__ import annotations
import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from shipquote.services.shipping.quote_types import InsuranceBundle, InsuranceContext, InsuranceOption, InsuranceTier
from shipquote.services.shipping.reference_data import ReferenceDataStore
from shipquote.utils.money import ZERO, quantize_2, to_decimal


logger = logging.getLogger(__name__)

FULL_COVERAGE = Decimal("100")
MANDATORY_TRIGGERS = ("high_value_mandatory", "remote_area_mandatory", "fragile_mandatory", "electronics_mandatory")


def _D(val: Any, default) -> Decimal:
    return to_decimal(val, Decimal(str(default)))


def in_range(tier: InsuranceTier, order_value: Decimal) -> bool:
    if order_value < tier.min_order_value:
        return False
    return not tier.max_order_value or order_value <= tier.max_order_value


# --------- premium ----------
def apply_conditions(premium: Decimal, order_value: Decimal, conditions, ctx: InsuranceContext) -> Decimal:
    """Conditions apply in listed order; unknown types are ignored."""
    for cond in conditions or ():
        if not isinstance(cond, Mapping):
            continue
        kind = cond.get("type")

        if kind == "zone_multiplier":
            zones = cond.get("zones") or {}
            if ctx.zone and ctx.zone in zones:
                premium *= _D(zones[ctx.zone], 1)
        elif kind == "remote_surcharge":
            if ctx.is_remote:
                premium += _D(cond.get("amount"), 0)
        elif kind == "high_value_discount":
            if order_value >= _D(cond.get("threshold"), 10000):
                premium *= 1 - _D(cond.get("discount_percent"), 10) / Decimal(100)
        elif kind == "fragile_item_surcharge":
            if ctx.has_fragile_items:
                premium *= _D(cond.get("multiplier"), "1.5")
        elif kind == "electronics_surcharge":
            if ctx.has_electronics:
                premium *= _D(cond.get("multiplier"), "1.3")

    return premium


def calculate_premium(tier: InsuranceTier, order_value, ctx: Optional[InsuranceContext] = None) -> Dict[str, Any]:
    """
    percentage premium -> floor at minimum_premium -> cap at maximum_premium -> conditions.
    Out-of-range order values are reported as not eligible.
    """
    ctx = ctx or InsuranceContext()
    value = to_decimal(order_value, ZERO)

    if not in_range(tier, value):
        return {"eligible": False, "premium": ZERO, "coverage_amount": ZERO,
                "reason": "Order value outside coverage range"}

    premium = value * tier.premium_percentage / Decimal(100)
    if premium < tier.minimum_premium:
        premium = tier.minimum_premium
    if tier.maximum_premium and premium > tier.maximum_premium:
        premium = tier.maximum_premium

    premium = apply_conditions(premium, value, tier.conditions, ctx)

    coverage = min(
        value * tier.coverage_percentage / Decimal(100),
        tier.max_order_value or value,
    )

    return {
        "eligible": True,
        "premium": quantize_2(premium),
        "coverage_amount": quantize_2(coverage),
        "coverage_percentage": tier.coverage_percentage,
        "plan_name": tier.name,
        "claim_processing_days": tier.claim_processing_days,
    }


# --------- mandatory ----------
def _trigger_matches(cond: Mapping[str, Any], order_value: Decimal, ctx: InsuranceContext) -> bool:
    kind = cond.get("type")
    if kind == "high_value_mandatory":
        return order_value >= _D(cond.get("threshold"), 5000)
    if kind == "remote_area_mandatory":
        return ctx.is_remote
    if kind == "fragile_mandatory":
        return ctx.has_fragile_items
    if kind == "electronics_mandatory":
        return ctx.has_electronics
    return False


def tier_is_mandatory(tier: InsuranceTier, order_value: Decimal, ctx: InsuranceContext) -> bool:
    if not (tier.is_active and tier.is_mandatory and in_range(tier, order_value)):
        return False
    triggers = [c for c in tier.conditions or () if isinstance(c, Mapping) and c.get("type") in MANDATORY_TRIGGERS]
    if not triggers:
        return True
    return any(_trigger_matches(c, order_value, ctx) for c in triggers)


def is_mandatory_for_conditions(tiers: List[InsuranceTier], order_value, ctx: InsuranceContext) -> bool:
    value = to_decimal(order_value, ZERO)
    return any(tier_is_mandatory(t, value, ctx) for t in tiers)


# --------- options ----------
def available_options(tiers: List[InsuranceTier], order_value, ctx: InsuranceContext) -> List[InsuranceOption]:
    """Eligible active tiers, ordered by premium_percentage then id."""
    ordered = sorted((t for t in tiers if t.is_active), key=lambda t: (t.premium_percentage, t.id))

    out: List[InsuranceOption] = []
    for tier in ordered:
        calc = calculate_premium(tier, order_value, ctx)
        if not calc["eligible"]:
            continue
        out.append(InsuranceOption(
            id=tier.id,
            name=tier.name,
            description=tier.description,
            premium=calc["premium"],
            coverage_amount=calc["coverage_amount"],
            coverage_percentage=tier.coverage_percentage,
            claim_processing_days=tier.claim_processing_days,
            is_mandatory=tier.is_mandatory,
        ))
    return out


def recommend(options: List[InsuranceOption]) -> Optional[InsuranceOption]:
    """Lowest premium among full-coverage options; the first one wins ties."""
    best: Optional[InsuranceOption] = None
    for opt in options:
        if opt.coverage_percentage >= FULL_COVERAGE and (best is None or opt.premium < best.premium):
            best = opt
    return best


def calculate_insurance_options(store: ReferenceDataStore, order_value, ctx: InsuranceContext) -> InsuranceBundle:
    tiers = store.insurance_tiers()
    options = available_options(tiers, order_value, ctx)
    return InsuranceBundle(
        is_mandatory=is_mandatory_for_conditions(tiers, order_value, ctx),
        options=options,
        recommended=recommend(options),
    )
