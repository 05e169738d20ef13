# Plain value types flowing through the shipping engine

from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional


ZONES = ("A", "B", "C", "D", "E")


# --------- reference data snapshots ----------
@dataclass(frozen=True)
class PincodeDetails:
    pincode: str
    city: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    region: Optional[str] = None
    office_name: Optional[str] = None
    is_serviceable: bool = True
    is_cod_available: bool = True


@dataclass(frozen=True)
class RateRow:
    """One zone rate row joined with its weight slab."""
    id: int
    zone: str
    weight_slab_id: int
    courier_name: str
    base_weight: Decimal
    fwd_rate: Decimal
    aw_rate: Decimal
    cod_charges: Decimal
    cod_percentage: Decimal
    rto_rate: Decimal = Decimal("0")
    free_shipping_enabled: Optional[bool] = None
    free_shipping_threshold: Optional[Decimal] = None


@dataclass(frozen=True)
class InsuranceTier:
    id: int
    name: str
    coverage_percentage: Decimal
    premium_percentage: Decimal
    min_order_value: Decimal = Decimal("0")
    max_order_value: Optional[Decimal] = None
    minimum_premium: Decimal = Decimal("0")
    maximum_premium: Optional[Decimal] = None
    is_mandatory: bool = False
    is_active: bool = True
    description: Optional[str] = None
    claim_processing_days: int = 7
    conditions: tuple = ()


# --------- calculation outputs ----------
@dataclass(frozen=True)
class WeightSummary:
    gross_weight: Decimal
    dimensional_weight: Decimal
    total_volume: Decimal         # cubic cm

    @property
    def billable_weight(self) -> Decimal:
        return max(self.gross_weight, self.dimensional_weight)


@dataclass
class RateOption:
    zone: str
    courier: str
    base_weight: Decimal
    charged_weight: Decimal
    base_cost: Decimal
    additional_weight_charge: Decimal
    cod_charge: Decimal
    total_cost: Decimal
    final_cost: Optional[Decimal] = None
    is_free_shipping: bool = False
    source: str = "rate_table"     # rate_table | legacy


@dataclass(frozen=True)
class FreeShippingConfig:
    enabled: bool
    threshold: Decimal


@dataclass(frozen=True)
class InsuranceContext:
    zone: Optional[str] = None
    is_remote: bool = False
    has_fragile_items: bool = False
    has_electronics: bool = False


@dataclass
class InsuranceOption:
    id: int
    name: str
    description: Optional[str]
    premium: Decimal
    coverage_amount: Decimal
    coverage_percentage: Decimal
    claim_processing_days: int
    is_mandatory: bool


@dataclass
class InsuranceBundle:
    is_mandatory: bool
    options: List[InsuranceOption] = field(default_factory=list)
    recommended: Optional[InsuranceOption] = None


@dataclass
class ShippingQuote:
    zone: str
    zone_name: str
    gross_weight: Decimal
    dimensional_weight: Decimal
    billable_weight: Decimal
    shipping_options: List[RateOption]
    free_shipping_threshold: Decimal
    free_shipping_enabled: bool
    delivery_estimate: str
    cod_available: bool
    is_remote: bool = False
    pickup_details: Optional[Dict[str, Any]] = None
    delivery_details: Optional[Dict[str, Any]] = None
    insurance_options: List[InsuranceOption] = field(default_factory=list)
    insurance_mandatory: bool = False
    recommended_insurance: Optional[InsuranceOption] = None
    is_fallback: bool = False
    fallback_reason: Optional[str] = None

    @property
    def cheapest_option(self) -> Optional[RateOption]:
        if not self.shipping_options:
            return None
        return min(self.shipping_options, key=lambda o: o.final_cost if o.final_cost is not None else o.total_cost)
