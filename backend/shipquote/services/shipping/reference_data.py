# Reference data access used by the engine (read-only)

from __future__ import annotations
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

from sqlalchemy.orm import Session

from shipquote.repository import admin_setting_repo, insurance_repo, pincode_repo, shipping_rate_repo
from shipquote.services.shipping.quote_types import InsuranceTier, PincodeDetails, RateRow
from shipquote.utils.money import optional_positive


class ReferenceDataStore(Protocol):
    def get_pincode_details(self, pincode: str) -> Optional[PincodeDetails]: ...
    def zone_rates(self, zone: str) -> List[RateRow]: ...
    def latest_zone_rate(self, zone: str) -> Optional[RateRow]: ...
    def insurance_tiers(self) -> List[InsuranceTier]: ...
    def get_insurance_tier(self, tier_id: int) -> Optional[InsuranceTier]: ...
    def admin_setting(self, key: str, default: Any = None) -> Any: ...


class SqlReferenceData:
    """ReferenceDataStore over a SQLAlchemy session (request scoped)."""

    def __init__(self, db: Session):
        self.db = db

    def get_pincode_details(self, pincode: str) -> Optional[PincodeDetails]:
        return pincode_repo.get_pincode_details(self.db, pincode)

    def zone_rates(self, zone: str) -> List[RateRow]:
        return shipping_rate_repo.load_zone_rates(self.db, zone)

    def latest_zone_rate(self, zone: str) -> Optional[RateRow]:
        return shipping_rate_repo.latest_zone_rate(self.db, zone)

    def insurance_tiers(self) -> List[InsuranceTier]:
        return insurance_repo.load_active_tiers(self.db)

    def get_insurance_tier(self, tier_id: int) -> Optional[InsuranceTier]:
        return insurance_repo.get_tier(self.db, tier_id)

    def admin_setting(self, key: str, default: Any = None) -> Any:
        return admin_setting_repo.get_setting(self.db, key, default)


class InMemoryReferenceData:
    """
    ReferenceDataStore over plain lists; built from a seed payload for dry runs and tests.
    """

    def __init__(
        self,
        pincodes: Iterable[PincodeDetails] = (),
        rates: Iterable[RateRow] = (),
        tiers: Iterable[InsuranceTier] = (),
        settings: Optional[Mapping[str, Any]] = None,
    ):
        self.pincodes: Dict[str, PincodeDetails] = {p.pincode: p for p in pincodes}
        self.rates: List[RateRow] = list(rates)
        self.tiers: List[InsuranceTier] = list(tiers)
        self.settings: Dict[str, Any] = dict(settings or {})

    @classmethod
    def from_seed(cls, payload: Mapping[str, Any]) -> "InMemoryReferenceData":
        pincodes = [PincodeDetails(**p) for p in payload.get("pincodes", [])]

        slabs = {}
        for idx, s in enumerate(payload.get("weight_slabs", []), start=1):
            slabs[(s["courier_name"], Decimal(str(s["base_weight"])))] = idx

        rates: List[RateRow] = []
        for r in payload.get("zone_rates", []):
            bw = Decimal(str(r["base_weight"]))
            threshold = r.get("free_shipping_threshold")
            rates.append(RateRow(
                id=len(rates) + 1,
                zone=r["zone"],
                weight_slab_id=slabs.get((r["courier_name"], bw), 0),
                courier_name=r["courier_name"],
                base_weight=bw,
                fwd_rate=Decimal(str(r["fwd_rate"])),
                aw_rate=Decimal(str(r["aw_rate"])),
                cod_charges=Decimal(str(r["cod_charges"])),
                cod_percentage=Decimal(str(r["cod_percentage"])),
                rto_rate=Decimal(str(r.get("rto_rate", 0))),
                free_shipping_enabled=r.get("free_shipping_enabled"),
                free_shipping_threshold=Decimal(str(threshold)) if threshold is not None else None,
            ))

        tiers: List[InsuranceTier] = []
        for idx, t in enumerate(payload.get("insurance_tiers", []), start=1):
            tiers.append(InsuranceTier(
                id=idx,
                name=t["name"],
                description=t.get("description"),
                coverage_percentage=Decimal(str(t["coverage_percentage"])),
                premium_percentage=Decimal(str(t["premium_percentage"])),
                min_order_value=Decimal(str(t.get("min_order_value", 0))),
                max_order_value=optional_positive(t.get("max_order_value")),
                minimum_premium=Decimal(str(t.get("minimum_premium", 0))),
                maximum_premium=optional_positive(t.get("maximum_premium")),
                is_mandatory=bool(t.get("is_mandatory", False)),
                is_active=bool(t.get("is_active", True)),
                claim_processing_days=int(t.get("claim_processing_days", 7)),
                conditions=tuple(t.get("conditions", ())),
            ))

        return cls(pincodes=pincodes, rates=rates, tiers=tiers, settings=payload.get("admin_settings"))

    def get_pincode_details(self, pincode: str) -> Optional[PincodeDetails]:
        return self.pincodes.get(pincode)

    def zone_rates(self, zone: str) -> List[RateRow]:
        return [r for r in self.rates if r.zone == zone]

    def latest_zone_rate(self, zone: str) -> Optional[RateRow]:
        rows = self.zone_rates(zone)
        return max(rows, key=lambda r: r.id) if rows else None

    def insurance_tiers(self) -> List[InsuranceTier]:
        active = [t for t in self.tiers if t.is_active]
        return sorted(active, key=lambda t: (t.premium_percentage, t.id))

    def get_insurance_tier(self, tier_id: int) -> Optional[InsuranceTier]:
        return next((t for t in self.tiers if t.id == tier_id), None)

    def admin_setting(self, key: str, default: Any = None) -> Any:
        val = self.settings.get(key)
        return default if val is None else val
