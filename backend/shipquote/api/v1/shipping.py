# Shipping quote endpoints -> checkout / cart pages

from __future__ import annotations
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from shipquote.api.v1.deps import get_quote_service
from shipquote.core.config import settings
from shipquote.db.session import get_db
from shipquote.repository.pincode_repo import search_by_city
from shipquote.services.shipping.quote_service import QuoteOptions, ShippingQuoteService
from shipquote.services.shipping.quote_types import ShippingQuote
from shipquote.services.shipping.zone_cache import ZoneCache, get_zone_cache
from shipquote.utils.serialization import to_jsonable


router = APIRouter(prefix="/shipping", tags=["shipping"])

PINCODE_PATTERN = r"^\d{6}$"


# --------- request models ----------
class Dimensions(BaseModel):
    length: Optional[float] = Field(None, gt=0)
    width: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)


class QuoteItem(BaseModel):
    weight: Optional[float] = Field(None, gt=0, description="kg per unit; default item weight when omitted")
    dimensions: Optional[Dimensions] = None
    quantity: int = Field(1, ge=1)


class CartLine(QuoteItem):
    unit_price: float = Field(0, ge=0)


class QuoteContext(BaseModel):
    cod: bool = False
    collect_amount: float = Field(0, ge=0)
    is_remote: bool = False
    has_fragile_items: bool = False
    has_electronics: bool = False

    def to_options(self) -> QuoteOptions:
        return QuoteOptions.from_mapping(self.model_dump(include={
            "cod", "collect_amount", "is_remote", "has_fragile_items", "has_electronics",
        }))


class QuoteRequest(QuoteContext):
    pickup_pincode: str = Field(default_factory=lambda: settings.DEFAULT_PICKUP_PINCODE, pattern=PINCODE_PATTERN)
    delivery_pincode: str = Field(..., pattern=PINCODE_PATTERN)
    items: List[QuoteItem] = Field(default_factory=list)
    order_value: float = Field(0, ge=0)


class CartQuoteRequest(QuoteContext):
    pickup_pincode: str = Field(default_factory=lambda: settings.DEFAULT_PICKUP_PINCODE, pattern=PINCODE_PATTERN)
    delivery_pincode: str = Field(..., pattern=PINCODE_PATTERN)
    lines: List[CartLine] = Field(default_factory=list)


class TotalCostRequest(QuoteRequest):
    insurance_id: Optional[int] = None
    courier: Optional[str] = None


# --------- response models ----------
class RateOptionOut(BaseModel):
    zone: str
    courier: str
    base_weight: float
    charged_weight: float
    base_cost: float
    additional_weight_charge: float
    cod_charge: float
    total_cost: float
    final_cost: Optional[float] = None
    is_free_shipping: bool
    source: str


class InsuranceOptionOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    premium: float
    coverage_amount: float
    coverage_percentage: float
    claim_processing_days: int
    is_mandatory: bool


class ShippingQuoteOut(BaseModel):
    zone: str
    zone_name: str
    gross_weight: float
    dimensional_weight: float
    billable_weight: float
    shipping_options: List[RateOptionOut]
    free_shipping_threshold: float
    free_shipping_enabled: bool
    delivery_estimate: str
    cod_available: bool
    is_remote: bool
    pickup_details: Optional[Dict[str, Any]] = None
    delivery_details: Optional[Dict[str, Any]] = None
    insurance_options: List[InsuranceOptionOut] = []
    insurance_mandatory: bool
    recommended_insurance: Optional[InsuranceOptionOut] = None
    is_fallback: bool
    fallback_reason: Optional[str] = None


class TotalCostOut(BaseModel):
    zone: str
    is_fallback: bool
    courier: Optional[str] = None
    shipping_cost: float
    insurance_premium: float
    total_shipping_cost: float
    insurance_details: Optional[Dict[str, Any]] = None


class ZoneDetailsOut(BaseModel):
    zone: str
    zone_name: str
    pickup_details: Optional[Dict[str, Any]] = None
    delivery_details: Optional[Dict[str, Any]] = None
    estimated_days: int
    cod_available: bool


class ZoneInfoOut(BaseModel):
    name: str
    description: str
    typical_days: int
    delivery_estimate: str
    free_shipping_threshold: float
    free_shipping_enabled: bool


class PincodeCheckOut(BaseModel):
    pincode: str
    is_serviceable: bool
    is_cod_available: bool
    is_remote: bool
    details: Optional[Dict[str, Any]] = None


def _serialize(quote: ShippingQuote) -> ShippingQuoteOut:
    return ShippingQuoteOut.model_validate(to_jsonable(quote))


def _items(rows: List[BaseModel]) -> List[Dict[str, Any]]:
    return [r.model_dump(exclude_none=True) for r in rows]


# --------- quotes ----------
@router.post("/quote", response_model=ShippingQuoteOut)
def quote(payload: QuoteRequest, svc: ShippingQuoteService = Depends(get_quote_service)):
    q = svc.calculate_shipping_charges(
        payload.pickup_pincode,
        payload.delivery_pincode,
        _items(payload.items),
        payload.order_value,
        payload.to_options(),
    )
    return _serialize(q)


@router.post("/cart-quote", response_model=ShippingQuoteOut)
def cart_quote(payload: CartQuoteRequest, svc: ShippingQuoteService = Depends(get_quote_service)):
    q = svc.calculate_cart_shipping(
        _items(payload.lines),
        payload.pickup_pincode,
        payload.delivery_pincode,
        payload.to_options(),
    )
    return _serialize(q)


@router.post("/total", response_model=TotalCostOut)
def total_cost(payload: TotalCostRequest, svc: ShippingQuoteService = Depends(get_quote_service)):
    q = svc.calculate_shipping_charges(
        payload.pickup_pincode,
        payload.delivery_pincode,
        _items(payload.items),
        payload.order_value,
        payload.to_options(),
    )
    totals = svc.calculate_total_shipping_cost(q, payload.order_value, payload.insurance_id, payload.courier)
    return TotalCostOut.model_validate(to_jsonable({"zone": q.zone, "is_fallback": q.is_fallback, **totals}))


# --------- zones / pincodes ----------
@router.get("/zone", response_model=ZoneDetailsOut)
def zone_details(
    pickup: str = Query(..., pattern=PINCODE_PATTERN),
    delivery: str = Query(..., pattern=PINCODE_PATTERN),
    svc: ShippingQuoteService = Depends(get_quote_service),
):
    return ZoneDetailsOut.model_validate(svc.get_zone_details(pickup, delivery))


@router.get("/zones", response_model=Dict[str, ZoneInfoOut])
def list_zones(response: Response, svc: ShippingQuoteService = Depends(get_quote_service)):
    response.headers["Cache-Control"] = "no-store"
    return to_jsonable(svc.get_shipping_zones())


@router.get("/pincodes", response_model=List[Dict[str, Any]])
def find_pincodes(
    city: str = Query(..., min_length=2),
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db),
):
    return to_jsonable(search_by_city(db, city, limit=limit))


@router.get("/pincodes/{pincode}", response_model=PincodeCheckOut)
def check_pincode(pincode: str, svc: ShippingQuoteService = Depends(get_quote_service)):
    return PincodeCheckOut.model_validate(svc.check_pincode(pincode))


@router.delete("/zone-cache")
def invalidate_zone_cache(
    pickup: Optional[str] = Query(None, pattern=PINCODE_PATTERN),
    delivery: Optional[str] = Query(None, pattern=PINCODE_PATTERN),
    cache: ZoneCache = Depends(get_zone_cache),
):
    return {"invalidated": cache.invalidate(pickup, delivery)}
