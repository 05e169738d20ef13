# Shipping quote orchestration: zone -> weight -> rates -> free shipping -> insurance

from __future__ import annotations
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, Mapping, Optional

from shipquote.services.shipping import free_shipping, insurance_calc, rate_selector, weight_calc, zone_engine
from shipquote.services.shipping.engine_config import EngineConfig
from shipquote.services.shipping.errors import NoZoneResolvedError, NotServiceableError, QuoteError, ReferenceDataError
from shipquote.services.shipping.quote_types import ZONES, InsuranceContext, RateOption, ShippingQuote
from shipquote.services.shipping.reference_data import ReferenceDataStore
from shipquote.services.shipping.zone_cache import ZoneCache
from shipquote.services.shipping.zone_engine import ZoneEngine
from shipquote.utils.money import ZERO, quantize_2, to_decimal


logger = logging.getLogger(__name__)


# --------- inputs / outputs ----------
@dataclass(frozen=True)
class QuoteOptions:
    cod: bool = False
    collect_amount: Decimal = ZERO
    is_remote: bool = False
    has_fragile_items: bool = False
    has_electronics: bool = False

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "QuoteOptions":
        raw = raw or {}
        return cls(
            cod=bool(raw.get("cod", False)),
            collect_amount=to_decimal(raw.get("collect_amount"), ZERO),
            is_remote=bool(raw.get("is_remote", False)),
            has_fragile_items=bool(raw.get("has_fragile_items", False)),
            has_electronics=bool(raw.get("has_electronics", False)),
        )


@dataclass(frozen=True)
class QuoteResult:
    quote: Optional[ShippingQuote] = None
    error: Optional[QuoteError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _options(options: Any) -> QuoteOptions:
    if isinstance(options, QuoteOptions):
        return options
    return QuoteOptions.from_mapping(options)


class ShippingQuoteService:
    """
    Stateless apart from the zone cache; one instance may serve many calls
    as long as the store is valid for them.
    """

    def __init__(self, store: ReferenceDataStore, cfg: Optional[EngineConfig] = None, zone_cache: Optional[ZoneCache] = None):
        self.store = store
        self.cfg = cfg or EngineConfig()
        self.zones = ZoneEngine(store, zone_cache, ttl_sec=self.cfg.zone_cache_ttl_sec)

    # ========= primary entry points =========
    def calculate_shipping_charges(
        self,
        pickup: str,
        delivery: str,
        items: Iterable[Any],
        order_value=0,
        options: Any = None,
    ) -> ShippingQuote:
        """Never raises for calculation failures; errors become the fallback quote."""
        result = self.try_calculate(pickup, delivery, items, order_value, options)
        if result.ok:
            return result.quote
        return self.to_fallback_quote(result.error, pickup, delivery)

    def try_calculate(
        self,
        pickup: str,
        delivery: str,
        items: Iterable[Any],
        order_value=0,
        options: Any = None,
    ) -> QuoteResult:
        try:
            return QuoteResult(quote=self._calculate(pickup, delivery, items, order_value, _options(options)))
        except QuoteError as exc:
            return QuoteResult(error=exc)
        except Exception as exc:
            err = ReferenceDataError(f"quote calculation failed: {exc}")
            err.__cause__ = exc
            return QuoteResult(error=err)

    def _calculate(self, pickup: str, delivery: str, items, order_value, opts: QuoteOptions) -> ShippingQuote:
        bad = [p for p in (pickup, delivery) if not self.zones.is_serviceable(p)]
        if bad:
            logger.warning("pincode not serviceable: %s", ",".join(bad))
            raise NotServiceableError(bad)

        zone = self.zones.determine_zone(pickup, delivery)
        if zone not in ZONES:
            raise NoZoneResolvedError(f"no zone for {pickup} -> {delivery}")

        value = to_decimal(order_value, ZERO)
        weights = weight_calc.calculate_total_weight(items, self.cfg)
        billable = quantize_2(weights.billable_weight)

        shipping_options = rate_selector.get_shipping_options(
            self.store, zone, billable, cod=opts.cod, collect_amount=opts.collect_amount,
        )
        fs = free_shipping.get_free_shipping_config(self.store, zone)
        shipping_options = free_shipping.apply_free_shipping(shipping_options, fs, value)

        # caller-declared; the pincode prefix only feeds check_pincode
        is_remote = opts.is_remote
        bundle = insurance_calc.calculate_insurance_options(
            self.store,
            value,
            InsuranceContext(
                zone=zone,
                is_remote=is_remote,
                has_fragile_items=opts.has_fragile_items,
                has_electronics=opts.has_electronics,
            ),
        )

        return ShippingQuote(
            zone=zone,
            zone_name=zone_engine.get_zone_name(zone),
            gross_weight=weights.gross_weight,
            dimensional_weight=weights.dimensional_weight,
            billable_weight=billable,
            shipping_options=shipping_options,
            free_shipping_threshold=fs.threshold,
            free_shipping_enabled=fs.enabled,
            delivery_estimate=zone_engine.get_delivery_estimate(zone),
            cod_available=self.zones.is_cod_available(delivery),
            is_remote=is_remote,
            pickup_details=self.zones.get_pincode_details(pickup),
            delivery_details=self.zones.get_pincode_details(delivery),
            insurance_options=bundle.options,
            insurance_mandatory=bundle.is_mandatory,
            recommended_insurance=bundle.recommended,
        )

    # ========= degrade on failure =========
    def to_fallback_quote(self, error: Optional[QuoteError], pickup: Optional[str] = None, delivery: Optional[str] = None) -> ShippingQuote:
        """Flat zone-D quote; the only degrade point of the orchestrator."""
        cfg = self.cfg
        reason = str(error) if error is not None else "unknown error"
        logger.error("shipping calculation failed pickup=%s delivery=%s error=%s", pickup, delivery, reason)

        weight = quantize_2(cfg.fallback_weight_kg)
        cost = quantize_2(cfg.fallback_base_cost)
        option = RateOption(
            zone=cfg.fallback_zone,
            courier=rate_selector.LEGACY_COURIER,
            base_weight=weight,
            charged_weight=weight,
            base_cost=cost,
            additional_weight_charge=ZERO,
            cod_charge=ZERO,
            total_cost=cost,
            final_cost=cost,
            is_free_shipping=False,
            source="legacy",
        )

        return ShippingQuote(
            zone=cfg.fallback_zone,
            zone_name=zone_engine.get_zone_name(cfg.fallback_zone),
            gross_weight=weight,
            dimensional_weight=weight,
            billable_weight=weight,
            shipping_options=[option],
            free_shipping_threshold=self._fallback_threshold(),
            free_shipping_enabled=False,
            delivery_estimate=zone_engine.get_delivery_estimate(cfg.fallback_zone),
            cod_available=True,
            is_remote=False,
            is_fallback=True,
            fallback_reason=reason,
        )

    def _fallback_threshold(self) -> Decimal:
        default = self.cfg.fallback_free_shipping_threshold
        try:
            raw = self.store.admin_setting("free_shipping_threshold", default)
        except Exception as exc:
            # store may be the reason we are here
            logger.warning("fallback threshold lookup failed: %s", exc)
            raw = default
        return quantize_2(to_decimal(raw, default))

    # ========= secondary operations =========
    def calculate_cart_shipping(self, cart_items: Iterable[Mapping[str, Any]], pickup: str, delivery: str, options: Any = None) -> ShippingQuote:
        """Order value = sum(unit_price * quantity); line weight/dimensions feed the weight calculator."""
        lines = list(cart_items or ())
        total = ZERO
        for line in lines:
            price = to_decimal(line.get("unit_price"), ZERO)
            try:
                qty = int(line.get("quantity") or 1)
            except (TypeError, ValueError):
                qty = 1
            total += price * qty
        return self.calculate_shipping_charges(pickup, delivery, lines, quantize_2(total), options)

    def calculate_total_shipping_cost(
        self,
        quote: ShippingQuote,
        order_value,
        insurance_id: Optional[int] = None,
        courier: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Selected option (by courier, else cheapest) plus the chosen tier's premium when eligible.
        """
        option = self._select_option(quote, courier)
        shipping_cost = ZERO
        if option is not None:
            shipping_cost = option.final_cost if option.final_cost is not None else option.total_cost

        premium = ZERO
        details = None
        if insurance_id is not None:
            tier = self.store.get_insurance_tier(insurance_id)
            if tier is not None and tier.is_active:
                calc = insurance_calc.calculate_premium(
                    tier, order_value, InsuranceContext(zone=quote.zone, is_remote=quote.is_remote),
                )
                if calc["eligible"]:
                    premium = calc["premium"]
                    details = calc

        return {
            "courier": option.courier if option is not None else None,
            "shipping_cost": quantize_2(shipping_cost),
            "insurance_premium": quantize_2(premium),
            "total_shipping_cost": quantize_2(shipping_cost + premium),
            "insurance_details": details,
        }

    @staticmethod
    def _select_option(quote: ShippingQuote, courier: Optional[str]) -> Optional[RateOption]:
        if courier:
            for opt in quote.shipping_options:
                if opt.courier == courier:
                    return opt
        return quote.cheapest_option

    def get_shipping_zones(self) -> Dict[str, Dict[str, Any]]:
        zones = zone_engine.get_all_zones()
        for z, info in zones.items():
            fs = free_shipping.get_free_shipping_config(self.store, z)
            info["free_shipping_threshold"] = fs.threshold
            info["free_shipping_enabled"] = fs.enabled
            info["delivery_estimate"] = zone_engine.get_delivery_estimate(z)
        return zones

    def get_zone_details(self, pickup: str, delivery: str) -> Dict[str, Any]:
        return self.zones.get_zone_details(pickup, delivery)

    def check_pincode(self, pincode: str) -> Dict[str, Any]:
        return {
            "pincode": pincode,
            "is_serviceable": self.zones.is_serviceable(pincode),
            "is_cod_available": self.zones.is_cod_available(pincode),
            "is_remote": self.zones.is_remote_location(pincode),
            "details": self.zones.get_pincode_details(pincode),
        }

    def invalidate_zone_cache(self, pickup: Optional[str] = None, delivery: Optional[str] = None) -> int:
        return self.zones.invalidate(pickup, delivery)
