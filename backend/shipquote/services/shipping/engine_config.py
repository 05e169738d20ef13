# Immutable engine constants, built once from Settings and injected

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal

from shipquote.core.config import Settings


@dataclass(frozen=True)
class EngineConfig:
    dimensional_factor: Decimal = Decimal("5000")
    default_item_weight_kg: Decimal = Decimal("0.25")
    default_length_cm: Decimal = Decimal("20")
    default_width_cm: Decimal = Decimal("14")
    default_height_cm: Decimal = Decimal("2")
    packaging_min_kg: Decimal = Decimal("0.05")
    packaging_ratio: Decimal = Decimal("0.1")
    zone_cache_ttl_sec: int = 3600

    fallback_zone: str = "D"
    fallback_weight_kg: Decimal = Decimal("0.5")
    fallback_base_cost: Decimal = Decimal("80")
    fallback_free_shipping_threshold: Decimal = Decimal("500")

    @classmethod
    def from_settings(cls, s: Settings) -> "EngineConfig":
        def D(v) -> Decimal:
            return Decimal(str(v))

        return cls(
            dimensional_factor=D(s.DIMENSIONAL_FACTOR),
            default_item_weight_kg=D(s.DEFAULT_ITEM_WEIGHT_KG),
            default_length_cm=D(s.DEFAULT_ITEM_LENGTH_CM),
            default_width_cm=D(s.DEFAULT_ITEM_WIDTH_CM),
            default_height_cm=D(s.DEFAULT_ITEM_HEIGHT_CM),
            packaging_min_kg=D(s.PACKAGING_MIN_KG),
            packaging_ratio=D(s.PACKAGING_RATIO),
            zone_cache_ttl_sec=int(s.ZONE_CACHE_TTL_SEC),
            fallback_zone=s.FALLBACK_ZONE,
            fallback_weight_kg=D(s.FALLBACK_WEIGHT_KG),
            fallback_base_cost=D(s.FALLBACK_BASE_COST),
            fallback_free_shipping_threshold=D(s.FALLBACK_FREE_SHIPPING_THRESHOLD),
        )
