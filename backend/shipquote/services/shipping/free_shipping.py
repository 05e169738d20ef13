# Per-zone free-shipping policy

from __future__ import annotations
import logging
from decimal import Decimal
from typing import Dict, Iterable, List

from shipquote.repository.admin_setting_repo import THRESHOLD_DEFAULTS, threshold_key
from shipquote.services.shipping.quote_types import ZONES, FreeShippingConfig, RateOption
from shipquote.services.shipping.reference_data import ReferenceDataStore
from shipquote.utils.money import ZERO, quantize_2, to_decimal


logger = logging.getLogger(__name__)

_LAST_RESORT_THRESHOLD = Decimal("1499")


def get_default_thresholds(store: ReferenceDataStore) -> Dict[str, Decimal]:
    """AdminSetting zone_<x>_threshold, falling back to built-in defaults."""
    out: Dict[str, Decimal] = {}
    for z in ZONES:
        key = threshold_key(z)
        default = THRESHOLD_DEFAULTS[key]
        out[z] = to_decimal(store.admin_setting(key, default), Decimal(str(default)))
    return out


def get_free_shipping_config(store: ReferenceDataStore, zone: str) -> FreeShippingConfig:
    """
    The most recent rate row of the zone wins outright; otherwise the admin
    default threshold applies with free shipping disabled.
    """
    defaults = get_default_thresholds(store)
    default_threshold = defaults.get(zone, _LAST_RESORT_THRESHOLD)

    row = store.latest_zone_rate(zone)
    if row is not None:
        threshold = row.free_shipping_threshold
        return FreeShippingConfig(
            enabled=bool(row.free_shipping_enabled),
            threshold=quantize_2(threshold if threshold is not None else default_threshold),
        )

    return FreeShippingConfig(enabled=False, threshold=quantize_2(default_threshold))


def qualifies(config: FreeShippingConfig, order_value: Decimal) -> bool:
    return config.enabled and order_value >= config.threshold


def apply_free_shipping(options: Iterable[RateOption], config: FreeShippingConfig, order_value) -> List[RateOption]:
    """Sets final_cost / is_free_shipping in place; total_cost is left untouched."""
    value = to_decimal(order_value, ZERO)
    free = qualifies(config, value)

    out: List[RateOption] = []
    for opt in options:
        opt.final_cost = ZERO if free else quantize_2(opt.total_cost)
        opt.is_free_shipping = opt.final_cost == ZERO
        out.append(opt)
    return out
