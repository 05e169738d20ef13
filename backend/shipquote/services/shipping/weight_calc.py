# Gross / volumetric weight of a basket of line items

from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from shipquote.services.shipping.engine_config import EngineConfig
from shipquote.services.shipping.quote_types import WeightSummary
from shipquote.utils.money import ZERO, quantize_2, to_decimal


logger = logging.getLogger(__name__)


# --------- input model ----------
@dataclass(frozen=True)
class LineItem:
    weight: Optional[Decimal] = None       # kg per unit
    length: Optional[Decimal] = None       # cm
    width: Optional[Decimal] = None
    height: Optional[Decimal] = None
    quantity: int = 1

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "LineItem":
        """
        Accepts {"weight", "dimensions": {length,width,height} | JSON string, "quantity"}.
        Flat length/width/height keys are read when dimensions is absent.
        """
        dims = raw.get("dimensions")
        if isinstance(dims, str):
            try:
                dims = json.loads(dims) if dims.strip() else None
            except ValueError:
                logger.debug("unparsable dimensions %r, using defaults", dims)
                dims = None
        if not isinstance(dims, Mapping):
            dims = raw

        try:
            qty = int(raw.get("quantity") or 1)
        except (TypeError, ValueError):
            qty = 1

        return cls(
            weight=_positive(raw.get("weight")),
            length=_positive(dims.get("length")),
            width=_positive(dims.get("width")),
            height=_positive(dims.get("height")),
            quantity=max(qty, 0),
        )


def _positive(val: Any) -> Optional[Decimal]:
    d = to_decimal(val)
    if d is None or not d.is_finite() or d <= 0:
        return None
    return d


def _coerce(item: Any) -> LineItem:
    if isinstance(item, LineItem):
        return item
    if isinstance(item, Mapping):
        return LineItem.from_mapping(item)
    raise TypeError(f"unsupported line item: {type(item).__name__}")


# --------- calculation ----------
def packaging_weight(product_weight: Decimal, cfg: EngineConfig) -> Decimal:
    return max(cfg.packaging_min_kg, product_weight * cfg.packaging_ratio)


def calculate_total_weight(items: Iterable[Any], cfg: Optional[EngineConfig] = None) -> WeightSummary:
    """
    Missing weight -> default item weight; missing dimensions -> default box.
    gross += (w + packaging) * qty, volume += l*w*h * qty, dimensional = volume / factor.
    """
    cfg = cfg or EngineConfig()
    gross = ZERO
    volume = ZERO

    for raw in items or ():
        item = _coerce(raw)
        qty = Decimal(item.quantity)

        w = item.weight if item.weight is not None else cfg.default_item_weight_kg
        gross += (w + packaging_weight(w, cfg)) * qty

        length = item.length if item.length is not None else cfg.default_length_cm
        width = item.width if item.width is not None else cfg.default_width_cm
        height = item.height if item.height is not None else cfg.default_height_cm
        volume += length * width * height * qty

    dimensional = volume / cfg.dimensional_factor if cfg.dimensional_factor > 0 else ZERO

    return WeightSummary(
        gross_weight=quantize_2(gross),
        dimensional_weight=quantize_2(dimensional),
        total_volume=quantize_2(volume),
    )
