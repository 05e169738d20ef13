# Decimal helpers shared by the calculators

from __future__ import annotations
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional


_Q_CENTS = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(val: Any, default: Optional[Decimal] = None) -> Optional[Decimal]:
    """None / blank / unparsable -> default."""
    if val is None or isinstance(val, bool):
        return default
    if isinstance(val, Decimal):
        return val
    try:
        text = str(val).strip()
        return Decimal(text) if text else default
    except (InvalidOperation, ValueError):
        return default


def quantize_2(val: Optional[Decimal]) -> Optional[Decimal]:
    if val is None:
        return None
    return val.quantize(_Q_CENTS, rounding=ROUND_HALF_UP)


def optional_positive(val: Any) -> Optional[Decimal]:
    """Optional caps/limits: missing, unparsable or <= 0 all mean "not set"."""
    d = to_decimal(val)
    if d is None or d <= 0:
        return None
    return d
