"""Commission and discount terms applied against a quote's service value."""
from typing import Optional

from .models import AdjustmentKind, CommissionTerm, DiscountTerm


def _apply(kind: AdjustmentKind, value: float, base_value: float) -> float:
    if value <= 0:
        return 0.0
    if kind == AdjustmentKind.PERCENTAGE:
        return base_value * (value / 100)
    elif kind == AdjustmentKind.AMOUNT:
        return value
    raise ValueError(f"Unknown adjustment kind: {kind!r}")


def commission_amount(term: Optional[CommissionTerm], base_value: float) -> float:
    """
    Commission owed on a quote.

    `base_value` is the pre-fee, pre-discount service value. A flat amount
    ignores it.
    """
    if term is None:
        return 0.0
    return _apply(term.kind, term.value, base_value)


def discount_amount(term: Optional[DiscountTerm], base_value: float) -> float:
    """Discount granted on a quote, never more than the value itself."""
    if term is None or base_value <= 0:
        return 0.0
    return min(_apply(term.kind, term.value, base_value), base_value)
