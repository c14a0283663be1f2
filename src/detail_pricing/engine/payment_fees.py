"""Payment processor fee calculations."""
from typing import Optional

from .models import PaymentKind, PaymentMethodFee


def installment_rate(method: PaymentMethodFee, installments: Optional[int]) -> Optional[float]:
    """
    Rate for an installment count, or None when the table has no entry.

    An unset installment count means a single payment.
    """
    count = installments if installments else 1
    rate = method.installment_rate_table.get(int(count))
    return float(rate) if rate is not None else None


def payment_fee(
    method: Optional[PaymentMethodFee],
    base_value: float,
    installments: Optional[int] = None
) -> float:
    """Amount kept by the payment processor on `base_value`."""
    if method is None or base_value <= 0:
        return 0.0

    if method.kind == PaymentKind.NONE:
        return 0.0
    elif method.kind == PaymentKind.DEBIT:
        return base_value * (method.flat_rate_percent / 100)
    elif method.kind == PaymentKind.CREDIT:
        rate = installment_rate(method, installments)
        return base_value * ((rate or 0.0) / 100)

    raise ValueError(f"Unknown payment kind: {method.kind!r}")


def available_installments(method: PaymentMethodFee) -> list[int]:
    """Installment counts a customer can choose (those with a positive rate)."""
    if method.kind != PaymentKind.CREDIT:
        return []
    return sorted(n for n, rate in method.installment_rate_table.items() if rate > 0)
