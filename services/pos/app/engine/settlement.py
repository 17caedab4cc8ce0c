from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from packages.shared.schemas.order_v1 import PaymentMethodV1
from services.pos.app.engine.money import ZERO, q2


@dataclass(frozen=True, slots=True)
class Settlement:
    valid: bool
    change: Decimal


def settle(total: Decimal, payment_method: PaymentMethodV1, cash_tendered: Decimal) -> Settlement:
    """Validate payment against the total.

    Non-cash methods are confirmed outside the till, so they always settle here. For cash
    the change is clamped to 0 for display; it only counts when the payment is valid.
    """
    if payment_method is not PaymentMethodV1.CASH:
        return Settlement(valid=True, change=ZERO)

    valid = total > 0 and cash_tendered >= total
    return Settlement(valid=valid, change=max(ZERO, q2(cash_tendered - total)))
