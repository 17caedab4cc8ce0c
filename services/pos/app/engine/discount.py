from __future__ import annotations

from decimal import Decimal

from packages.shared.schemas.order_v1 import DiscountTypeV1
from services.pos.app.engine.money import ZERO, q2

# PWD and Senior discounts strip the VAT embedded in the VAT-inclusive subtotal.
VAT_DIVISOR = Decimal("1.12")


def discount_amount(subtotal: Decimal, discount_type: DiscountTypeV1) -> Decimal:
    if discount_type is DiscountTypeV1.NONE or subtotal <= 0:
        return ZERO
    return q2(subtotal - subtotal / VAT_DIVISOR)


def discount_label(amount: Decimal, discount_type: DiscountTypeV1) -> str | None:
    if amount <= 0:
        return None
    return discount_type.label
