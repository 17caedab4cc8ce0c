from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from packages.shared.schemas.order_v1 import OrderTypeV1
from services.pos.app.engine import cart, discount, settlement, surcharge
from services.pos.app.engine.money import ZERO, q2
from services.pos.app.models.catalog import CatalogSnapshot
from services.pos.app.models.draft import OrderDraft


@dataclass(frozen=True, slots=True)
class PricingResult:
    subtotal: Decimal
    discount_amount: Decimal
    discount_label: str | None
    packaging_fee: Decimal
    delivery_fee: Decimal
    total: Decimal
    change: Decimal
    cash_valid: bool

    @property
    def surcharge(self) -> Decimal:
        return self.packaging_fee + self.delivery_fee


def derive(draft: OrderDraft, catalog: CatalogSnapshot) -> PricingResult:
    """Recompute every derived amount from the draft. Call after each mutation."""
    del catalog  # prices are captured on the line items when they are added

    sub = cart.subtotal(draft.line_items)
    disc = discount.discount_amount(sub, draft.discount_type)
    packaging = surcharge.packaging_fee(draft.order_type, draft.packaging_boxes)
    delivery = draft.delivery_fee if draft.order_type is OrderTypeV1.DELIVERY else ZERO

    total = q2(max(ZERO, sub - disc) + packaging + delivery)
    settled = settlement.settle(total, draft.payment_method, draft.cash_tendered)

    return PricingResult(
        subtotal=sub,
        discount_amount=disc,
        discount_label=discount.discount_label(disc, draft.discount_type),
        packaging_fee=packaging,
        delivery_fee=q2(delivery),
        total=total,
        change=settled.change,
        cash_valid=settled.valid,
    )
