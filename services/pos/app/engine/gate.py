"""Checkout eligibility: every condition that keeps an order from being submitted."""

from __future__ import annotations

from dataclasses import dataclass, field

from packages.shared.schemas.order_v1 import (
    BlockReasonV1,
    DiscountTypeV1,
    GateStateV1,
    OrderTypeV1,
    PaymentMethodV1,
)
from services.pos.app.engine import cart
from services.pos.app.engine.pricing import PricingResult
from services.pos.app.models.catalog import CatalogSnapshot
from services.pos.app.models.draft import OrderDraft


@dataclass(frozen=True, slots=True)
class Eligibility:
    state: GateStateV1
    reasons: list[BlockReasonV1] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)

    @property
    def ready(self) -> bool:
        return self.state is GateStateV1.READY


def evaluate(draft: OrderDraft, pricing: PricingResult, catalog: CatalogSnapshot) -> Eligibility:
    reasons: list[BlockReasonV1] = []
    messages: list[str] = []

    def block(reason: BlockReasonV1, message: str | None = None) -> None:
        reasons.append(reason)
        messages.append(message or reason.value)

    if not draft.customer_name.strip():
        block(BlockReasonV1.MISSING_CUSTOMER_NAME)

    if not draft.line_items:
        block(BlockReasonV1.EMPTY_CART)

    for name in cart.over_capacity(draft, catalog):
        block(BlockReasonV1.OVER_CAPACITY, f"not enough servings available for {name}")

    if draft.order_type is OrderTypeV1.DELIVERY:
        if not draft.delivery_address:
            block(BlockReasonV1.INCOMPLETE_ADDRESS)
        if not draft.customer_phone.strip():
            block(BlockReasonV1.MISSING_PHONE)
        if not draft.has_quote:
            block(BlockReasonV1.MISSING_DELIVERY_QUOTE)

    if draft.discount_type is not DiscountTypeV1.NONE and not draft.discount_id_number.strip():
        block(
            BlockReasonV1.MISSING_DISCOUNT_ID,
            f"missing ID number for {draft.discount_type.label} discount",
        )

    if draft.payment_method is PaymentMethodV1.CASH and not pricing.cash_valid:
        block(BlockReasonV1.INSUFFICIENT_CASH)

    state = GateStateV1.INCOMPLETE if reasons else GateStateV1.READY
    return Eligibility(state=state, reasons=reasons, messages=messages)
