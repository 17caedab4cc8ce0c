from __future__ import annotations

from decimal import Decimal
from typing import Any

from packages.shared.schemas.card_v1 import (
    CardActionTypeV1,
    CardActionV1,
    CardTypeV1,
    CardV1,
    DraftV1,
    GateV1,
    LineItemV1,
    PricingV1,
)
from packages.shared.schemas.order_v1 import GateStateV1, OrderTypeV1
from services.pos.app.engine.pricing import PricingResult
from services.pos.app.models.draft import OrderDraft
from services.pos.app.services.session import PosSession, change_due


def format_money(amount: Decimal) -> str:
    return f"₱{amount:,.2f}"


def session_card(session: PosSession) -> CardV1:
    eligibility = session.eligibility()
    pricing = session.pricing
    body: dict[str, Any] = {}
    if session.table_status is not None:
        body["table_status"] = session.table_status.as_dict()

    order_id: str | None = None
    actions: list[CardActionV1] = []

    if session.awaiting_confirmation:
        card_type = CardTypeV1.CONFIRM
        title = "Confirm payment"
        summary = f"Total {format_money(pricing.total)}"
        if pricing.cash_valid and pricing.change > 0:
            summary += f", change {format_money(change_due(pricing))}"
        actions = [
            CardActionV1(type=CardActionTypeV1.CONFIRM, label="Confirm"),
            CardActionV1(type=CardActionTypeV1.CANCEL, label="Back"),
        ]
    elif eligibility.state is GateStateV1.COMPLETED and session.last_outcome is not None:
        card_type = CardTypeV1.DONE
        title = "Order created"
        order_id = session.last_outcome.order_id
        receipt = session.last_outcome.receipt
        summary = f"Paid {format_money(receipt.total)}" if receipt is not None else "Order created"
        if receipt is not None:
            body["receipt"] = receipt_body(receipt)
    elif eligibility.state is GateStateV1.FAILED and session.last_outcome is not None:
        card_type = CardTypeV1.FAILED
        title = "Order failed"
        summary = session.last_outcome.message
        body["error"] = str(session.last_outcome.error) if session.last_outcome.error else summary
        actions = [CardActionV1(type=CardActionTypeV1.RETRY, label="Retry")]
    else:
        card_type = CardTypeV1.DRAFT
        title = f"Order: {session.draft.order_type.value}"
        summary = f"Total {format_money(pricing.total)}"
        if eligibility.state is GateStateV1.READY:
            actions.append(CardActionV1(type=CardActionTypeV1.PAY, label="Pay"))
        if (
            session.draft.order_type is OrderTypeV1.DELIVERY
            and session.draft.delivery_address
            and not session.draft.has_quote
        ):
            actions.append(CardActionV1(type=CardActionTypeV1.QUOTE, label="Get delivery fee"))

    return CardV1(
        type=card_type,
        title=title,
        summary=summary,
        session_id=session.id,
        order_id=order_id,
        draft=draft_to_schema(session.draft),
        pricing=pricing_to_schema(pricing),
        gate=GateV1(
            state=eligibility.state,
            reasons=list(eligibility.reasons),
            messages=list(eligibility.messages),
        ),
        body=body,
        actions=actions,
        notices=session.drain_notices(),
    )


def draft_to_schema(draft: OrderDraft) -> DraftV1:
    coords = draft.delivery_coordinates
    return DraftV1(
        customer_name=draft.customer_name,
        customer_phone=draft.customer_phone,
        order_type=draft.order_type,
        table_number=draft.table_number,
        notes=draft.notes,
        line_items=[
            LineItemV1(
                menu_item_id=li.menu_item_id,
                name=li.name,
                unit_price=li.unit_price,
                quantity=li.quantity,
                line_total=li.line_total,
            )
            for li in draft.line_items
        ],
        discount_type=draft.discount_type,
        discount_id_number=draft.discount_id_number,
        payment_method=draft.payment_method,
        cash_tendered=draft.cash_tendered,
        packaging_boxes=draft.packaging_boxes,
        street=draft.street,
        barangay=draft.barangay,
        city=draft.city,
        delivery_address=draft.delivery_address,
        delivery_latitude=coords.latitude if coords else None,
        delivery_longitude=coords.longitude if coords else None,
        delivery_distance_km=draft.delivery_distance_km,
        delivery_fee=draft.delivery_fee,
    )


def pricing_to_schema(pricing: PricingResult) -> PricingV1:
    return PricingV1(
        subtotal=pricing.subtotal,
        discount_amount=pricing.discount_amount,
        discount_label=pricing.discount_label,
        packaging_fee=pricing.packaging_fee,
        delivery_fee=pricing.delivery_fee,
        total=pricing.total,
        change=pricing.change,
    )


def receipt_body(pricing: PricingResult) -> dict[str, Any]:
    """The amounts a printed receipt needs, as display strings."""
    return {
        "subtotal": str(pricing.subtotal),
        "discount_label": pricing.discount_label,
        "discount_amount": str(pricing.discount_amount),
        "packaging_fee": str(pricing.packaging_fee),
        "delivery_fee": str(pricing.delivery_fee),
        "total": str(pricing.total),
        "change": str(change_due(pricing)),
    }
