"""Shared POS card payload schema (v1).

Every session endpoint answers with one of these cards so terminals render the order
state, the totals and the transient notices the same way.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from packages.shared.schemas.order_v1 import (
    BlockReasonV1,
    DiscountTypeV1,
    GateStateV1,
    OrderTypeV1,
    PaymentMethodV1,
)


class CardTypeV1(str, Enum):
    DRAFT = "DRAFT"
    CONFIRM = "CONFIRM"
    DONE = "DONE"
    FAILED = "FAILED"


class CardActionTypeV1(str, Enum):
    PAY = "PAY"
    CONFIRM = "CONFIRM"
    CANCEL = "CANCEL"
    RETRY = "RETRY"
    QUOTE = "QUOTE"


class NoticeLevelV1(str, Enum):
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"


class CardActionV1(BaseModel):
    type: CardActionTypeV1
    label: str
    payload: dict[str, Any] = Field(default_factory=dict)


class NoticeV1(BaseModel):
    """A transient, user-visible message (the terminal shows it as a toast)."""

    level: NoticeLevelV1
    message: str
    retryable: bool = False


class LineItemV1(BaseModel):
    menu_item_id: str
    name: str
    unit_price: Decimal
    quantity: int
    line_total: Decimal


class DraftV1(BaseModel):
    customer_name: str
    customer_phone: str
    order_type: OrderTypeV1
    table_number: str
    notes: str
    line_items: list[LineItemV1] = Field(default_factory=list)

    discount_type: DiscountTypeV1
    discount_id_number: str

    payment_method: PaymentMethodV1
    cash_tendered: Decimal

    packaging_boxes: int

    street: str
    barangay: str
    city: str
    delivery_address: str
    delivery_latitude: float | None = None
    delivery_longitude: float | None = None
    delivery_distance_km: Decimal
    delivery_fee: Decimal


class PricingV1(BaseModel):
    subtotal: Decimal
    discount_amount: Decimal
    discount_label: str | None = None
    packaging_fee: Decimal
    delivery_fee: Decimal
    total: Decimal
    change: Decimal


class GateV1(BaseModel):
    state: GateStateV1
    reasons: list[BlockReasonV1] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list)


class CardV1(BaseModel):
    version: str = "1"
    type: CardTypeV1

    title: str
    summary: str

    session_id: str
    order_id: str | None = None

    draft: DraftV1
    pricing: PricingV1
    gate: GateV1

    # Type-specific rendering payload (receipt on DONE, table status, error detail).
    body: dict[str, Any] = Field(default_factory=dict)

    actions: list[CardActionV1] = Field(default_factory=list, max_length=4)
    notices: list[NoticeV1] = Field(default_factory=list, max_length=8)
