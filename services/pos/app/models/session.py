from __future__ import annotations

from pydantic import BaseModel, Field

from packages.shared.schemas.order_v1 import DiscountTypeV1, OrderTypeV1, PaymentMethodV1


class AddItemRequest(BaseModel):
    menu_item_id: str = Field(..., min_length=1)


class QuantityRequest(BaseModel):
    quantity: int


class DraftUpdateRequest(BaseModel):
    """Partial update; omitted fields are left as they are."""

    customer_name: str | None = None
    customer_phone: str | None = None
    order_type: OrderTypeV1 | None = None
    table_number: str | None = None
    notes: str | None = None

    discount_type: DiscountTypeV1 | None = None
    discount_id_number: str | None = None

    payment_method: PaymentMethodV1 | None = None
    # Raw keypad text; non-numeric characters are stripped server side.
    cash_tendered: str | float | None = None
    packaging_boxes: str | int | None = None

    street: str | None = None
    barangay: str | None = None
    city: str | None = None


class CatalogItemOut(BaseModel):
    id: str
    name: str
    category: str
    price: str
    available_servings: int
    low_stock: bool
    out_of_stock: bool


class CatalogOut(BaseModel):
    categories: list[str]
    items: list[CatalogItemOut]
    fetched_at: str
