from __future__ import annotations

from typing import Any

from packages.shared.schemas.order_v1 import DiscountTypeV1, OrderTypeV1, PaymentMethodV1
from services.pos.app.engine.pricing import PricingResult
from services.pos.app.models.draft import OrderDraft


def build_order_payload(draft: OrderDraft, pricing: PricingResult) -> dict[str, Any]:
    """Body for `POST /orders`, in the backend's snake_case shape.

    Type-specific fields are only sent for the order type they belong to.
    """

    is_delivery = draft.order_type is OrderTypeV1.DELIVERY
    is_pickup = draft.order_type is OrderTypeV1.PICKUP
    has_discount = draft.discount_type is not DiscountTypeV1.NONE

    payload: dict[str, Any] = {
        "customer_name": draft.customer_name.strip(),
        "table_number": draft.table_number.strip() if draft.order_type is OrderTypeV1.DINE_IN else "",
        "notes": draft.notes,
        "order_type": draft.order_type.value,
        "order_items": [
            {
                "menu_item_id": li.menu_item_id,
                "item_name": li.name,
                "quantity": li.quantity,
                "price": float(li.unit_price),
            }
            for li in draft.line_items
        ],
        "payment_method": draft.payment_method.value,
        "discount_type": draft.discount_type.value,
        "discount_id_number": draft.discount_id_number.strip() if has_discount else "",
        "packaging_boxes": draft.packaging_boxes if is_pickup else 0,
        "delivery_address": draft.delivery_address if is_delivery else None,
        "customer_phone": draft.customer_phone.strip() if is_delivery else None,
        "delivery_distance_km": float(draft.delivery_distance_km) if is_delivery else 0,
        "delivery_fee": float(draft.delivery_fee) if is_delivery else 0,
        "delivery_coordinates": None,
        "total_amount": float(pricing.total),
    }

    if is_delivery and draft.delivery_coordinates is not None:
        payload["delivery_coordinates"] = {
            "latitude": draft.delivery_coordinates.latitude,
            "longitude": draft.delivery_coordinates.longitude,
        }

    if draft.payment_method is PaymentMethodV1.CASH:
        payload["cash_amount"] = float(draft.cash_tendered)
        payload["change_amount"] = float(pricing.change)

    return payload
