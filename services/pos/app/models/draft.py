from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from packages.shared.schemas.order_v1 import DiscountTypeV1, OrderTypeV1, PaymentMethodV1
from services.pos.app.engine.money import ZERO, q2


@dataclass(frozen=True, slots=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(slots=True)
class LineItem:
    menu_item_id: str
    name: str
    unit_price: Decimal
    quantity: int = 1

    @property
    def line_total(self) -> Decimal:
        return q2(self.unit_price * self.quantity)


@dataclass(slots=True)
class OrderDraft:
    """The order being rung up on one terminal. Owned by a single POS session."""

    customer_name: str = ""
    customer_phone: str = ""
    order_type: OrderTypeV1 = OrderTypeV1.DINE_IN
    table_number: str = ""
    notes: str = ""
    line_items: list[LineItem] = field(default_factory=list)

    discount_type: DiscountTypeV1 = DiscountTypeV1.NONE
    discount_id_number: str = ""

    payment_method: PaymentMethodV1 = PaymentMethodV1.CASH
    cash_tendered: Decimal = ZERO

    packaging_boxes: int = 0

    street: str = ""
    barangay: str = ""
    city: str = ""
    delivery_address: str = ""
    delivery_coordinates: Coordinates | None = None
    delivery_distance_km: Decimal = ZERO
    delivery_fee: Decimal = ZERO

    def quantity_of(self, menu_item_id: str) -> int:
        return sum(li.quantity for li in self.line_items if li.menu_item_id == menu_item_id)

    def index_of(self, menu_item_id: str) -> int | None:
        for i, li in enumerate(self.line_items):
            if li.menu_item_id == menu_item_id:
                return i
        return None

    def clear_quote(self) -> None:
        self.delivery_coordinates = None
        self.delivery_distance_km = ZERO
        self.delivery_fee = ZERO

    def clear_delivery(self) -> None:
        self.street = ""
        self.barangay = ""
        self.city = ""
        self.delivery_address = ""
        self.clear_quote()

    @property
    def has_quote(self) -> bool:
        return self.delivery_distance_km > 0 and self.delivery_fee > 0
