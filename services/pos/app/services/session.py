"""One POS terminal session: the order draft, its catalog snapshot and the checkout gate.

Every mutating operation validates first and only then touches the draft, then
re-derives pricing and eligibility. The two network-bound operations (delivery quote and
order submission) are one-shot, guarded against running twice at once, and their results
are dropped if the draft moved on while they were in flight.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from packages.shared.schemas.card_v1 import NoticeLevelV1, NoticeV1
from packages.shared.schemas.order_v1 import (
    BlockReasonV1,
    DiscountTypeV1,
    GateStateV1,
    OrderTypeV1,
    PaymentMethodV1,
)
from services.pos.app.engine import cart, gate, surcharge
from services.pos.app.engine.errors import (
    BackendUnavailableError,
    GeocodeError,
    SessionBusyError,
    SubmissionError,
    ValidationError,
)
from services.pos.app.engine.money import ZERO, parse_cash, parse_count
from services.pos.app.engine.pricing import PricingResult, derive
from services.pos.app.models.catalog import EMPTY_CATALOG, CatalogSnapshot
from services.pos.app.models.draft import LineItem, OrderDraft
from services.pos.app.services.backend_base import RestaurantBackend, TableStatus
from services.pos.app.services.geocoder_base import Geocoder
from services.pos.app.services.order_payload import build_order_payload

logger = logging.getLogger(__name__)

GENERIC_SUBMIT_FAILURE = "Failed to create order"
MAX_NOTICES = 8

_UNSET = object()


@dataclass(frozen=True, slots=True)
class SubmitOutcome:
    completed: bool
    message: str
    order_id: str | None = None
    receipt: PricingResult | None = None
    error: SubmissionError | None = None


class PosSession:
    def __init__(
        self,
        session_id: str,
        backend: RestaurantBackend,
        geocoder: Geocoder,
        catalog: CatalogSnapshot = EMPTY_CATALOG,
    ) -> None:
        self.id = session_id
        self.draft = OrderDraft()
        self.catalog = catalog
        self.table_status: TableStatus | None = None
        self.awaiting_confirmation = False
        self.last_outcome: SubmitOutcome | None = None

        self._backend = backend
        self._geocoder = geocoder
        self._state = GateStateV1.INCOMPLETE
        self._notices: list[NoticeV1] = []
        self._generation = 0
        self._quoting = False
        self._submitting = False

    # --- derived state ------------------------------------------------------------

    @property
    def pricing(self) -> PricingResult:
        return derive(self.draft, self.catalog)

    def eligibility(self) -> gate.Eligibility:
        result = gate.evaluate(self.draft, self.pricing, self.catalog)
        if self._submitting:
            return gate.Eligibility(state=GateStateV1.SUBMITTING)
        if self._state in (GateStateV1.COMPLETED, GateStateV1.FAILED):
            return gate.Eligibility(state=self._state, reasons=result.reasons, messages=result.messages)
        return result

    @property
    def quoting(self) -> bool:
        return self._quoting

    def notify(self, level: NoticeLevelV1, message: str, *, retryable: bool = False) -> None:
        self._notices.append(NoticeV1(level=level, message=message, retryable=retryable))

    def drain_notices(self) -> list[NoticeV1]:
        notices, self._notices = self._notices, []
        if len(notices) > MAX_NOTICES:
            for dropped in notices[:-MAX_NOTICES]:
                logger.warning("session %s: notice not shown: %s %s", self.id, dropped.level.value, dropped.message)
            notices = notices[-MAX_NOTICES:]
        return notices

    def _touch(self) -> None:
        self.awaiting_confirmation = False
        self._state = gate.evaluate(self.draft, self.pricing, self.catalog).state

    def _ensure_idle(self) -> None:
        if self._submitting:
            raise SessionBusyError("submission")

    # --- catalog ------------------------------------------------------------------

    async def refresh_catalog(self) -> CatalogSnapshot:
        snapshot = await self._backend.fetch_catalog()
        self.catalog = snapshot
        logger.info("session %s: catalog refreshed (%d items)", self.id, len(snapshot.items))
        if not self._submitting and self._state not in (GateStateV1.COMPLETED, GateStateV1.FAILED):
            self._touch()
        return snapshot

    # --- cart ---------------------------------------------------------------------

    def add_item(self, menu_item_id: str) -> LineItem:
        self._ensure_idle()
        line = cart.add_item(self.draft, self.catalog, menu_item_id)
        self._touch()
        return line

    def set_quantity(self, index: int, quantity: int) -> LineItem | None:
        self._ensure_idle()
        line = cart.set_quantity(self.draft, self.catalog, index, quantity)
        self._touch()
        return line

    def remove_item(self, index: int) -> LineItem:
        self._ensure_idle()
        line = cart.remove_item(self.draft, index)
        self._touch()
        return line

    # --- order details --------------------------------------------------------------

    def update_details(
        self,
        *,
        customer_name: str | None = None,
        customer_phone: str | None = None,
        order_type: OrderTypeV1 | None = None,
        table_number: str | None = None,
        notes: str | None = None,
        discount_type: DiscountTypeV1 | None = None,
        discount_id_number: str | None = None,
        payment_method: PaymentMethodV1 | None = None,
        cash_tendered: object = _UNSET,
        packaging_boxes: object = _UNSET,
        street: str | None = None,
        barangay: str | None = None,
        city: str | None = None,
    ) -> None:
        """Apply a partial update to the draft.

        Switching order type drops the fields that belonged to the old type. Any edit to
        the delivery address parts invalidates an existing delivery quote.
        """
        self._ensure_idle()
        d = self.draft

        new_type = order_type or d.order_type
        address_parts = (street, barangay, city)
        if any(p is not None for p in address_parts) and new_type is not OrderTypeV1.DELIVERY:
            raise ValidationError(
                "Delivery address can only be set on delivery orders",
                [BlockReasonV1.INCOMPLETE_ADDRESS],
            )

        if customer_name is not None:
            d.customer_name = customer_name
        if customer_phone is not None:
            d.customer_phone = customer_phone
        if table_number is not None:
            d.table_number = table_number
        if notes is not None:
            d.notes = notes

        if order_type is not None and order_type is not d.order_type:
            if d.order_type is OrderTypeV1.PICKUP:
                d.packaging_boxes = 0
            if d.order_type is OrderTypeV1.DELIVERY:
                d.clear_delivery()
                self._generation += 1
            d.order_type = order_type

        if discount_type is not None:
            d.discount_type = discount_type
            if discount_type is DiscountTypeV1.NONE:
                d.discount_id_number = ""
        if discount_id_number is not None and d.discount_type is not DiscountTypeV1.NONE:
            d.discount_id_number = discount_id_number

        if payment_method is not None:
            d.payment_method = payment_method
            if payment_method is not PaymentMethodV1.CASH:
                d.cash_tendered = ZERO
        if cash_tendered is not _UNSET and d.payment_method is PaymentMethodV1.CASH:
            d.cash_tendered = parse_cash(cash_tendered)

        if packaging_boxes is not _UNSET:
            d.packaging_boxes = parse_count(packaging_boxes) if d.order_type is OrderTypeV1.PICKUP else 0

        if any(p is not None for p in address_parts):
            self._apply_address(street, barangay, city)

        self._touch()

    def _apply_address(self, street: str | None, barangay: str | None, city: str | None) -> None:
        d = self.draft
        before = (d.street, d.barangay, d.city)
        d.street = street if street is not None else d.street
        d.barangay = barangay if barangay is not None else d.barangay
        d.city = city if city is not None else d.city

        if (d.street, d.barangay, d.city) == before:
            return

        # A quote is only good for the exact address it was made for.
        if d.has_quote or d.delivery_coordinates is not None:
            logger.info("session %s: address changed, delivery quote cleared", self.id)
        d.clear_quote()
        d.delivery_address = surcharge.compose_address(d.street, d.barangay, d.city)
        self._generation += 1

    # --- delivery quote -------------------------------------------------------------

    async def request_quote(self) -> surcharge.DeliveryQuote | None:
        """Geocode the composed address and price the delivery.

        Returns None when the result arrived for an address the draft no longer has.
        """
        self._ensure_idle()
        if self._quoting:
            raise SessionBusyError("delivery quote")
        if self.draft.order_type is not OrderTypeV1.DELIVERY:
            raise ValidationError("Delivery quotes are only available for delivery orders")

        address = self.draft.delivery_address
        if not address:
            raise ValidationError(
                "Please complete street, barangay and city",
                [BlockReasonV1.INCOMPLETE_ADDRESS],
            )

        generation = self._generation
        self._quoting = True
        logger.info("session %s: requesting delivery quote for %r", self.id, address)
        try:
            quote = await surcharge.quote_delivery(self._geocoder, address)
        except GeocodeError as e:
            logger.warning("session %s: geocode failed: %s", self.id, e)
            raise
        finally:
            self._quoting = False

        if generation != self._generation or self.draft.delivery_address != quote.address:
            logger.info("session %s: discarding stale quote for %r", self.id, quote.address)
            return None

        d = self.draft
        d.delivery_coordinates = quote.coordinates
        d.delivery_distance_km = quote.distance_km
        d.delivery_fee = quote.fee
        self._touch()
        self.notify(
            NoticeLevelV1.SUCCESS,
            f"Delivery fee {quote.fee:.2f} for {quote.distance_km:.2f} km",
        )
        return quote

    # --- tables ---------------------------------------------------------------------

    async def check_table(self, table_number: str) -> TableStatus:
        table_number = table_number.strip()
        if not table_number:
            raise ValidationError("Table number is required")

        status = await self._backend.table_status(table_number)
        self.table_status = status
        if not status.available:
            self.notify(
                NoticeLevelV1.WARNING,
                f"Table {table_number} is occupied by {status.customer} (Status: {status.status})",
            )
        return status

    # --- checkout -------------------------------------------------------------------

    def pay(self) -> PricingResult:
        """First step of checkout: ask the cashier to confirm the total."""
        self._ensure_idle()
        result = gate.evaluate(self.draft, self.pricing, self.catalog)
        if not result.ready:
            self._state = result.state
            self.awaiting_confirmation = False
            raise ValidationError(
                "Please fill in all required fields: " + ", ".join(result.messages),
                result.reasons,
            )

        self._state = GateStateV1.READY
        self.awaiting_confirmation = True
        return self.pricing

    def cancel_confirmation(self) -> None:
        self._ensure_idle()
        self._touch()

    async def confirm(self) -> SubmitOutcome:
        """Second step of checkout: submit the confirmed order to the backend."""
        self._ensure_idle()
        if not self.awaiting_confirmation:
            raise ValidationError("Review the total and confirm payment before submitting")

        result = gate.evaluate(self.draft, self.pricing, self.catalog)
        if not result.ready:
            self._state = result.state
            self.awaiting_confirmation = False
            raise ValidationError(
                "Please fill in all required fields: " + ", ".join(result.messages),
                result.reasons,
            )

        pricing = self.pricing
        payload = build_order_payload(self.draft, pricing)

        self._submitting = True
        self._state = GateStateV1.SUBMITTING
        self.awaiting_confirmation = False
        try:
            created = await self._backend.create_order(payload)
        except SubmissionError as e:
            self._state = GateStateV1.FAILED
            if e.table_status is not None:
                self.table_status = TableStatus.from_payload(self.draft.table_number, e.table_status)
            message = str(e) if e.is_seating_conflict else GENERIC_SUBMIT_FAILURE
            logger.warning("session %s: order rejected: %s", self.id, e)
            self.notify(NoticeLevelV1.ERROR, message, retryable=True)
            self.last_outcome = SubmitOutcome(completed=False, message=message, error=e)
            return self.last_outcome
        finally:
            self._submitting = False
            if self._state is GateStateV1.SUBMITTING:
                self._state = GateStateV1.FAILED

        logger.info("session %s: order %s created, total %s", self.id, created.order_id, pricing.total)
        self._state = GateStateV1.COMPLETED
        self.draft = OrderDraft()
        self.table_status = None
        self._generation += 1
        self.notify(NoticeLevelV1.SUCCESS, "Order created successfully")
        self.last_outcome = SubmitOutcome(
            completed=True,
            message="Order created successfully",
            order_id=created.order_id,
            receipt=pricing,
        )

        try:
            await self.refresh_catalog()
        except BackendUnavailableError as e:
            logger.warning("session %s: catalog refresh after order failed: %s", self.id, e)
            self.notify(NoticeLevelV1.WARNING, f"Menu not refreshed: {e}", retryable=True)

        return self.last_outcome

    def reset(self) -> None:
        self._ensure_idle()
        self.draft = OrderDraft()
        self.table_status = None
        self.last_outcome = None
        self._generation += 1
        self._touch()


def change_due(pricing: PricingResult) -> Decimal:
    """Change to hand back; only meaningful for a valid cash payment."""
    return pricing.change if pricing.cash_valid else ZERO
