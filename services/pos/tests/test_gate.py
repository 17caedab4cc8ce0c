from __future__ import annotations

from packages.shared.schemas.order_v1 import (
    BlockReasonV1,
    DiscountTypeV1,
    GateStateV1,
    OrderTypeV1,
    PaymentMethodV1,
)
from services.pos.app.engine import cart, gate, surcharge
from services.pos.app.engine.pricing import derive
from services.pos.app.models.draft import OrderDraft
from services.pos.tests.conftest import money, point_at_km


def _evaluate(draft: OrderDraft, catalog) -> gate.Eligibility:
    return gate.evaluate(draft, derive(draft, catalog), catalog)


def test_empty_draft_lists_every_missing_piece(catalog) -> None:
    result = _evaluate(OrderDraft(), catalog)

    assert result.state is GateStateV1.INCOMPLETE
    assert result.reasons == [
        BlockReasonV1.MISSING_CUSTOMER_NAME,
        BlockReasonV1.EMPTY_CART,
        BlockReasonV1.INSUFFICIENT_CASH,
    ]


def test_complete_dine_in_cash_order_is_ready(catalog) -> None:
    draft = OrderDraft(customer_name="Ana", cash_tendered=money(300))
    cart.add_item(draft, catalog, "m-sisig")
    cart.add_item(draft, catalog, "m-sisig")

    result = _evaluate(draft, catalog)
    assert result.ready
    assert result.reasons == []


def test_discount_requires_id_number(catalog) -> None:
    draft = OrderDraft(
        customer_name="Lola",
        discount_type=DiscountTypeV1.PWD,
        payment_method=PaymentMethodV1.GCASH,
    )
    cart.add_item(draft, catalog, "m-halo")

    result = _evaluate(draft, catalog)
    assert result.reasons == [BlockReasonV1.MISSING_DISCOUNT_ID]
    assert result.messages == ["missing ID number for PWD discount"]

    draft.discount_id_number = "PWD-0001"
    assert _evaluate(draft, catalog).ready


def test_delivery_without_phone_reports_missing_phone(catalog) -> None:
    quote_point = point_at_km(4)
    distance = surcharge.distance_km(surcharge.BUSINESS_ORIGIN, quote_point)
    draft = OrderDraft(
        customer_name="Ben",
        order_type=OrderTypeV1.DELIVERY,
        payment_method=PaymentMethodV1.GCASH,
        street="12 Rizal St",
        barangay="Poblacion",
        city="Gasan",
        delivery_address=surcharge.compose_address("12 Rizal St", "Poblacion", "Gasan"),
        delivery_coordinates=quote_point,
        delivery_distance_km=distance,
        delivery_fee=surcharge.delivery_fee(distance),
    )
    cart.add_item(draft, catalog, "m-adobo")

    assert draft.delivery_fee == money(120)

    result = _evaluate(draft, catalog)
    assert result.state is GateStateV1.INCOMPLETE
    assert result.reasons == [BlockReasonV1.MISSING_PHONE]
    assert result.messages == ["missing phone"]


def test_delivery_without_quote_is_blocked(catalog) -> None:
    draft = OrderDraft(
        customer_name="Ben",
        customer_phone="0917",
        order_type=OrderTypeV1.DELIVERY,
        payment_method=PaymentMethodV1.GCASH,
        delivery_address="12 Rizal St, Poblacion, Gasan, Marinduque, MIMAROPA",
    )
    cart.add_item(draft, catalog, "m-adobo")

    assert _evaluate(draft, catalog).reasons == [BlockReasonV1.MISSING_DELIVERY_QUOTE]


def test_incomplete_address_is_blocked(catalog) -> None:
    draft = OrderDraft(
        customer_name="Ben",
        customer_phone="0917",
        order_type=OrderTypeV1.DELIVERY,
        payment_method=PaymentMethodV1.GCASH,
        street="12 Rizal St",
    )
    cart.add_item(draft, catalog, "m-adobo")

    reasons = _evaluate(draft, catalog).reasons
    assert BlockReasonV1.INCOMPLETE_ADDRESS in reasons
    assert BlockReasonV1.MISSING_DELIVERY_QUOTE in reasons


def test_short_cash_blocks_checkout(catalog) -> None:
    draft = OrderDraft(customer_name="Ana", cash_tendered=money(100))
    cart.add_item(draft, catalog, "m-sisig")

    assert _evaluate(draft, catalog).reasons == [BlockReasonV1.INSUFFICIENT_CASH]
