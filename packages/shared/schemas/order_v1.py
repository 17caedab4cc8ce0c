"""Shared order vocabulary (v1).

Wire values match the restaurant backend's order-creation payload, so terminals and the
POS service agree on the same strings.
"""

from __future__ import annotations

from enum import Enum


class OrderTypeV1(str, Enum):
    DINE_IN = "dine_in"
    PICKUP = "pickup"
    DELIVERY = "delivery"


class DiscountTypeV1(str, Enum):
    NONE = "none"
    PWD = "pwd"
    SENIOR = "senior"

    @property
    def label(self) -> str | None:
        if self is DiscountTypeV1.PWD:
            return "PWD"
        if self is DiscountTypeV1.SENIOR:
            return "Senior"
        return None


class PaymentMethodV1(str, Enum):
    CASH = "cash"
    GCASH = "gcash"


class GateStateV1(str, Enum):
    INCOMPLETE = "INCOMPLETE"
    READY = "READY"
    SUBMITTING = "SUBMITTING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class BlockReasonV1(str, Enum):
    """Why checkout is blocked. Values double as the user-facing text."""

    MISSING_CUSTOMER_NAME = "missing customer name"
    EMPTY_CART = "no items in order"
    INCOMPLETE_ADDRESS = "incomplete delivery address"
    MISSING_PHONE = "missing phone"
    MISSING_DELIVERY_QUOTE = "delivery fee not quoted"
    MISSING_DISCOUNT_ID = "missing discount ID number"
    INSUFFICIENT_CASH = "insufficient cash"
    OVER_CAPACITY = "not enough servings available"
