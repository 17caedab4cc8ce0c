"""Fulfillment surcharges: packaging boxes for pickup, distance-based fee for delivery.

Delivery is quoted in two phases. The address is composed from its parts first; only a
complete address can be sent to the geocoder, and the resulting distance from the
restaurant is turned into a fee. A quote belongs to the exact address it was made for.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal

from packages.shared.schemas.order_v1 import BlockReasonV1, OrderTypeV1
from services.pos.app.engine.errors import GeocodeError, ValidationError
from services.pos.app.engine.money import ZERO, q2
from services.pos.app.models.draft import Coordinates
from services.pos.app.services.geocoder_base import Geocoder

PACKAGING_FEE_PER_BOX = Decimal("10")

DELIVERY_RATE_PER_KM = Decimal("30")
DELIVERY_MIN_FEE = Decimal("50")

BUSINESS_ORIGIN = Coordinates(latitude=13.475246207507663, longitude=121.85945810514359)
EARTH_RADIUS_KM = 6371.0

PROVINCE = "Marinduque"
REGION = "MIMAROPA"


@dataclass(frozen=True, slots=True)
class DeliveryQuote:
    address: str
    coordinates: Coordinates
    distance_km: Decimal
    fee: Decimal


def packaging_fee(order_type: OrderTypeV1, boxes: int) -> Decimal:
    if order_type is not OrderTypeV1.PICKUP or boxes <= 0:
        return ZERO
    return q2(PACKAGING_FEE_PER_BOX * boxes)


def compose_address(street: str, barangay: str, city: str) -> str:
    """Full delivery address, or "" while any required part is missing."""
    parts = [(street or "").strip(), (barangay or "").strip(), (city or "").strip()]
    if not all(parts):
        return ""
    return ", ".join([*parts, PROVINCE, REGION])


def distance_km(origin: Coordinates, target: Coordinates) -> Decimal:
    """Great-circle (haversine) distance, rounded to 2 decimals."""
    d_lat = math.radians(target.latitude - origin.latitude)
    d_lon = math.radians(target.longitude - origin.longitude)
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(target.latitude)

    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return q2(EARTH_RADIUS_KM * c)


def delivery_fee(distance: Decimal | float | None) -> Decimal:
    if distance is None:
        return q2(DELIVERY_MIN_FEE)
    distance = Decimal(str(distance))
    if not distance.is_finite() or distance <= 0:
        return q2(DELIVERY_MIN_FEE)
    return max(q2(DELIVERY_MIN_FEE), q2(distance * DELIVERY_RATE_PER_KM))


async def quote_delivery(geocoder: Geocoder, address: str) -> DeliveryQuote:
    if not address:
        raise ValidationError(
            "Complete the delivery address before requesting a quote",
            [BlockReasonV1.INCOMPLETE_ADDRESS],
        )

    coords = await geocoder.geocode(address)
    if not (math.isfinite(coords.latitude) and math.isfinite(coords.longitude)):
        raise GeocodeError("Geocoder returned invalid coordinates", address=address)

    distance = distance_km(BUSINESS_ORIGIN, coords)
    return DeliveryQuote(
        address=address,
        coordinates=coords,
        distance_km=distance,
        fee=delivery_fee(distance),
    )
