from __future__ import annotations

import asyncio
import math
from decimal import Decimal

import pytest
from services.pos.app.engine.surcharge import BUSINESS_ORIGIN, EARTH_RADIUS_KM
from services.pos.app.models.catalog import AvailableMenuItem, CatalogSnapshot
from services.pos.app.models.draft import Coordinates
from services.pos.app.services.backend_mock import MockRestaurantBackend
from services.pos.app.services.geocoder_mock import MockGeocoder
from services.pos.app.services.session import PosSession

MENU = [
    {"id": "m-sisig", "name": "Pork Sisig", "category": "Mains", "price": 150, "availableServings": 10},
    {"id": "m-adobo", "name": "Chicken Adobo", "category": "Mains", "price": 200, "availableServings": 10},
    {"id": "m-lumpia", "name": "Lumpia", "category": "Sides", "price": 56, "availableServings": 2},
    {"id": "m-halo", "name": "Halo-Halo", "category": "Desserts", "price": 112, "availableServings": 5},
    {"id": "m-gone", "name": "Kare-Kare", "category": "Mains", "price": 300, "availableServings": 0},
]


def point_at_km(km: float) -> Coordinates:
    """A point due north of the restaurant, `km` away along the great circle."""
    return Coordinates(
        latitude=BUSINESS_ORIGIN.latitude + math.degrees(km / EARTH_RADIUS_KM),
        longitude=BUSINESS_ORIGIN.longitude,
    )


def snapshot(rows: list[dict] | None = None) -> CatalogSnapshot:
    return CatalogSnapshot(items=tuple(AvailableMenuItem.from_payload(r) for r in (rows or MENU)))


def money(value: str | int) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


@pytest.fixture()
def catalog() -> CatalogSnapshot:
    return snapshot()


@pytest.fixture()
def backend() -> MockRestaurantBackend:
    return MockRestaurantBackend(menu=[dict(r) for r in MENU])


@pytest.fixture()
def geocoder() -> MockGeocoder:
    return MockGeocoder(places={"boac": point_at_km(3), "gasan": point_at_km(4), "mogpog": point_at_km(0.5)})


@pytest.fixture()
def session(backend: MockRestaurantBackend, geocoder: MockGeocoder) -> PosSession:
    s = PosSession("s-1", backend=backend, geocoder=geocoder)
    asyncio.run(s.refresh_catalog())
    return s
