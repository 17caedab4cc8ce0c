from __future__ import annotations

from typing import Protocol

from services.pos.app.models.draft import Coordinates


class Geocoder(Protocol):
    provider: str

    async def geocode(self, address: str) -> Coordinates:
        """Resolve an address or raise GeocodeError."""
        ...
