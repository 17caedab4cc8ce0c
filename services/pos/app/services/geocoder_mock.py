from __future__ import annotations

from services.pos.app.engine.errors import GeocodeError
from services.pos.app.models.draft import Coordinates

# Approximate town centres of the Marinduque municipalities.
_MUNICIPALITIES = {
    "boac": Coordinates(latitude=13.4467, longitude=121.8400),
    "buenavista": Coordinates(latitude=13.2557, longitude=121.9420),
    "gasan": Coordinates(latitude=13.3236, longitude=121.8466),
    "mogpog": Coordinates(latitude=13.4750, longitude=121.8633),
    "santa cruz": Coordinates(latitude=13.4760, longitude=122.0270),
    "torrijos": Coordinates(latitude=13.3167, longitude=122.0833),
}


class MockGeocoder:
    """Deterministic geocoder for tests and local dev.

    Resolves an address to the centre of the first municipality it mentions.
    """

    provider = "MOCK"

    def __init__(self, places: dict[str, Coordinates] | None = None) -> None:
        self._places = dict(_MUNICIPALITIES if places is None else places)
        self.calls: list[str] = []

    async def geocode(self, address: str) -> Coordinates:
        self.calls.append(address)
        text = address.lower()
        for name, coords in self._places.items():
            if name in text:
                return coords
        raise GeocodeError(f"No location found for {address!r}", address=address)
