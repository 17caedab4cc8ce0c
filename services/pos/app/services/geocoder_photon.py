from __future__ import annotations

import logging
import math
import os
from collections import OrderedDict
from dataclasses import dataclass

import httpx

from services.pos.app.engine.errors import GeocodeError
from services.pos.app.models.draft import Coordinates

logger = logging.getLogger(__name__)

CACHE_MAX_ENTRIES = 512


@dataclass(frozen=True, slots=True)
class _PhotonConfig:
    base_url: str
    user_agent: str
    timeout_s: float


class PhotonGeocoder:
    """Geocoder backed by a Photon (komoot) compatible endpoint.

    Env vars:
    - POS_GEOCODE_BASE_URL (default: https://photon.komoot.io/api/)
    - POS_GEOCODE_USER_AGENT (default: PoblaGO-POS/1.0)
    - POS_HTTP_TIMEOUT_S (default: 10)

    Resolved coordinates are cached per normalized address, keeping only the most
    recently used addresses.
    """

    provider = "PHOTON"

    def __init__(
        self,
        cfg: _PhotonConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        cache_size: int = CACHE_MAX_ENTRIES,
    ) -> None:
        self._cfg = cfg
        self._transport = transport
        self._cache_size = cache_size
        self._cache: OrderedDict[str, Coordinates] = OrderedDict()

    @classmethod
    def from_env(cls) -> "PhotonGeocoder":
        return cls(
            _PhotonConfig(
                base_url=os.getenv("POS_GEOCODE_BASE_URL", "https://photon.komoot.io/api/"),
                user_agent=os.getenv("POS_GEOCODE_USER_AGENT", "PoblaGO-POS/1.0"),
                timeout_s=float(os.getenv("POS_HTTP_TIMEOUT_S", "10")),
            )
        )

    async def geocode(self, address: str) -> Coordinates:
        key = address.strip().lower()
        if not key:
            raise GeocodeError("Address is empty", address=address)

        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            logger.debug("geocode cache hit for %r", address)
            return cached

        params = {"q": address, "limit": 1, "lang": "en"}
        headers = {"User-Agent": self._cfg.user_agent}
        try:
            async with httpx.AsyncClient(
                timeout=self._cfg.timeout_s, transport=self._transport
            ) as client:
                resp = await client.get(self._cfg.base_url, params=params, headers=headers)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise GeocodeError(
                f"Geocoding request failed with status {e.response.status_code}",
                address=address,
            ) from e
        except httpx.RequestError as e:
            raise GeocodeError(f"Mapping service unreachable: {e}", address=address) from e
        except ValueError as e:
            raise GeocodeError("Mapping service returned invalid JSON", address=address) from e

        coords = _first_point(data)
        if coords is None:
            raise GeocodeError(f"No location found for {address!r}", address=address)

        self._cache[key] = coords
        if len(self._cache) > self._cache_size:
            self._cache.popitem(last=False)
        return coords


def _first_point(data: object) -> Coordinates | None:
    features = data.get("features") if isinstance(data, dict) else None
    if not isinstance(features, list) or not features:
        return None

    feature = features[0]
    if not isinstance(feature, dict):
        return None
    geometry = feature.get("geometry")
    if not isinstance(geometry, dict):
        return None

    point = geometry.get("coordinates")
    if not isinstance(point, list) or len(point) < 2:
        return None

    try:
        longitude, latitude = float(point[0]), float(point[1])
    except (TypeError, ValueError):
        return None

    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        return None
    return Coordinates(latitude=latitude, longitude=longitude)
