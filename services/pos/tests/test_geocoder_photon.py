from __future__ import annotations

import asyncio

import httpx
import pytest
from services.pos.app.engine.errors import GeocodeError
from services.pos.app.services.geocoder_photon import PhotonGeocoder, _PhotonConfig

ADDRESS = "12 Rizal St, Poblacion, Boac, Marinduque, MIMAROPA"


def _geocoder(handler, cache_size: int = 8) -> PhotonGeocoder:
    cfg = _PhotonConfig(base_url="https://photon.test/api/", user_agent="pos-tests", timeout_s=1.0)
    return PhotonGeocoder(cfg, transport=httpx.MockTransport(handler), cache_size=cache_size)


def test_geocode_reads_lon_lat_from_first_feature() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"features": [{"geometry": {"coordinates": [121.84, 13.4467]}}]},
        )

    coords = asyncio.run(_geocoder(handler).geocode(ADDRESS))

    assert coords.latitude == 13.4467
    assert coords.longitude == 121.84
    assert seen[0].url.params["q"] == ADDRESS
    assert seen[0].url.params["limit"] == "1"
    assert seen[0].url.params["lang"] == "en"
    assert seen[0].headers["User-Agent"] == "pos-tests"


def test_geocode_caches_by_normalized_address() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(200, json={"features": [{"geometry": {"coordinates": [121.8, 13.4]}}]})

    geocoder = _geocoder(handler)

    async def twice():
        await geocoder.geocode(ADDRESS)
        await geocoder.geocode(f"  {ADDRESS.upper()} ")

    asyncio.run(twice())
    assert calls == 1


@pytest.mark.parametrize(
    "body",
    [
        {"features": []},
        {"features": ["x"]},
        {"features": [{"geometry": ["bad"]}]},
        {},
        {"features": [{"geometry": {"coordinates": [121.8]}}]},
        {"features": [{"geometry": {"coordinates": ["NaN", 13.4]}}]},
        {"features": [{"geometry": {"coordinates": [121.8, "Infinity"]}}]},
    ],
)
def test_geocode_without_usable_point_fails(body) -> None:
    geocoder = _geocoder(lambda request: httpx.Response(200, json=body))
    with pytest.raises(GeocodeError):
        asyncio.run(geocoder.geocode(ADDRESS))


def test_geocode_http_error_is_a_geocode_error() -> None:
    geocoder = _geocoder(lambda request: httpx.Response(503, text="down"))
    with pytest.raises(GeocodeError, match="status 503"):
        asyncio.run(geocoder.geocode(ADDRESS))


def test_geocode_unreachable_is_a_geocode_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(GeocodeError, match="unreachable"):
        asyncio.run(_geocoder(handler).geocode(ADDRESS))


def test_geocode_cache_evicts_least_recently_used() -> None:
    queried: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        queried.append(request.url.params["q"])
        return httpx.Response(200, json={"features": [{"geometry": {"coordinates": [121.8, 13.4]}}]})

    geocoder = _geocoder(handler, cache_size=2)

    async def lookups():
        for address in ["Boac", "Gasan", "Boac", "Mogpog", "Boac", "Gasan"]:
            await geocoder.geocode(address)

    asyncio.run(lookups())
    assert queried == ["Boac", "Gasan", "Mogpog", "Gasan"]
