"""Tests for the OSRM routing and Photon geocoding adapters."""

import httpx
import pytest

from roameo.core.adapters.errors import GeocodeError, RouteNotFoundError
from roameo.core.adapters.geocode import CityGeocoder
from roameo.core.adapters.osrm import OsrmRouteService
from roameo.core.models.common import Geo, RouteSource


def make_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_geocoder_uses_static_table_without_http() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500)

    client = make_client(handler)
    geocoder = CityGeocoder(client=client)

    geo = await geocoder.geocode("Visakhapatnam")
    assert geo == Geo(lat=17.6868, lon=83.2185)
    assert calls == []

    await client.aclose()


@pytest.mark.asyncio
async def test_geocoder_queries_photon_and_memoizes() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(
            200,
            json={"features": [{"geometry": {"type": "Point", "coordinates": [76.46, 15.335]}}]},
        )

    client = make_client(handler)
    geocoder = CityGeocoder(client=client, user_agent="TestAgent/1.0")

    first = await geocoder.geocode("Hampi")
    second = await geocoder.geocode(" hampi ")

    # Photon coordinates are [lon, lat]
    assert first == Geo(lat=15.335, lon=76.46)
    assert second == first
    assert len(calls) == 1
    assert calls[0].url.params["q"] == "Hampi"
    assert calls[0].url.params["limit"] == "1"
    assert calls[0].headers["User-Agent"] == "TestAgent/1.0"

    await client.aclose()


@pytest.mark.asyncio
async def test_geocoder_raises_when_no_match() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"features": []})

    client = make_client(handler)
    geocoder = CityGeocoder(client=client)

    with pytest.raises(GeocodeError):
        await geocoder.geocode("Nowhereville")
    with pytest.raises(GeocodeError):
        await geocoder.geocode("   ")

    await client.aclose()


@pytest.mark.asyncio
async def test_osrm_parses_route_response() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(
            200,
            json={"code": "Ok", "routes": [{"duration": 33840, "distance": 612400}]},
        )

    client = make_client(handler)
    service = OsrmRouteService(CityGeocoder(client=client), client=client)

    route = await service.route_time("Visakhapatnam", "Tirupati")

    assert route.hours == 9.4
    assert route.distance_km == 612
    assert route.source == RouteSource.service

    # lon,lat order in the path
    assert calls[0].url.path == "/route/v1/driving/83.2185,17.6868;79.4192,13.6288"
    assert calls[0].url.params["overview"] == "false"

    await client.aclose()


@pytest.mark.asyncio
async def test_osrm_raises_when_no_route() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": "NoRoute", "routes": []})

    client = make_client(handler)
    service = OsrmRouteService(CityGeocoder(client=client), client=client)

    with pytest.raises(RouteNotFoundError):
        await service.route_time("Mumbai", "Tokyo")

    await client.aclose()


@pytest.mark.asyncio
async def test_osrm_propagates_http_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    client = make_client(handler)
    service = OsrmRouteService(CityGeocoder(client=client), client=client)

    with pytest.raises(httpx.HTTPStatusError):
        await service.route_time("Mumbai", "Pune")

    await client.aclose()
