"""OSRM driving-route adapter."""

import httpx

from roameo.core.adapters.errors import RouteNotFoundError
from roameo.core.adapters.geocode import CityGeocoder
from roameo.core.models.common import RouteSource
from roameo.core.models.route import RouteTime


class OsrmRouteService:
    """Driving time and distance between two cities from an OSRM server."""

    name = "osrm"

    def __init__(
        self,
        geocoder: CityGeocoder,
        base_url: str = "https://router.project-osrm.org",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.geocoder = geocoder
        self.base_url = base_url.rstrip("/")
        self._client = client

    async def route_time(self, from_city: str, to_city: str) -> RouteTime:
        """Fetch the driving route between two cities.

        Raises:
            GeocodeError: Either city could not be resolved
            RouteNotFoundError: OSRM answered without a usable route
            httpx.HTTPError: On network or HTTP errors
        """
        origin = await self.geocoder.geocode(from_city)
        target = await self.geocoder.geocode(to_city)

        # OSRM expects lon,lat pairs
        url = (
            f"{self.base_url}/route/v1/driving/"
            f"{origin.lon},{origin.lat};{target.lon},{target.lat}"
        )

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=4.0)
            close_client = True

        try:
            response = await client.get(url, params={"overview": "false"})
            response.raise_for_status()
            data = response.json()
        finally:
            if close_client:
                await client.aclose()

        routes = data.get("routes") or []
        if data.get("code") != "Ok" or not routes:
            raise RouteNotFoundError(
                f"No route {from_city} -> {to_city}: {data.get('code', 'unknown')}"
            )

        try:
            duration_s = float(routes[0]["duration"])
            distance_m = float(routes[0]["distance"])
        except (KeyError, TypeError, ValueError) as e:
            raise RouteNotFoundError(f"Malformed route {from_city} -> {to_city}") from e

        return RouteTime(
            hours=round(duration_s / 3600, 1),
            distance_km=round(distance_m / 1000),
            source=RouteSource.service,
        )
