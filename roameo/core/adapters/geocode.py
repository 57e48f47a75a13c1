"""City geocoder: static coordinate table first, Photon (OSM) second."""

import logging

import httpx

from roameo.core.adapters.errors import GeocodeError
from roameo.core.data.city_coordinates import get_city_coords
from roameo.core.models.common import Geo

logger = logging.getLogger(__name__)


class CityGeocoder:
    """Resolves city names to coordinates, memoizing remote lookups."""

    def __init__(
        self,
        base_url: str = "https://photon.komoot.io/api/",
        user_agent: str = "RoameoTravelApp/1.0",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url
        self.user_agent = user_agent
        self._client = client
        self._memo: dict[str, Geo] = {}

    async def geocode(self, place: str) -> Geo:
        """Resolve `place` to coordinates.

        Raises:
            GeocodeError: Blank name, no match, or malformed response
            httpx.HTTPError: On network or HTTP errors
        """
        key = place.strip().lower()
        if not key:
            raise GeocodeError("Cannot geocode an empty place name")

        known = get_city_coords(key)
        if known:
            return known
        if key in self._memo:
            return self._memo[key]

        geo = await self._fetch(place.strip())
        self._memo[key] = geo
        logger.debug(f"[geocode] {place} -> {geo.lat:.4f},{geo.lon:.4f}")
        return geo

    async def _fetch(self, place: str) -> Geo:
        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=4.0)
            close_client = True

        try:
            response = await client.get(
                self.base_url,
                params={"q": place, "limit": 1},
                headers={"User-Agent": self.user_agent},
            )
            response.raise_for_status()
            data = response.json()
        finally:
            if close_client:
                await client.aclose()

        # Photon returns GeoJSON: features[].geometry.coordinates = [lon, lat]
        features = data.get("features") or []
        if not features:
            raise GeocodeError(f"No geocoding match for {place!r}")
        try:
            lon, lat = features[0]["geometry"]["coordinates"][:2]
            return Geo(lat=float(lat), lon=float(lon))
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodeError(f"Malformed geocoding response for {place!r}") from e
