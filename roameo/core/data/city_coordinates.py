"""Static city coordinates for offline geocoding and distance-tier estimates."""

from roameo.core.models.common import Geo

# (lat, lon) keyed by lowercase city name; aliases share coordinates
CITY_COORDINATES: dict[str, tuple[float, float]] = {
    # India
    "mumbai": (19.0760, 72.8777),
    "delhi": (28.6139, 77.2090),
    "new delhi": (28.6139, 77.2090),
    "bangalore": (12.9716, 77.5946),
    "bengaluru": (12.9716, 77.5946),
    "hyderabad": (17.3850, 78.4867),
    "chennai": (13.0827, 80.2707),
    "kolkata": (22.5726, 88.3639),
    "goa": (15.2993, 74.1240),
    "jaipur": (26.9124, 75.7873),
    "agra": (27.1767, 78.0081),
    "varanasi": (25.3176, 82.9739),
    "udaipur": (24.5854, 73.7125),
    "shimla": (31.1048, 77.1734),
    "manali": (32.2396, 77.1887),
    "pune": (18.5204, 73.8567),
    "mysore": (12.2958, 76.6394),
    "mysuru": (12.2958, 76.6394),
    "kochi": (9.9312, 76.2673),
    "rishikesh": (30.0869, 78.2676),
    "pondicherry": (11.9416, 79.8083),
    "ooty": (11.4102, 76.6950),
    "darjeeling": (27.0410, 88.2663),
    "leh": (34.1526, 77.5771),
    "amritsar": (31.6340, 74.8723),
    "lucknow": (26.8467, 80.9462),
    "ahmedabad": (23.0225, 72.5714),
    "nagpur": (21.1458, 79.0882),
    "tirupati": (13.6288, 79.4192),
    "visakhapatnam": (17.6868, 83.2185),
    "vizag": (17.6868, 83.2185),
    # Asia
    "tokyo": (35.6762, 139.6503),
    "osaka": (34.6937, 135.5023),
    "kyoto": (35.0116, 135.7681),
    "dubai": (25.2048, 55.2708),
    "bangkok": (13.7563, 100.5018),
    "singapore": (1.3521, 103.8198),
    "bali": (-8.3405, 115.0920),
    "seoul": (37.5665, 126.9780),
    "kuala lumpur": (3.1390, 101.6869),
    "hong kong": (22.3193, 114.1694),
    # Europe
    "paris": (48.8566, 2.3522),
    "lyon": (45.7640, 4.8357),
    "london": (51.5074, -0.1278),
    "rome": (41.9028, 12.4964),
    "florence": (43.7696, 11.2558),
    "barcelona": (41.3874, 2.1686),
    "madrid": (40.4168, -3.7038),
    "amsterdam": (52.3676, 4.9041),
    "istanbul": (41.0082, 28.9784),
    "berlin": (52.5200, 13.4050),
    "munich": (48.1351, 11.5820),
    "vienna": (48.2082, 16.3738),
    "prague": (50.0755, 14.4378),
    "lisbon": (38.7223, -9.1393),
    "athens": (37.9838, 23.7275),
    "zurich": (47.3769, 8.5417),
    # Americas
    "new york": (40.7128, -74.0060),
    "boston": (42.3601, -71.0589),
    "san francisco": (37.7749, -122.4194),
    "los angeles": (34.0522, -118.2437),
    "toronto": (43.6532, -79.3832),
    "miami": (25.7617, -80.1918),
    # Africa & Oceania
    "cairo": (30.0444, 31.2357),
    "cape town": (-33.9249, 18.4241),
    "sydney": (-33.8688, 151.2093),
    "melbourne": (-37.8136, 144.9631),
}


def get_city_coords(location: str | None) -> Geo | None:
    """Look up coordinates by exact, then partial, city name match."""
    if not location:
        return None
    norm = location.strip().lower()
    if not norm:
        return None

    exact = CITY_COORDINATES.get(norm)
    if exact:
        return Geo(lat=exact[0], lon=exact[1])

    if len(norm) < 3:
        return None

    # "Paris, France" or "old goa" style inputs
    for city, (lat, lon) in CITY_COORDINATES.items():
        if city in norm or norm in city:
            return Geo(lat=lat, lon=lon)
    return None
