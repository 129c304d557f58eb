import os
from typing import Final


class _Config:
    def __init__(self) -> None:
        # Security / limits
        self.api_key: str | None = os.getenv("MCP_API_KEY")
        self.rate_limit: str = os.getenv("MCP_RATE_LIMIT", "30/minute")

        # HTTP behavior
        self.user_agent: str = os.getenv("MCP_USER_AGENT", "TripPlanner-Tools")
        try:
            self.http_timeout_sec: float = float(os.getenv("HTTP_TIMEOUT_SEC", "10"))
        except ValueError:
            self.http_timeout_sec = 10.0

        # Geocoding
        self.nominatim_base: str = os.getenv("NOMINATIM_BASE", "https://nominatim.openstreetmap.org")
        self.google_maps_api_key: str | None = os.getenv("GOOGLE_MAPS_API_KEY")
        self.google_maps_base: str = os.getenv("GOOGLE_MAPS_BASE", "https://maps.googleapis.com/maps/api/geocode/json")
        self.google_places_base: str = os.getenv(
            "GOOGLE_PLACES_BASE", "https://maps.googleapis.com/maps/api/place/textsearch/json"
        )
        try:
            self.geocode_delay_sec: float = float(os.getenv("GEOCODE_DELAY_SEC", "0.1"))
        except ValueError:
            self.geocode_delay_sec = 0.1

        # Hotel booking provider
        self.rapidapi_key: str | None = os.getenv("RAPID_API_KEY")
        self.booking_host: str = os.getenv("BOOKING_HOST", "booking-com.p.rapidapi.com")

        # Currency resolution
        self.default_currency: str = os.getenv("DEFAULT_CURRENCY", "USD").upper()
        self.default_country: str = os.getenv("DEFAULT_COUNTRY", "US").upper()
        self.geo_country_header: str = os.getenv("GEO_COUNTRY_HEADER", "x-vercel-ip-country").lower()


CONFIG: Final[_Config] = _Config()
