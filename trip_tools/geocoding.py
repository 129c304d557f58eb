"""Place-name -> coordinate lookups with rate limiting and fallbacks.

Every lookup walks the same chain: scoped text search, then a plain geocode,
then either the parent location's coordinates (for places) or the (0, 0)
sentinel. Provider failures count as misses; they never abort a build.
"""
from typing import Dict, List, Optional, Protocol, Sequence
import asyncio
import json
import logging
import time
from datetime import datetime

import httpx
from pydantic import BaseModel

from .config import CONFIG
from .errors import ExternalProviderError
from .models import SENTINEL, GeocodedPlace, GeoPoint, PlaceCategory


# Itinerary place categories -> Google place types.
GOOGLE_PLACE_TYPES: Dict[str, str] = {
    "stay": "lodging",
    "food": "restaurant",
    "attraction": "tourist_attraction",
    "activity": "park",
}


class GeoHit(BaseModel):
    coordinates: GeoPoint
    address: Optional[str] = None
    provider_id: Optional[str] = None


class GeocodingProvider(Protocol):
    name: str

    async def text_search(self, query: str, category_hint: Optional[str] = None) -> Optional[GeoHit]: ...

    async def geocode(self, address: str) -> Optional[GeoHit]: ...


def _log_call(provider: str, fn: str, start_time: float, ok: bool, http_status: Optional[int]) -> None:
    latency_ms = (time.monotonic() - start_time) * 1000
    log_data = {
        "ts": datetime.utcnow().isoformat(),
        "tool": f"geo-{provider}",
        "fn": fn,
        "latency_ms": f"{latency_ms:.2f}",
        "ok": ok,
        "http_status": http_status,
    }
    logging.info(json.dumps(log_data))


def _json_body(resp: httpx.Response, provider: str, fn: str, start_time: float, label: str, shape: type):
    """Decoded 200 body; anything that is not JSON of the expected shape is a provider failure."""
    try:
        data = resp.json()
    except ValueError:
        _log_call(provider, fn, start_time, False, resp.status_code)
        raise ExternalProviderError(label, "response was not JSON", resp.status_code)
    if not isinstance(data, shape):
        _log_call(provider, fn, start_time, False, resp.status_code)
        raise ExternalProviderError(label, f"unexpected response body ({type(data).__name__})", resp.status_code)
    return data


class NominatimProvider:
    name = "nominatim"

    def __init__(self, client: httpx.AsyncClient, base_url: str | None = None) -> None:
        self._client = client
        self._base = (base_url or CONFIG.nominatim_base).rstrip("/")

    async def _search(self, fn: str, query: str) -> Optional[GeoHit]:
        start_time = time.monotonic()
        params = {
            "q": query,
            "format": "jsonv2",
            "limit": 1,
            "addressdetails": 0,
        }
        headers = {"User-Agent": CONFIG.user_agent}
        try:
            resp = await self._client.get(f"{self._base}/search", params=params, headers=headers)
        except httpx.HTTPError as e:
            _log_call(self.name, fn, start_time, False, None)
            raise ExternalProviderError("Nominatim", str(e))

        if resp.status_code != 200:
            _log_call(self.name, fn, start_time, False, resp.status_code)
            raise ExternalProviderError("Nominatim", f"HTTP {resp.status_code}", resp.status_code)

        data = _json_body(resp, self.name, fn, start_time, "Nominatim", list)
        _log_call(self.name, fn, start_time, True, resp.status_code)
        if not data or not isinstance(data[0], dict):
            return None
        first = data[0]
        try:
            point = GeoPoint(lat=float(first["lat"]), lng=float(first["lon"]))
        except (TypeError, ValueError, KeyError):
            return None
        return GeoHit(
            coordinates=point,
            address=first.get("display_name"),
            provider_id=str(first["place_id"]) if first.get("place_id") is not None else None,
        )

    async def text_search(self, query: str, category_hint: Optional[str] = None) -> Optional[GeoHit]:
        # Nominatim has no category filter; the hint is already part of the query text.
        return await self._search("text_search", query)

    async def geocode(self, address: str) -> Optional[GeoHit]:
        return await self._search("geocode", address)


class GoogleMapsProvider:
    name = "google"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        places_url: str | None = None,
        geocode_url: str | None = None,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._places_url = places_url or CONFIG.google_places_base
        self._geocode_url = geocode_url or CONFIG.google_maps_base

    async def _get(self, fn: str, url: str, params: Dict[str, str]) -> Optional[GeoHit]:
        start_time = time.monotonic()
        try:
            resp = await self._client.get(url, params={**params, "key": self._api_key})
        except httpx.HTTPError as e:
            _log_call(self.name, fn, start_time, False, None)
            raise ExternalProviderError("Google Maps", str(e))

        if resp.status_code != 200:
            _log_call(self.name, fn, start_time, False, resp.status_code)
            raise ExternalProviderError("Google Maps", f"HTTP {resp.status_code}", resp.status_code)

        data = _json_body(resp, self.name, fn, start_time, "Google Maps", dict)
        api_status = data.get("status")
        if api_status == "ZERO_RESULTS":
            _log_call(self.name, fn, start_time, True, resp.status_code)
            return None
        if api_status != "OK":
            _log_call(self.name, fn, start_time, False, resp.status_code)
            raise ExternalProviderError("Google Maps", data.get("error_message") or str(api_status))

        _log_call(self.name, fn, start_time, True, resp.status_code)
        results = data.get("results")
        if not isinstance(results, list) or not results:
            return None
        first = results[0]
        if not isinstance(first, dict):
            return None
        try:
            location = first["geometry"]["location"]
            point = GeoPoint(lat=float(location["lat"]), lng=float(location["lng"]))
        except (TypeError, ValueError, KeyError):
            return None
        return GeoHit(
            coordinates=point,
            address=first.get("formatted_address"),
            provider_id=first.get("place_id"),
        )

    async def text_search(self, query: str, category_hint: Optional[str] = None) -> Optional[GeoHit]:
        params = {"query": query}
        if category_hint and category_hint in GOOGLE_PLACE_TYPES:
            params["type"] = GOOGLE_PLACE_TYPES[category_hint]
        return await self._get("text_search", self._places_url, params)

    async def geocode(self, address: str) -> Optional[GeoHit]:
        return await self._get("geocode", self._geocode_url, {"address": address})


def provider_from_config(client: httpx.AsyncClient) -> GeocodingProvider:
    if CONFIG.google_maps_api_key:
        return GoogleMapsProvider(client, CONFIG.google_maps_api_key)
    return NominatimProvider(client)


class PlaceQuery(BaseModel):
    name: str
    category: PlaceCategory


class DayQuery(BaseModel):
    location: str
    places: List[PlaceQuery] = []


class ResolutionReport(BaseModel):
    locations_resolved: int = 0
    locations_total: int = 0
    places_resolved: int = 0
    places_inherited: int = 0
    places_total: int = 0


class ItineraryResolution(BaseModel):
    locations: Dict[str, GeoHit]
    days: List[List[GeocodedPlace]]
    report: ResolutionReport


def _scoped(*parts: Optional[str]) -> str:
    return ", ".join(p.strip() for p in parts if p and p.strip())


class GeocodingPipeline:
    """Sequential, rate-limited resolver shared by one conversation's tools."""

    def __init__(self, provider: GeocodingProvider, delay_sec: float | None = None) -> None:
        self.provider = provider
        self.delay_sec = CONFIG.geocode_delay_sec if delay_sec is None else delay_sec
        self._lock = asyncio.Lock()
        self._calls = 0

    async def _throttled(self, fn, *args) -> Optional[GeoHit]:
        if self._calls and self.delay_sec > 0:
            await asyncio.sleep(self.delay_sec)
        self._calls += 1
        try:
            return await fn(*args)
        except ExternalProviderError as e:
            logging.warning(json.dumps({"ts": datetime.utcnow().isoformat(), "tool": "geo", "error": e.message}))
            return None

    async def _lookup(self, query: str, category_hint: Optional[str] = None) -> Optional[GeoHit]:
        hit = await self._throttled(self.provider.text_search, query, category_hint)
        if hit is not None and hit.coordinates.is_resolved:
            return hit
        hit = await self._throttled(self.provider.geocode, query)
        if hit is not None and hit.coordinates.is_resolved:
            return hit
        return None

    async def resolve_itinerary(self, days: Sequence[DayQuery], region: Optional[str] = None) -> ItineraryResolution:
        start_time = time.monotonic()
        async with self._lock:
            self._calls = 0
            names: List[str] = []
            for day in days:
                if day.location not in names:
                    names.append(day.location)

            resolved: Dict[str, GeoHit] = {}
            report = ResolutionReport(locations_total=len(names))
            for name in names:
                hit = await self._lookup(_scoped(name, region))
                if hit is None:
                    resolved[name] = GeoHit(coordinates=SENTINEL)
                else:
                    resolved[name] = hit
                    report.locations_resolved += 1

            day_places: List[List[GeocodedPlace]] = []
            for day in days:
                parent = resolved[day.location].coordinates
                places: List[GeocodedPlace] = []
                for place in day.places:
                    report.places_total += 1
                    hit = await self._lookup(_scoped(place.name, day.location, region), place.category)
                    if hit is not None:
                        report.places_resolved += 1
                        places.append(
                            GeocodedPlace(
                                name=place.name,
                                category=place.category,
                                coordinates=hit.coordinates,
                                address=hit.address,
                                provider_id=hit.provider_id,
                            )
                        )
                        continue
                    if parent.is_resolved:
                        report.places_inherited += 1
                    places.append(GeocodedPlace(name=place.name, category=place.category, coordinates=parent))
                day_places.append(places)

        latency_ms = (time.monotonic() - start_time) * 1000
        log_data = {
            "ts": datetime.utcnow().isoformat(),
            "tool": "geo",
            "fn": "resolve_itinerary",
            "latency_ms": f"{latency_ms:.2f}",
            "locations": f"{report.locations_resolved}/{report.locations_total}",
            "places": f"{report.places_resolved}/{report.places_total}",
            "places_inherited": report.places_inherited,
        }
        logging.info(json.dumps(log_data))
        return ItineraryResolution(locations=resolved, days=day_places, report=report)

    async def geocode_locations(self, names: Sequence[str], country_hint: Optional[str] = None) -> List[Dict]:
        """Plain geocode for a batch of names; misses come back as the sentinel."""
        results: List[Dict] = []
        async with self._lock:
            self._calls = 0
            for name in names:
                hit = await self._throttled(self.provider.geocode, _scoped(name, country_hint))
                point = hit.coordinates if hit is not None else SENTINEL
                item = {"name": name, "lat": point.lat, "lng": point.lng}
                if hit is not None and hit.address:
                    item["address"] = hit.address
                if hit is not None and hit.provider_id:
                    item["placeId"] = hit.provider_id
                results.append(item)
        return results
