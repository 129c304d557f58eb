from typing import Any, Dict, List, Literal, Optional
import json
import logging
import math
import time
from datetime import datetime

import httpx
from pydantic import BaseModel

from .config import CONFIG
from .currency.codes import CurrencyCode
from .dates import DateRange
from .errors import ExternalProviderError
from .models import Hotel


SortBy = Literal["popularity", "price", "review_score", "distance"]


class Occupancy(BaseModel):
    adults: int = 2
    rooms: int = 1


class HotelFilters(BaseModel):
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    sort_by: SortBy = "popularity"


def review_word(score: Optional[float]) -> str:
    if not score:
        return "No rating"
    if score >= 9:
        return "Exceptional"
    if score >= 8:
        return "Excellent"
    if score >= 7:
        return "Very Good"
    if score >= 6:
        return "Good"
    if score >= 5:
        return "Fair"
    return "No rating"


# name, street, stars, review score, review count, price multiplier, amenities, distance
_MOCK_INVENTORY = [
    ("Grand Plaza Hotel", "123 Main Street", 4, 8.6, 2847, 1.2,
     ["Free WiFi", "Pool", "Spa", "Restaurant"], "0.5 km from center"),
    ("Seaside Resort & Spa", "45 Beach Road", 5, 9.2, 1523, 2.0,
     ["Beachfront", "Pool", "Spa", "Fine Dining"], "2 km from center"),
    ("City Center Inn", "78 Central Ave", 3, 7.8, 956, 0.7,
     ["Free WiFi", "Breakfast", "Parking"], "0.1 km from center"),
    ("Boutique Heritage Hotel", "12 Heritage Lane", 4, 8.9, 1204, 1.5,
     ["Historic Building", "Restaurant", "Bar", "Garden"], "0.8 km from center"),
    ("Budget Comfort Lodge", "99 Traveler Street", 3, 7.2, 678, 0.5,
     ["Free WiFi", "Breakfast Included", "24h Reception"], "1.5 km from center"),
]


def mock_hotels(destination: str, date_range: DateRange, currency: CurrencyCode, filters: HotelFilters) -> List[Hotel]:
    """Deterministic stand-in inventory used when no provider key is configured."""
    base_price = min(filters.max_price * 0.6, 150) if filters.max_price else 150
    hotels = []
    for idx, (name, street, stars, score, count, factor, amenities, distance) in enumerate(_MOCK_INVENTORY, start=1):
        per_night = float(round(base_price * factor))
        hotels.append(
            Hotel(
                id=f"mock_{idx}",
                name=name,
                address=f"{street}, {destination}",
                city=destination,
                rating=stars,
                review_score=score,
                review_score_word=review_word(score),
                review_count=count,
                price=per_night * date_range.nights,
                price_per_night=per_night,
                currency=str(currency),
                booking_url="https://www.booking.com",
                amenities=amenities,
                distance_from_center=distance,
            )
        )
    if filters.min_price:
        hotels = [h for h in hotels if h.price_per_night >= filters.min_price]
    if filters.max_price:
        hotels = [h for h in hotels if h.price_per_night <= filters.max_price]
    return hotels


class BookingClient:
    """Booking.com search through RapidAPI, priced in one currency only."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient],
        api_key: Optional[str] = None,
        host: Optional[str] = None,
        max_results: int = 10,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._host = host or CONFIG.booking_host
        self._max_results = max_results

    @classmethod
    def from_config(cls, client: Optional[httpx.AsyncClient]) -> "BookingClient":
        return cls(client, api_key=CONFIG.rapidapi_key)

    @property
    def is_live(self) -> bool:
        return bool(self._api_key) and self._client is not None

    async def _get(self, fn: str, path: str, params: Dict[str, Any]) -> Any:
        start_time = time.monotonic()
        headers = {"X-RapidAPI-Key": self._api_key or "", "X-RapidAPI-Host": self._host}
        try:
            resp = await self._client.get(f"https://{self._host}{path}", params=params, headers=headers)
        except httpx.HTTPError as e:
            raise ExternalProviderError("Booking.com", str(e))
        latency_ms = (time.monotonic() - start_time) * 1000
        log_data = {
            "ts": datetime.utcnow().isoformat(),
            "tool": "booking",
            "fn": fn,
            "latency_ms": f"{latency_ms:.2f}",
            "ok": resp.status_code == 200,
            "http_status": resp.status_code,
        }
        logging.info(json.dumps(log_data))
        if resp.status_code != 200:
            raise ExternalProviderError("Booking.com", f"HTTP {resp.status_code}", resp.status_code)
        return resp.json()

    async def destination_id(self, destination: str) -> Optional[str]:
        data = await self._get("locations", "/v1/hotels/locations", {"name": destination, "locale": "en-gb"})
        if not isinstance(data, list) or not data:
            return None
        for item in data:
            if item.get("dest_type") in ("city", "region"):
                return str(item.get("dest_id"))
        return str(data[0].get("dest_id"))

    def _to_hotel(self, raw: Dict[str, Any], destination: str, date_range: DateRange) -> Hotel:
        breakdown = raw.get("composite_price_breakdown") or {}
        total = raw.get("min_total_price") or (breakdown.get("gross_amount") or {}).get("value") or 0
        per_night = (breakdown.get("gross_amount_per_night") or {}).get("value")
        if not per_night:
            per_night = math.floor(float(total) / date_range.nights + 0.5) if total else 0
        photo = raw.get("main_photo_url") or ""
        return Hotel(
            id=str(raw.get("hotel_id")),
            name=raw.get("hotel_name") or "",
            address=raw.get("address") or "",
            city=raw.get("city") or destination,
            country=raw.get("country_trans") or "",
            photo_url=photo.replace("square60", "square300") or raw.get("max_photo_url") or "",
            rating=int(raw.get("class") or 0),
            review_score=float(raw.get("review_score") or 0),
            review_score_word=raw.get("review_score_word") or review_word(raw.get("review_score")),
            review_count=int(raw.get("review_nr") or 0),
            price=float(total),
            price_per_night=float(per_night),
            currency=raw.get("currencycode") or "",
            booking_url=raw.get("url") or f"https://www.booking.com/hotel/{raw.get('hotel_id')}.html",
            amenities=list(raw.get("hotel_facilities") or [])[:5],
            distance_from_center=f"{raw['distance_to_cc']} km from center" if raw.get("distance_to_cc") else "",
            lat=raw.get("latitude"),
            lng=raw.get("longitude"),
        )

    async def search(
        self,
        destination: str,
        date_range: DateRange,
        occupancy: Occupancy,
        currency: CurrencyCode,
        filters: HotelFilters,
    ) -> List[Hotel]:
        if not self.is_live:
            logging.info(json.dumps({"ts": datetime.utcnow().isoformat(), "tool": "booking", "fn": "search", "mock": True}))
            return mock_hotels(destination, date_range, currency, filters)

        dest_id = await self.destination_id(destination)
        if dest_id is None:
            return []

        params: Dict[str, Any] = {
            "dest_id": dest_id,
            "dest_type": "city",
            "checkin_date": date_range.check_in.isoformat(),
            "checkout_date": date_range.check_out.isoformat(),
            "adults_number": str(occupancy.adults),
            "room_number": str(occupancy.rooms),
            "units": "metric",
            "locale": "en-gb",
            "currency": str(currency),
            "filter_by_currency": str(currency),
            "order_by": filters.sort_by,
        }
        if filters.min_price:
            params["price_min"] = str(filters.min_price)
        if filters.max_price:
            params["price_max"] = str(filters.max_price)

        data = await self._get("search", "/v1/hotels/search", params)
        rows = (data or {}).get("result") or []

        hotels: List[Hotel] = []
        for raw in rows[: self._max_results]:
            hotel = self._to_hotel(raw, destination, date_range)
            if hotel.currency and hotel.currency.upper() != str(currency):
                logging.warning(json.dumps({
                    "ts": datetime.utcnow().isoformat(),
                    "tool": "booking",
                    "event": "currency_mismatch",
                    "expected": str(currency),
                    "received": hotel.currency,
                    "hotel_id": hotel.id,
                }))
                continue
            hotels.append(hotel.model_copy(update={"currency": str(currency)}))
        return hotels
