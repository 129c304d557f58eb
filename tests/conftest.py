from datetime import date
from typing import Dict, List, Optional, Tuple

import pytest

from trip_tools.booking import BookingClient
from trip_tools.currency.resolver import resolve
from trip_tools.errors import ExternalProviderError
from trip_tools.geocoding import GeocodingPipeline, GeoHit
from trip_tools.models import GeoPoint
from trip_tools.registry import ToolContext
from trip_tools.store import InMemoryTripStore


TODAY = date(2026, 1, 1)


class FakeGeoProvider:
    """Answers from fixed tables and records every call it receives."""

    name = "fake"

    def __init__(
        self,
        text_hits: Optional[Dict[str, Tuple[float, float]]] = None,
        geocode_hits: Optional[Dict[str, Tuple[float, float]]] = None,
        failing: Tuple[str, ...] = (),
    ) -> None:
        self.text_hits = text_hits or {}
        self.geocode_hits = geocode_hits or {}
        self.failing = failing
        self.calls: List[Tuple[str, str]] = []

    def _answer(self, table: Dict[str, Tuple[float, float]], query: str) -> Optional[GeoHit]:
        if query in self.failing:
            raise ExternalProviderError("fake", "boom")
        if query not in table:
            return None
        lat, lng = table[query]
        return GeoHit(coordinates=GeoPoint(lat=lat, lng=lng), address=query)

    async def text_search(self, query: str, category_hint: Optional[str] = None) -> Optional[GeoHit]:
        self.calls.append(("text_search", query))
        return self._answer(self.text_hits, query)

    async def geocode(self, address: str) -> Optional[GeoHit]:
        self.calls.append(("geocode", address))
        return self._answer(self.geocode_hits, address)


def make_ctx(
    user_id: Optional[str] = "user-1",
    currency: str = "USD",
    store: Optional[InMemoryTripStore] = None,
    provider: Optional[FakeGeoProvider] = None,
) -> ToolContext:
    return ToolContext(
        user_id=user_id,
        currency=resolve(override=currency),
        store=store or InMemoryTripStore(),
        pipeline=GeocodingPipeline(provider or FakeGeoProvider(), delay_sec=0),
        booking=BookingClient(None),
        today=TODAY,
    )


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def ctx() -> ToolContext:
    return make_ctx()
