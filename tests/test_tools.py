import asyncio

import pytest

from trip_tools.models import ToolInvocation, TripStatus
from trip_tools.registry import Tool, ToolArgs, ToolRegistry
from trip_tools.store import InMemoryTripStore
from trip_tools.toolset import default_registry

from conftest import FakeGeoProvider, make_ctx


REGISTRY = default_registry()


def invoke(ctx, name, registry=REGISTRY, **arguments):
    outcome = asyncio.run(registry.invoke(ToolInvocation(id="call_1", name=name, arguments=arguments), ctx))
    assert outcome.name == name
    return outcome.result


# --- Registry envelope -------------------------------------------------------

def test_every_envelope_echoes_date_and_currency(ctx):
    result = invoke(ctx, "no_such_tool")
    assert result["success"] is False
    assert result["error"] == "Unknown tool: no_such_tool"
    assert result["context"] == {"currentDate": "2026-01-01", "currency": "USD"}


def test_bad_arguments_become_validation_errors(ctx):
    result = invoke(ctx, "search_hotels", destination="Colombo")
    assert result["success"] is False
    assert result["errorType"] == "validation_error"
    assert "checkInDate" in result["error"]


def test_missing_identity_is_reported_not_raised():
    result = invoke(make_ctx(user_id=None), "get_wishlist")
    assert result == {
        "success": False,
        "error": "User not authenticated",
        "errorType": "not_authenticated",
        "context": {"currentDate": "2026-01-01", "currency": "USD"},
    }


def test_unexpected_crash_is_contained(ctx):
    async def explode(args, ctx):
        raise RuntimeError("kaboom")

    registry = ToolRegistry([Tool(name="explode", description="", args_model=ToolArgs, handler=explode)])
    result = invoke(ctx, "explode", registry=registry)
    assert result["success"] is False
    assert result["errorType"] == "internal_error"
    assert result["error"] == "kaboom"


def test_registry_refuses_duplicate_names():
    registry = default_registry()
    with pytest.raises(ValueError):
        registry.register(registry.get("save_trip"))


def test_declarations_use_camel_case_arguments():
    decls = {d["name"]: d for d in REGISTRY.declarations()}
    assert set(decls) == set(REGISTRY.names)
    props = decls["search_hotels"]["parameters"]["properties"]
    assert {"checkInDate", "checkOutDate", "maxPrice"} <= set(props)


# --- Wishlist ----------------------------------------------------------------

def test_adding_the_same_destination_twice_keeps_one_entry(ctx):
    first = invoke(ctx, "add_to_wishlist", destinationName="Bali", destinationId="ID", country="Indonesia")
    second = invoke(ctx, "add_to_wishlist", destinationName="Bali", destinationId="id")

    assert first["data"]["action"] == "added"
    assert second["success"] is True
    assert second["data"]["action"] == "exists"
    assert second["data"]["wishlistId"] == first["data"]["wishlistId"]
    assert len(invoke(ctx, "get_wishlist")["data"]["wishlist"]) == 1


def test_concurrent_adds_do_not_duplicate(ctx):
    registry = REGISTRY

    async def race():
        calls = [
            registry.invoke(
                ToolInvocation(id=f"c{i}", name="add_to_wishlist", arguments={"destinationName": "Japan", "destinationId": "JP"}),
                ctx,
            )
            for i in range(5)
        ]
        return await asyncio.gather(*calls)

    outcomes = asyncio.run(race())
    actions = sorted(o.result["data"]["action"] for o in outcomes)
    assert actions == ["added", "exists", "exists", "exists", "exists"]
    rows = asyncio.run(ctx.store.list("user-1", TripStatus.WISHLIST))
    assert len(rows) == 1
    assert rows[0].title == "Japan (JP)"
    assert rows[0].preferences.iso2 == "JP"


def test_remove_by_name_substring_then_not_found(ctx):
    invoke(ctx, "add_to_wishlist", destinationName="Bali", destinationId="ID")
    removed = invoke(ctx, "remove_from_wishlist", destinationName="bal")
    assert removed["data"]["action"] == "removed"

    again = invoke(ctx, "remove_from_wishlist", destinationName="bal")
    assert again["success"] is False
    assert again["errorType"] == "persistence_conflict"
    assert again["error"] == "Couldn't find that destination in your wishlist."


def test_remove_needs_an_id_or_a_name(ctx):
    assert invoke(ctx, "remove_from_wishlist")["errorType"] == "validation_error"


def test_blank_name_removes_nothing(ctx):
    invoke(ctx, "add_to_wishlist", destinationName="Bali", destinationId="ID")
    result = invoke(ctx, "remove_from_wishlist", destinationName="  ", destinationId="")
    assert result["errorType"] == "validation_error"
    rows = asyncio.run(ctx.store.list("user-1", TripStatus.WISHLIST))
    assert [r.preferences.destination_name for r in rows] == ["Bali"]


# --- Trips -------------------------------------------------------------------

def test_save_trip_derives_country_and_length_from_dates(ctx):
    result = invoke(
        ctx,
        "save_trip",
        title="India Getaway",
        startDate="2026-02-01",
        endDate="2026-02-07",
        country="India",
        preferences={"pace": "slow", "description": "first visit"},
    )
    assert result["success"] is True
    trip = result["data"]["trip"]
    assert (trip["country"], trip["iso2"]) == ("India", "IN")

    record = asyncio.run(ctx.store.get("user-1", result["data"]["tripId"]))
    assert (record.preferences.days, record.preferences.nights) == (7, 6)
    assert record.preferences.currency == "USD"
    assert record.preferences.description == "first visit"
    assert record.preferences.extra == {"pace": "slow"}


def test_save_trip_falls_back_to_destinations_and_itinerary_length(ctx):
    result = invoke(
        ctx,
        "save_trip",
        title="Japan loop",
        destinations=["Japan", "Tokyo"],
        itinerary=[
            {"day": 1, "location": "Tokyo"},
            {"day": 2, "location": "Kyoto"},
            {"day": 3, "location": "Osaka"},
        ],
    )
    record = asyncio.run(ctx.store.get("user-1", result["data"]["tripId"]))
    assert record.preferences.iso2 == "JP"
    assert (record.preferences.days, record.preferences.nights) == (3, 2)


def test_save_trip_rejects_end_before_start(ctx):
    result = invoke(ctx, "save_trip", title="Backwards", startDate="2026-02-07", endDate="2026-02-01")
    assert result["errorType"] == "validation_error"


def test_trip_list_update_and_delete(ctx):
    invoke(ctx, "add_to_wishlist", destinationName="Bali", destinationId="ID")
    trip_id = invoke(ctx, "save_trip", title="Paris", country="France", preferences={"pace": "fast"})["data"]["tripId"]

    trips = invoke(ctx, "get_user_trips")["data"]["trips"]
    assert [t["id"] for t in trips] == [trip_id]

    updated = invoke(ctx, "update_trip", tripId=trip_id, title="Paris in spring", preferences={"budget": "mid"})
    assert updated["data"]["trip"]["title"] == "Paris in spring"
    record = asyncio.run(ctx.store.get("user-1", trip_id))
    assert record.preferences.extra == {"pace": "fast", "budget": "mid"}
    assert record.preferences.iso2 == "FR"

    other_user = make_ctx(user_id="user-2", store=ctx.store)
    assert invoke(other_user, "delete_trip", tripId=trip_id)["errorType"] == "persistence_conflict"

    assert invoke(ctx, "delete_trip", tripId=trip_id)["success"] is True
    assert invoke(ctx, "get_user_trips")["data"]["trips"] == []


# --- Hotels ------------------------------------------------------------------

def test_hotel_search_is_priced_in_the_context_currency():
    ctx = make_ctx(currency="INR")
    result = invoke(ctx, "search_hotels", destination="Goa", checkInDate="2026-01-05", checkOutDate="2026-01-10")
    data = result["data"]
    assert data["currency"] == "INR"
    assert data["nights"] == 5
    assert data["displayType"] == "hotelCarousel"
    assert all(h["currency"] == "INR" for h in data["hotels"])
    assert data["hotels"][0]["pricePerNightFormatted"].startswith("₹")
    assert data["hotels"][0]["pricePerNightCompact"].startswith("₹")
    assert data["checkInRelative"] == "in 4 days"


def test_hotel_search_refuses_a_second_currency(ctx):
    result = invoke(
        ctx, "search_hotels", destination="Goa", checkInDate="2026-01-05", checkOutDate="2026-01-10", currency="EUR"
    )
    assert result["success"] is False
    assert result["errorType"] == "validation_error"
    assert "quoted in USD" in result["error"]


def test_hotel_search_validates_dates_first(ctx):
    result = invoke(ctx, "search_hotels", destination="Goa", checkInDate="2020-01-01", checkOutDate="2020-01-05")
    assert "cannot be in the past" in result["error"]


def test_hotel_search_applies_price_ceiling(ctx):
    data = invoke(
        ctx, "search_hotels", destination="Goa", checkInDate="2026-01-05", checkOutDate="2026-01-06", maxPrice=100
    )["data"]
    assert data["hotelCount"] == 4
    assert max(h["pricePerNight"] for h in data["hotels"]) <= 100


# --- Itinerary ---------------------------------------------------------------

def test_itinerary_reports_partial_resolution():
    provider = FakeGeoProvider(text_hits={"Ubud, Indonesia": (-8.5, 115.26)})
    ctx = make_ctx(provider=provider)
    result = invoke(
        ctx,
        "create_itinerary_with_map",
        title="Bali Week",
        country="Indonesia",
        startDate="2026-03-01",
        days=[
            {"location": "Ubud", "places": [{"name": "Sari Organik", "type": "restaurants"}]},
            {"location": "Atlantis"},
        ],
    )
    assert result["success"] is True
    data = result["data"]
    assert "(1/2 locations could be placed on the map)" in data["message"]

    itinerary = data["itinerary"]
    assert [d["date"] for d in itinerary["days"]] == ["2026-03-01", "2026-03-02"]
    assert itinerary["end_date"] == "2026-03-03"
    assert itinerary["locations"][0]["active"] is True
    place = itinerary["days"][0]["places"][0]
    assert place["category"] == "food"
    assert (place["coordinates"]["lat"], place["coordinates"]["lng"]) == (-8.5, 115.26)
    assert data["resolution"]["places_inherited"] == 1


def test_itinerary_rejects_bad_start_date_before_geocoding():
    provider = FakeGeoProvider()
    result = invoke(
        make_ctx(provider=provider),
        "create_itinerary_with_map",
        title="Trip",
        country="Japan",
        startDate="someday",
        days=[{"location": "Tokyo"}],
    )
    assert result["errorType"] == "validation_error"
    assert provider.calls == []


def test_itinerary_refuses_a_start_date_in_the_past():
    provider = FakeGeoProvider()
    result = invoke(
        make_ctx(provider=provider),
        "create_itinerary_with_map",
        title="Trip",
        country="Japan",
        startDate="2025-12-01",
        days=[{"location": "Tokyo"}],
    )
    assert result["errorType"] == "validation_error"
    assert "Start date (2025-12-01) cannot be in the past" in result["error"]
    assert provider.calls == []


# --- Catalog tools -----------------------------------------------------------

def test_convert_currency_defaults_to_context_currency():
    data = invoke(make_ctx(currency="EUR"), "convert_currency", amount=100, fromCurrency="USD")["data"]
    assert data["converted"] == {"amount": 92.0, "currency": "EUR", "formatted": "€92.00"}


def test_convert_currency_rejects_unknown_codes(ctx):
    result = invoke(ctx, "convert_currency", amount=5, fromCurrency="XYZ", toCurrency="USD")
    assert result["errorType"] == "validation_error"


def test_destination_search_quotes_budgets_in_context_currency():
    data = invoke(make_ctx(currency="INR"), "search_destinations", tripType="budget")["data"]
    names = {d["name"] for d in data["destinations"]}
    assert names == {"Thailand", "Vietnam"}
    assert all(d["currency"] == "INR" for d in data["destinations"])


def test_destination_info_miss_is_a_tool_error(ctx):
    result = invoke(ctx, "get_destination_info", destinationName="Atlantis")
    assert result["success"] is False
    assert result["errorType"] == "tool_error"


def test_store_isolated_per_user():
    store = InMemoryTripStore()
    invoke(make_ctx(user_id="a", store=store), "add_to_wishlist", destinationName="Bali", destinationId="ID")
    assert invoke(make_ctx(user_id="b", store=store), "get_wishlist")["data"]["wishlist"] == []
