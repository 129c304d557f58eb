from typing import Any, Dict, List, Literal, Optional
from datetime import date

from pydantic import Field

from ..currency.codes import CountryCode
from ..currency.tables import COUNTRY_NAME_TO_ISO2, COUNTRY_TO_CURRENCY
from ..dates import parse_to_canonical
from ..errors import ValidationError
from ..models import Itinerary, TripPreferences, TripRecord, TripStatus
from ..registry import Tool, ToolArgs, ToolContext


class DayPlan(ToolArgs):
    day: int = Field(description="Day number")
    location: str = Field(description="Main location for this day")
    activities: List[str] = Field(default=[], description="List of activities/places to visit")
    accommodation: Optional[str] = Field(default=None, description="Where to stay this night")
    notes: Optional[str] = Field(default=None, description="Additional notes for the day")


class SaveTripArgs(ToolArgs):
    title: str = Field(description="A descriptive title for the trip, e.g. '7-Day Bali Adventure'")
    start_date: Optional[str] = Field(default=None, description="Trip start date in YYYY-MM-DD format")
    end_date: Optional[str] = Field(default=None, description="Trip end date in YYYY-MM-DD format")
    trip_type: str = Field(
        default="custom",
        description="Type of trip: 'adventure', 'relaxation', 'cultural', 'family', 'romantic', 'business', 'custom'",
    )
    number_of_people: int = Field(default=1, ge=1, description="Number of travelers")
    country: Optional[str] = Field(default=None, description="Country name for the trip")
    destinations: List[str] = Field(default=[], description="List of destinations in the trip")
    itinerary: List[DayPlan] = Field(default=[], description="Detailed day-by-day itinerary")
    map_itinerary: Optional[Itinerary] = Field(
        default=None, description="Itinerary object returned by create_itinerary_with_map"
    )
    budget: Optional[float] = Field(default=None, description="Total estimated budget")
    preferences: Dict[str, Any] = Field(default={}, description="Additional preferences and details")


class GetTripsArgs(ToolArgs):
    status: Optional[Literal["planned", "completed"]] = Field(default=None, description="Filter by trip status")


class UpdateTripArgs(ToolArgs):
    trip_id: str = Field(description="The ID of the trip to update")
    title: Optional[str] = Field(default=None, description="New title for the trip")
    start_date: Optional[str] = Field(default=None, description="New start date in YYYY-MM-DD format")
    end_date: Optional[str] = Field(default=None, description="New end date in YYYY-MM-DD format")
    trip_type: Optional[str] = Field(default=None, description="New trip type")
    number_of_people: Optional[int] = Field(default=None, ge=1, description="Updated number of travelers")
    status: Optional[Literal["planned", "completed"]] = Field(default=None, description="Update trip status")
    preferences: Optional[Dict[str, Any]] = Field(default=None, description="Updated preferences")


class DeleteTripArgs(ToolArgs):
    trip_id: str = Field(description="The ID of the trip to delete")


def country_iso2(name: Optional[str]) -> Optional[str]:
    """ISO2 for a country name, or for a value that already is an ISO2 code."""
    if not name:
        return None
    key = name.strip().upper()
    if key in COUNTRY_NAME_TO_ISO2:
        return COUNTRY_NAME_TO_ISO2[key]
    code = CountryCode.parse(key)
    if code is not None and str(code) in COUNTRY_TO_CURRENCY:
        return str(code)
    return None


def derive_country(args: SaveTripArgs) -> tuple[Optional[str], Optional[str]]:
    candidates = [args.country]
    if args.destinations:
        candidates.append(args.destinations[0])
    if args.map_itinerary is not None:
        candidates.append(args.map_itinerary.country)
    for candidate in candidates:
        if not candidate:
            continue
        iso2 = country_iso2(candidate)
        if iso2 is not None:
            return candidate.strip(), iso2
    # Nothing recognizable: keep the first name we were given.
    first = next((c for c in candidates if c), None)
    return (first.strip() if first else None), None


def _canonical(value: Optional[str], label: str, today: date) -> Optional[str]:
    if not value:
        return None
    iso = parse_to_canonical(value, today=today)
    if iso is None:
        raise ValidationError(f'Invalid {label}: "{value}". Please use YYYY-MM-DD format.')
    return iso


def derive_length(start: Optional[str], end: Optional[str], args: SaveTripArgs) -> tuple[Optional[int], Optional[int]]:
    if start and end:
        span = (date.fromisoformat(end) - date.fromisoformat(start)).days
        if span < 0:
            raise ValidationError(f"End date ({end}) must not be before start date ({start}).")
        return span + 1, span
    if args.map_itinerary is not None and args.map_itinerary.total_days:
        days = args.map_itinerary.total_days
    else:
        days = len(args.itinerary)
    if not days:
        return None, None
    return days, max(days - 1, 0)


_PREFERENCE_FIELDS = set(TripPreferences.model_fields) - {"version", "kind", "extra"}


def split_preferences(raw: Dict[str, Any]) -> tuple[Dict[str, Any], Dict[str, Any]]:
    known = {k: v for k, v in raw.items() if k in _PREFERENCE_FIELDS}
    extra = {k: v for k, v in raw.items() if k not in _PREFERENCE_FIELDS}
    return known, extra


async def save_trip(args: SaveTripArgs, ctx: ToolContext) -> Dict[str, Any]:
    user_id = ctx.require_user()
    start = _canonical(args.start_date, "start date", ctx.today)
    end = _canonical(args.end_date, "end date", ctx.today)
    days, nights = derive_length(start, end, args)
    country, iso2 = derive_country(args)

    known, extra = split_preferences(args.preferences)
    prefs = TripPreferences(
        **{
            **known,
            "kind": "trip",
            "country": country,
            "iso2": iso2,
            "destinations": args.destinations,
            "itinerary": args.map_itinerary,
            "day_plans": [d.model_dump() for d in args.itinerary],
            "days": days,
            "nights": nights,
            "currency": str(ctx.currency.currency),
            "extra": extra,
        }
    )
    record = await ctx.store.insert(
        TripRecord(
            id="",
            user_id=user_id,
            title=args.title,
            start_date=start,
            end_date=end,
            trip_type=args.trip_type or "custom",
            number_of_people=args.number_of_people,
            status=TripStatus.PLANNED,
            preferences=prefs,
            total_budget=args.budget,
        )
    )
    return {
        "message": f'Trip "{args.title}" has been saved successfully!',
        "tripId": record.id,
        "trip": record.summary(),
    }


async def get_user_trips(args: GetTripsArgs, ctx: ToolContext) -> Dict[str, Any]:
    user_id = ctx.require_user()
    status = TripStatus(args.status) if args.status else None
    rows = [r for r in await ctx.store.list(user_id, status) if r.status != TripStatus.WISHLIST]
    if not rows:
        return {
            "message": "You don't have any saved trips yet. Would you like me to help you plan one?",
            "trips": [],
        }
    return {"message": f"Found {len(rows)} trip(s)", "trips": [r.summary() for r in rows]}


async def update_trip(args: UpdateTripArgs, ctx: ToolContext) -> Dict[str, Any]:
    user_id = ctx.require_user()
    current = await ctx.store.get(user_id, args.trip_id)

    changes: Dict[str, Any] = {}
    if args.title is not None:
        changes["title"] = args.title
    if args.start_date is not None:
        changes["start_date"] = _canonical(args.start_date, "start date", ctx.today)
    if args.end_date is not None:
        changes["end_date"] = _canonical(args.end_date, "end date", ctx.today)
    if args.trip_type is not None:
        changes["trip_type"] = args.trip_type
    if args.number_of_people is not None:
        changes["number_of_people"] = args.number_of_people
    if args.status is not None:
        changes["status"] = TripStatus(args.status)
    if args.preferences is not None:
        known, extra = split_preferences(args.preferences)
        merged = current.preferences.model_dump()
        merged.update(known)
        merged["extra"] = {**current.preferences.extra, **extra}
        changes["preferences"] = TripPreferences.model_validate(merged)

    record = await ctx.store.update(user_id, args.trip_id, changes)
    return {"message": "Trip updated successfully!", "trip": record.summary()}


async def delete_trip(args: DeleteTripArgs, ctx: ToolContext) -> Dict[str, Any]:
    user_id = ctx.require_user()
    await ctx.store.delete(user_id, args.trip_id)
    return {"message": "Trip has been deleted successfully."}


TOOLS = [
    Tool(
        name="save_trip",
        description=(
            "Save a trip plan to the user's account. Use this when the user confirms they want to save their "
            "trip, or asks to save/book the itinerary. Include all the itinerary details, destinations, and dates."
        ),
        args_model=SaveTripArgs,
        handler=save_trip,
        mutates=True,
    ),
    Tool(
        name="get_user_trips",
        description="Get the user's saved trips. Use this when the user asks about their trips, past trips, or saved itineraries.",
        args_model=GetTripsArgs,
        handler=get_user_trips,
    ),
    Tool(
        name="update_trip",
        description="Update an existing trip's details. Use when the user wants to modify dates, add people, or change trip details.",
        args_model=UpdateTripArgs,
        handler=update_trip,
        mutates=True,
    ),
    Tool(
        name="delete_trip",
        description="Delete a saved trip. Use when the user explicitly asks to delete or remove a trip.",
        args_model=DeleteTripArgs,
        handler=delete_trip,
        mutates=True,
    ),
]
