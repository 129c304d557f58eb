from typing import Any, Dict, List, Literal, Optional
import uuid
from datetime import date

from pydantic import Field

from ..dates import add_days, assert_future_date
from ..geocoding import DayQuery, PlaceQuery
from ..models import Day, DayActivities, Itinerary, ItineraryLocation
from ..registry import Tool, ToolArgs, ToolContext


# Place types as the model names them -> itinerary categories.
PLACE_CATEGORIES = {
    "stays": "stay",
    "restaurants": "food",
    "attraction": "attraction",
    "activities": "activity",
}


class PlaceArgs(ToolArgs):
    name: str
    type: Literal["stays", "restaurants", "attraction", "activities"]


class DayArgs(ToolArgs):
    location: str = Field(description="Main city/area for this day")
    activities: List[str] = Field(default=[], description="List of activities for the day")
    morning: Optional[str] = Field(default=None, description="Morning activity description")
    afternoon: Optional[str] = Field(default=None, description="Afternoon activity description")
    evening: Optional[str] = Field(default=None, description="Evening activity description")
    places: List[PlaceArgs] = Field(default=[], description="Specific places mentioned")


class CreateItineraryArgs(ToolArgs):
    title: str = Field(description="Title of the trip, e.g. '7-Day Bali Adventure'")
    country: str = Field(description="Country name for geocoding accuracy")
    days: List[DayArgs] = Field(min_length=1, description="Array of day plans")
    travelers: int = Field(default=1, ge=1, description="Number of travelers")
    trip_type: str = Field(default="custom", description="Type of trip: adventure, relaxation, cultural, etc.")
    start_date: Optional[str] = Field(default=None, description="First day of the trip in YYYY-MM-DD format")


class GeocodeLocationsArgs(ToolArgs):
    locations: List[str] = Field(
        min_length=1, description="Array of location names to geocode, e.g. ['Seminyak', 'Ubud', 'Kuta']"
    )
    country_hint: Optional[str] = Field(
        default=None, description="Country name to improve accuracy, e.g. 'Indonesia' or 'Thailand'"
    )


def _start_date(value: Optional[str], today: date) -> date:
    if not value:
        return today
    return date.fromisoformat(assert_future_date(value, "Start date", today=today))


async def create_itinerary_with_map(args: CreateItineraryArgs, ctx: ToolContext) -> Dict[str, Any]:
    start = _start_date(args.start_date, ctx.today)
    queries = [
        DayQuery(
            location=d.location,
            places=[PlaceQuery(name=p.name, category=PLACE_CATEGORIES[p.type]) for p in d.places],
        )
        for d in args.days
    ]
    resolution = await ctx.pipeline.resolve_itinerary(queries, region=args.country)

    locations = [
        ItineraryLocation(id=f"loc_{idx}", name=name, coordinates=hit.coordinates, active=idx == 0)
        for idx, (name, hit) in enumerate(resolution.locations.items())
    ]

    days: List[Day] = []
    for idx, (day, places) in enumerate(zip(args.days, resolution.days)):
        days.append(
            Day(
                day_number=idx + 1,
                date=add_days(idx, start),
                location=day.location,
                title=f"Day {idx + 1}: {day.location}",
                description="\n".join(day.activities),
                coordinates=resolution.locations[day.location].coordinates,
                activities=DayActivities(morning=day.morning, afternoon=day.afternoon, evening=day.evening),
                places=places,
            )
        )

    itinerary = Itinerary(
        id=f"trip_{uuid.uuid4().hex[:12]}",
        title=args.title,
        country=args.country,
        total_days=len(days),
        travelers=args.travelers,
        trip_type=args.trip_type,
        start_date=start.isoformat(),
        end_date=add_days(len(days), start),
        locations=locations,
        days=days,
    )

    report = resolution.report
    message = f"Created {len(days)}-day itinerary for {args.title} with map coordinates"
    if report.locations_resolved < report.locations_total:
        message += (
            f" ({report.locations_resolved}/{report.locations_total} locations could be placed on the map)"
        )
    return {
        "message": message,
        "itinerary": itinerary.model_dump(mode="json"),
        "resolution": report.model_dump(),
    }


async def geocode_locations(args: GeocodeLocationsArgs, ctx: ToolContext) -> Dict[str, Any]:
    results = await ctx.pipeline.geocode_locations(args.locations, args.country_hint)
    resolved = sum(1 for r in results if not (r["lat"] == 0 and r["lng"] == 0))
    return {"locations": results, "resolved": resolved, "total": len(results)}


TOOLS = [
    Tool(
        name="create_itinerary_with_map",
        description=(
            "Create a structured day-by-day itinerary with geocoded locations for map display. Use this INSTEAD of "
            "writing itinerary text when the user wants a complete trip plan. This will automatically geocode all "
            "locations and return structured data for the map."
        ),
        args_model=CreateItineraryArgs,
        handler=create_itinerary_with_map,
    ),
    Tool(
        name="geocode_locations",
        description=(
            "Get coordinates (latitude/longitude) for places in an itinerary. Call this with all the main "
            "locations/cities in the trip."
        ),
        args_model=GeocodeLocationsArgs,
        handler=geocode_locations,
    ),
]
