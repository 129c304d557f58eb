from typing import Any, Dict, Optional

from pydantic import Field

from ..booking import HotelFilters, Occupancy, SortBy
from ..currency.codes import CurrencyCode
from ..currency.format import format_price, format_price_compact, format_price_range
from ..dates import assert_valid_date_range, relative_description
from ..errors import ToolError, ValidationError
from ..registry import Tool, ToolArgs, ToolContext


class SearchHotelsArgs(ToolArgs):
    destination: str = Field(description="City or destination name, e.g. 'Colombo', 'Sri Lanka', 'Bali'")
    check_in_date: str = Field(description="Check-in date in YYYY-MM-DD format")
    check_out_date: str = Field(description="Check-out date in YYYY-MM-DD format")
    adults: int = Field(default=2, ge=1, description="Number of adults (default: 2)")
    rooms: int = Field(default=1, ge=1, description="Number of rooms (default: 1)")
    currency: Optional[str] = Field(
        default=None, description="Currency code; must match the user's currency when given"
    )
    min_price: Optional[float] = Field(default=None, ge=0, description="Minimum price per night in the user's currency")
    max_price: Optional[float] = Field(
        default=None,
        gt=0,
        description="Maximum price per night - use this when user mentions 'budget', 'cheap', 'affordable', 'mid-range', etc.",
    )
    sort_by: SortBy = Field(default="popularity", description="Sort results by: popularity, price, review_score, or distance")


class HotelDetailsArgs(ToolArgs):
    hotel_id: str = Field(description="The hotel ID from search results")
    check_in_date: Optional[str] = Field(default=None, description="Check-in date in YYYY-MM-DD format")
    check_out_date: Optional[str] = Field(default=None, description="Check-out date in YYYY-MM-DD format")


def request_currency(requested: Optional[str], ctx: ToolContext) -> CurrencyCode:
    """The conversation's currency; a different explicit request is refused."""
    resolved = ctx.currency.currency
    if requested is None:
        return resolved
    code = CurrencyCode(requested)
    if code != resolved:
        raise ValidationError(
            f"Prices in this conversation are quoted in {resolved}; {code} was requested. "
            f"Search again without a currency or with {resolved}."
        )
    return code


async def search_hotels(args: SearchHotelsArgs, ctx: ToolContext) -> Dict[str, Any]:
    date_range = assert_valid_date_range(args.check_in_date, args.check_out_date, today=ctx.today)
    currency = request_currency(args.currency, ctx)

    hotels = await ctx.booking.search(
        args.destination,
        date_range,
        Occupancy(adults=args.adults, rooms=args.rooms),
        currency,
        HotelFilters(min_price=args.min_price, max_price=args.max_price, sort_by=args.sort_by),
    )
    if not hotels:
        raise ToolError(f"No hotels found in {args.destination} for the selected dates")

    cards = []
    for h in hotels:
        card = h.model_dump(by_alias=True)
        card["priceFormatted"] = format_price(h.price, str(currency))
        card["pricePerNightFormatted"] = format_price(h.price_per_night, str(currency))
        card["pricePerNightCompact"] = format_price_compact(h.price_per_night, str(currency))
        cards.append(card)

    nightly = [h.price_per_night for h in hotels]
    return {
        "destination": args.destination,
        "checkInDate": date_range.check_in.isoformat(),
        "checkOutDate": date_range.check_out.isoformat(),
        "checkInRelative": relative_description(date_range.check_in.isoformat(), today=ctx.today),
        "nights": date_range.nights,
        "currency": str(currency),
        "priceRange": format_price_range(min(nightly), max(nightly), str(currency)),
        "hotelCount": len(cards),
        "hotels": cards,
        "message": f"Found {len(cards)} hotels in {args.destination}",
        "displayType": "hotelCarousel",
    }


async def get_hotel_details(args: HotelDetailsArgs, ctx: ToolContext) -> Dict[str, Any]:
    return {
        "message": "To view full details and book this hotel, please click the booking link on the hotel card.",
        "hotelId": args.hotel_id,
        "note": "Full hotel details and booking functionality available through Booking.com",
    }


TOOLS = [
    Tool(
        name="search_hotels",
        description=(
            "Search for hotels at a destination using Booking.com. Use this when the user asks about places to stay, "
            "wants hotel recommendations, mentions budget constraints for hotels, or needs hotels for specific dates. "
            "Results are displayed as clickable cards; afterwards give a brief summary. "
            "Date format must be YYYY-MM-DD."
        ),
        args_model=SearchHotelsArgs,
        handler=search_hotels,
    ),
    Tool(
        name="get_hotel_details",
        description=(
            "Get detailed information about a specific hotel. Use this when a user wants more information about "
            "a particular hotel they've seen."
        ),
        args_model=HotelDetailsArgs,
        handler=get_hotel_details,
    ),
]
